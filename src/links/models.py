from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database import DbBase, generate_id, utcnow
from src.tags.models import Tag
from src.workspaces.models import Workspace  # noqa: F401

link_tags = Table(
    "link_tags",
    DbBase.metadata,
    Column("link_id", String, ForeignKey("links.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Link(DbBase):
    __tablename__ = "links"
    __table_args__ = (UniqueConstraint("domain", "key"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_id)
    domain: Mapped[str] = mapped_column(String, nullable=False, index=True)
    key: Mapped[str] = mapped_column(String, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    expired_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    password: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    proxy: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    utm_source: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_medium: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_campaign: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_term: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    utm_content: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    rewrite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ios: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    android: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    geo: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    public_stats: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    check_disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # меняются только сервисом редиректов
    clicks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_clicked: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    user_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    workspace_id: Mapped[str] = mapped_column(String, ForeignKey("workspaces.id"), index=True, nullable=False)
    tags: Mapped[List[Tag]] = relationship("Tag", secondary=link_tags, lazy="selectin")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
