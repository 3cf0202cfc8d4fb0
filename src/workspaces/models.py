import secrets
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database import DbBase, generate_id, utcnow


class Workspace(DbBase):
    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    logo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # лимиты бесплатного тарифа
    plan: Mapped[str] = mapped_column(String, nullable=False, default="free")
    stripe_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, unique=True)
    usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    usage_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    links_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    links_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=25)
    domains_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    tags_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    users_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    ai_usage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ai_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    monitoring_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, unique=True)
    billing_cycle_start: Mapped[int] = mapped_column(Integer, nullable=False, default=lambda: utcnow().day)
    invite_code: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, unique=True, default=lambda: secrets.token_hex(12)
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
