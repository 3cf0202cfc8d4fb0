import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.validation import require_text

SLUG_REGEX = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


class CreateWorkspaceRequest(BaseModel):
    name: str = Field(examples=["Acme"])
    slug: str = Field(examples=["acme"])

    @field_validator("name")
    def validate_name(cls, value: str) -> str:
        return require_text(value.strip(), "Name")

    @field_validator("slug")
    def validate_slug(cls, value: str) -> str:
        value = require_text(value.strip().lower(), "Slug")
        if not SLUG_REGEX.fullmatch(value):
            raise ValueError("Slug can only contain lowercase letters, numbers and hyphens")
        return value


class WorkspaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    slug: str
    logo: Optional[str] = None
    plan: str
    stripe_id: Optional[str] = Field(default=None, alias="stripeId")
    usage: int
    usage_limit: int = Field(alias="usageLimit")
    links_usage: int = Field(alias="linksUsage")
    links_limit: int = Field(alias="linksLimit")
    domains_limit: int = Field(alias="domainsLimit")
    tags_limit: int = Field(alias="tagsLimit")
    users_limit: int = Field(alias="usersLimit")
    ai_usage: int = Field(alias="aiUsage")
    ai_limit: int = Field(alias="aiLimit")
    monitoring_id: Optional[str] = Field(default=None, alias="monitoringId")
    billing_cycle_start: int = Field(alias="billingCycleStart")
    invite_code: Optional[str] = Field(default=None, alias="inviteCode")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
