from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.links.constants import TAG_COLORS
from src.validation import one_of, require_text

TagColor = Annotated[Literal["red", "yellow", "green", "blue", "purple", "pink", "brown"], one_of(TAG_COLORS)]


class CreateTagRequest(BaseModel):
    name: str = Field(examples=["marketing"])
    color: Optional[TagColor] = None

    @field_validator("name")
    def validate_name(cls, value: str) -> str:
        return require_text(value.strip(), "Name")


class TagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    color: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
