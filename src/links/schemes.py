from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from src.links.constants import BOOLEAN_QUERY_VALUES, COUNTRY_CODES, DOMAIN_REGEX, GROUP_BY_FIELDS, SORT_FIELDS
from src.links.utils import merge_tag_ids, normalize_url, split_values
from src.tags.schemes import TagResponse
from src.validation import ErrorCode, one_of, require_text


def parse_url(value: str) -> str:
    try:
        return normalize_url(value)
    except ValueError:
        raise PydanticCustomError(
            ErrorCode.INVALID_URL.value,
            "Invalid URL: '{value}'",
            {"value": value}
        )


def parse_boolean_query(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in BOOLEAN_QUERY_VALUES:
        return value.lower() == "true"
    raise PydanticCustomError(
        ErrorCode.INVALID_ENUM_VALUE.value,
        "Invalid value '{value}', expected 'true' or 'false'",
        {"value": str(value), "allowed": list(BOOLEAN_QUERY_VALUES)}
    )


def parse_country_code(value: str) -> str:
    if value not in COUNTRY_CODES:
        raise PydanticCustomError(
            ErrorCode.INVALID_GEO_ENTRY.value,
            "Unknown country code '{country_code}'",
            {"country_code": value}
        )
    return value


def parse_geo_url(value: Any) -> str:
    # страна берется из пути ошибки, здесь известно только значение
    try:
        return normalize_url(value)
    except ValueError:
        raise PydanticCustomError(
            ErrorCode.INVALID_GEO_ENTRY.value,
            "Invalid geo URL: '{value}'",
            {"value": str(value)}
        )


NormalizedUrl = Annotated[str, AfterValidator(parse_url)]
CountryCode = Annotated[str, AfterValidator(parse_country_code)]
GeoUrl = Annotated[Any, AfterValidator(parse_geo_url)]
TagList = Annotated[list[str], BeforeValidator(split_values)]
BooleanQuery = Annotated[bool, BeforeValidator(parse_boolean_query)]
SortField = Annotated[Literal["createdAt", "clicks", "lastClicked"], one_of(SORT_FIELDS)]
GroupByField = Annotated[Literal["domain", "tagId"], one_of(GROUP_BY_FIELDS)]


class TagReferences(BaseModel):
    """Tag references accepted both in bodies and in query strings.

    ``tagId`` is the deprecated singular form. After validation it is folded
    into ``tag_ids`` (tagId first, then tagIds, duplicates dropped) and is not
    part of the dumped payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    tag_id: Optional[str] = Field(default=None, alias="tagId", exclude=True)
    tag_ids: TagList = Field(default=None, alias="tagIds")
    tag_names: TagList = Field(default=None, alias="tagNames")

    @model_validator(mode="after")
    def resolve_tag_ids(self):
        if "tag_id" in self.model_fields_set:
            # явный tagId: null сбрасывает теги
            self.tag_ids = merge_tag_ids(self.tag_id, self.tag_ids) or []
        return self


class CreateLinkRequest(TagReferences):
    domain: str = Field(default=None, examples=["dub.sh"])
    key: str = Field(default=None, examples=["github"])
    prefix: str = Field(default=None, examples=["/c/"])
    url: NormalizedUrl = Field(examples=["google.com"])
    archived: StrictBool = False
    public_stats: StrictBool = Field(default=False, alias="publicStats")
    proxy: StrictBool = False
    rewrite: StrictBool = False
    comments: Optional[str] = None
    expires_at: Optional[str] = Field(default=None, alias="expiresAt")
    expired_url: Optional[NormalizedUrl] = Field(default=None, alias="expiredUrl")
    password: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    ios: Optional[NormalizedUrl] = None
    android: Optional[NormalizedUrl] = None
    geo: Optional[dict[CountryCode, GeoUrl]] = Field(default=None, examples=[{"US": "https://google.com"}])


class UpdateLinkRequest(CreateLinkRequest):
    url: NormalizedUrl = Field(default=None, examples=["google.com"])
    archived: StrictBool = None
    public_stats: StrictBool = Field(default=None, alias="publicStats")
    proxy: StrictBool = None
    rewrite: StrictBool = None


class LinksQuery(TagReferences):
    domain: str = None
    search: str = None
    user_id: str = Field(default=None, alias="userId")
    show_archived: BooleanQuery = Field(default=False, alias="showArchived")
    with_tags: BooleanQuery = Field(default=False, alias="withTags")


class GetLinksQuery(LinksQuery):
    sort: SortField = "createdAt"
    page: Optional[int] = Field(default=None, ge=0)


class LinksCountQuery(LinksQuery):
    group_by: Optional[GroupByField] = Field(default=None, alias="groupBy")


class DomainKeyParams(BaseModel):
    domain: str
    key: str

    @field_validator("domain")
    def validate_domain(cls, value: str) -> str:
        require_text(value, "Domain")
        if not DOMAIN_REGEX.fullmatch(value):
            raise PydanticCustomError(
                ErrorCode.INVALID_DOMAIN.value,
                "Invalid domain format: '{value}'",
                {"value": value}
            )
        return value

    @field_validator("key")
    def validate_key(cls, value: str) -> str:
        return require_text(value, "Key")


class LinkResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    domain: str
    key: str
    url: str
    archived: bool = False
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    expired_url: Optional[str] = Field(default=None, alias="expiredUrl")
    password: Optional[str] = None
    proxy: bool = False
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    rewrite: bool = False
    ios: Optional[str] = None
    android: Optional[str] = None
    geo: Optional[dict[str, str]] = None
    public_stats: bool = Field(default=False, alias="publicStats")
    tag_id: Optional[str] = Field(default=None, alias="tagId")
    tags: list[TagResponse] = Field(default_factory=list)
    comments: Optional[str] = None
    short_link: str = Field(alias="shortLink")
    qr_code: str = Field(alias="qrCode")
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    workspace_id: str = Field(alias="workspaceId")
    project_id: str = Field(alias="projectId")
    clicks: int = 0
    last_clicked: Optional[datetime] = Field(default=None, alias="lastClicked")
    check_disabled: bool = Field(default=False, alias="checkDisabled")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
