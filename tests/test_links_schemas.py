import pytest
from datetime import datetime
from pydantic import ValidationError
from src.links.schemes import (
    CreateLinkRequest,
    DomainKeyParams,
    GetLinksQuery,
    LinkResponse,
    LinksCountQuery,
    UpdateLinkRequest,
)
from src.tags.schemes import CreateTagRequest, TagResponse
from src.workspaces.schemes import CreateWorkspaceRequest


def test_create_link_request_valid():
    request = CreateLinkRequest(
        url="https://google.com",
        domain="dub.sh",
        key="google",
        tagIds=["t1"],
        geo={"US": "https://google.com"}
    )
    assert request.url == "https://google.com"
    assert request.key == "google"
    assert request.tag_ids == ["t1"]


def test_create_link_request_url_autocorrection():
    data = CreateLinkRequest(url="google.com").model_dump()
    assert data["url"] == "https://google.com"


def test_create_link_request_defaults():
    request = CreateLinkRequest(url="google.com")
    assert request.archived is False
    assert request.public_stats is False
    assert request.proxy is False
    assert request.rewrite is False
    assert request.domain is None
    assert request.key is None
    assert request.tag_ids is None
    assert request.tag_names is None
    assert request.geo is None


def test_create_link_request_invalid_url():
    with pytest.raises(ValidationError):
        CreateLinkRequest(url="invalid_url")


def test_create_link_request_rejects_string_booleans():
    with pytest.raises(ValidationError):
        CreateLinkRequest(url="google.com", archived="yes")


def test_create_link_request_populate_by_name():
    request = CreateLinkRequest(url="google.com", public_stats=True, expired_url="example.com")
    assert request.public_stats is True
    assert request.expired_url == "https://example.com"


def test_create_link_request_tag_id_is_folded_into_tag_ids():
    request = CreateLinkRequest(url="google.com", tagId="a", tagIds="b,c")
    assert request.tag_ids == ["a", "b", "c"]
    assert "tag_id" not in request.model_dump()


def test_create_link_request_explicit_null_tag_id_clears_tags():
    request = CreateLinkRequest(url="google.com", tagId=None)
    assert request.tag_ids == []


def test_create_link_request_normalizes_geo():
    request = CreateLinkRequest(url="google.com", geo={"DE": "google.de", "US": "https://google.com"})
    assert request.geo == {"DE": "https://google.de", "US": "https://google.com"}


def test_create_link_request_invalid_geo_country():
    with pytest.raises(ValidationError) as exc_info:
        CreateLinkRequest(url="google.com", geo={"XX": "https://example.com"})
    error = exc_info.value.errors()[0]
    assert error["type"] == "invalid_geo_entry"
    assert error["ctx"]["country_code"] == "XX"


def test_update_link_request_is_partial():
    request = UpdateLinkRequest()
    assert request.model_dump(exclude_unset=True) == {}


def test_update_link_request_keeps_only_supplied_fields():
    request = UpdateLinkRequest(url="example.com", title=None)
    assert request.model_dump(exclude_unset=True) == {"url": "https://example.com", "title": None}


@pytest.mark.parametrize("field", ["url", "domain", "key", "archived", "proxy"])
def test_update_link_request_rejects_null_for_required_fields(field):
    with pytest.raises(ValidationError):
        UpdateLinkRequest(**{field: None})


def test_get_links_query_defaults():
    query = GetLinksQuery()
    assert query.sort == "createdAt"
    assert query.page is None
    assert query.show_archived is False
    assert query.with_tags is False


@pytest.mark.parametrize("raw, expected", [("true", True), ("TRUE", True), ("False", False), ("false", False)])
def test_get_links_query_boolean_flags(raw, expected):
    query = GetLinksQuery(showArchived=raw, withTags=raw)
    assert query.show_archived is expected
    assert query.with_tags is expected


def test_get_links_query_page_coercion():
    assert GetLinksQuery(page="3").page == 3
    with pytest.raises(ValidationError):
        GetLinksQuery(page="-1")


def test_links_count_query_group_by():
    assert LinksCountQuery(groupBy="domain").group_by == "domain"
    with pytest.raises(ValidationError):
        LinksCountQuery(groupBy="userId")


def test_domain_key_params():
    params = DomainKeyParams(domain="d.to", key="github")
    assert (params.domain, params.key) == ("d.to", "github")
    with pytest.raises(ValidationError):
        DomainKeyParams(domain="-bad-.com", key="github")


def test_link_response_dumps_camel_case():
    now = datetime.now()
    response = LinkResponse(
        id="l1",
        domain="dub.sh",
        key="try",
        url="https://google.com",
        short_link="https://dub.sh/try",
        qr_code="https://api.dub.co/qr?url=https://dub.sh/try",
        workspace_id="ws",
        project_id="ws",
        created_at=now,
        updated_at=now
    )
    data = response.model_dump(by_alias=True)
    assert data["shortLink"] == "https://dub.sh/try"
    assert data["publicStats"] is False
    assert data["expiredUrl"] is None
    assert data["tags"] == []
    assert data["projectId"] == data["workspaceId"]


def test_create_tag_request():
    assert CreateTagRequest(name=" News ").name == "News"
    with pytest.raises(ValidationError):
        CreateTagRequest(name="News", color="orange")
    with pytest.raises(ValidationError):
        CreateTagRequest(name="  ")


def test_tag_response_from_attributes():
    class TagRow:
        id = "t1"
        name = "News"
        color = "red"
        created_at = datetime.now()
        updated_at = datetime.now()

    response = TagResponse.model_validate(TagRow())
    assert response.model_dump(by_alias=True)["createdAt"] == TagRow.created_at


def test_create_workspace_request():
    assert CreateWorkspaceRequest(name="Acme", slug="Acme").slug == "acme"
    with pytest.raises(ValidationError):
        CreateWorkspaceRequest(name="Acme", slug="acme inc")


@pytest.mark.parametrize("slug", ["ac\nme", "acme-"])
def test_create_workspace_request_rejects_bad_slug(slug):
    with pytest.raises(ValidationError):
        CreateWorkspaceRequest(name="Acme", slug=slug)


def test_create_link_request_reports_each_geo_entry():
    with pytest.raises(ValidationError) as exc_info:
        CreateLinkRequest(url="google.com", geo={"XX": "a.com", "US": None})
    assert [error["type"] for error in exc_info.value.errors()] == ["invalid_geo_entry", "invalid_geo_entry"]
