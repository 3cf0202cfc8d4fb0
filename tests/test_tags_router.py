import pytest
from fastapi import status
from src.links.constants import TAG_COLORS
from tests.schema import expected_tag, match_object


@pytest.mark.anyio
async def test_create_tag(client, workspace):
    response = await client.post("/tags", params={"workspaceId": workspace.id}, json={"name": " News ", "color": "green"})

    assert response.status_code == status.HTTP_201_CREATED
    match_object(response.json(), {**expected_tag, "name": "News", "color": "green"})


@pytest.mark.anyio
async def test_create_tag_random_color(client, workspace):
    response = await client.post("/tags", params={"workspaceId": workspace.id}, json={"name": "Promo"})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["color"] in TAG_COLORS


@pytest.mark.anyio
async def test_create_tag_duplicate_name(client, workspace, tags):
    response = await client.post("/tags", params={"workspaceId": workspace.id}, json={"name": "marketing"})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"detail": "Tag 'marketing' already exists"}


@pytest.mark.anyio
@pytest.mark.parametrize("body, field, code", [
    ({}, "name", "missing_required_field"),
    ({"name": "  "}, "name", "missing_required_field"),
    ({"name": "News", "color": "orange"}, "color", "invalid_enum_value"),
])
async def test_create_tag_invalid_body(client, workspace, body, field, code):
    response = await client.post("/tags", params={"workspaceId": workspace.id}, json=body)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert [(error["field"], error["code"]) for error in response.json()["detail"]] == [(field, code)]


@pytest.mark.anyio
async def test_get_tags(client, workspace, tags):
    response = await client.get("/tags", params={"workspaceId": workspace.id})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [tag["name"] for tag in data] == ["Marketing", "Sales"]
    for tag in data:
        match_object(tag, expected_tag)


@pytest.mark.anyio
async def test_get_tags_requires_workspace(client):
    response = await client.get("/tags")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
