import pytest
from fastapi import status
from tests.schema import expected_workspace, match_object


@pytest.mark.anyio
async def test_create_workspace(client):
    response = await client.post("/workspaces", json={"name": "Acme", "slug": "Acme-Inc"})

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    match_object(data, {
        **expected_workspace,
        "name": "Acme",
        "slug": "acme-inc",
        "plan": "free",
        "linksLimit": 25,
        "tagsLimit": 5,
    })


@pytest.mark.anyio
async def test_create_workspace_duplicate_slug(client, workspace):
    response = await client.post("/workspaces", json={"name": "Copy", "slug": workspace.slug})

    assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.anyio
@pytest.mark.parametrize("body, field", [
    ({"name": "Acme"}, "slug"),
    ({"name": "", "slug": "acme"}, "name"),
    ({"name": "Acme", "slug": "acme inc"}, "slug"),
])
async def test_create_workspace_invalid_body(client, body, field):
    response = await client.post("/workspaces", json=body)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert [error["field"] for error in response.json()["detail"]] == [field]


@pytest.mark.anyio
async def test_get_workspace(client, workspace):
    response = await client.get(f"/workspaces/{workspace.id}")

    assert response.status_code == status.HTTP_200_OK
    match_object(response.json(), {**expected_workspace, "id": workspace.id, "slug": workspace.slug})


@pytest.mark.anyio
async def test_get_workspace_not_found(client):
    response = await client.get("/workspaces/missing")

    assert response.status_code == status.HTTP_404_NOT_FOUND
