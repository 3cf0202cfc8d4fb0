import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock
from src.links.metatags import fetch_metatags


@pytest.fixture
def mock_client(mocker):
    client = AsyncMock()
    client_class = mocker.patch("src.links.metatags.httpx.AsyncClient")
    client_class.return_value.__aenter__.return_value = client
    return client


@pytest.mark.anyio
async def test_fetch_metatags(mock_client):
    response = MagicMock()
    response.json.return_value = {"title": "Google", "description": "Search", "image": None, "poweredBy": "x"}
    mock_client.get.return_value = response

    result = await fetch_metatags("https://google.com")

    assert result == {"title": "Google", "description": "Search", "image": None}
    mock_client.get.assert_awaited_once()
    assert mock_client.get.call_args.kwargs["params"] == {"url": "https://google.com"}


@pytest.mark.anyio
async def test_fetch_metatags_http_error(mock_client, caplog):
    mock_client.get.side_effect = httpx.ConnectError("boom")

    result = await fetch_metatags("https://google.com")

    assert result == {"title": None, "description": None, "image": None}
    assert "Cannot fetch metatags" in caplog.text


@pytest.mark.anyio
async def test_fetch_metatags_bad_payload(mock_client):
    response = MagicMock()
    response.json.side_effect = ValueError("not json")
    mock_client.get.return_value = response

    result = await fetch_metatags("https://google.com")

    assert result == {"title": None, "description": None, "image": None}


@pytest.mark.anyio
async def test_fetch_metatags_non_object_payload(mock_client):
    response = MagicMock()
    response.json.return_value = ["unexpected"]
    mock_client.get.return_value = response

    assert await fetch_metatags("https://google.com") == {"title": None, "description": None, "image": None}
