import logging
from typing import Optional

import httpx

from src.config import Settings

logger = logging.getLogger(__name__)

METATAG_FIELDS = ("title", "description", "image")


async def fetch_metatags(url: str) -> dict[str, Optional[str]]:
    """Fetch title/description/image of the destination page.

    Failures of the metatags service are logged and yield empty metadata,
    the link is created without a social card in that case.
    """
    settings = Settings()
    try:
        async with httpx.AsyncClient(timeout=settings.METATAGS_TIMEOUT) as client:
            response = await client.get(settings.METATAGS_API_URL, params={"url": url})
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as ex:
        logger.warning(f"Cannot fetch metatags for {url}: {ex}")
        return {field: None for field in METATAG_FIELDS}

    return {field: data.get(field) if isinstance(data, dict) else None for field in METATAG_FIELDS}
