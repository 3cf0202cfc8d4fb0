from typing import Iterable, Optional
from urllib.parse import parse_qs, urlsplit, urlunsplit

import validators
from fastapi_cache import FastAPICache

from src.config import Settings
from src.links.constants import SCHEME_REGEX, UTM_FIELDS


def normalize_url(value: str) -> str:
    """Turn a user supplied destination into an absolute canonical URL.

    Adds ``https://`` when the value carries no scheme and lower-cases the
    scheme and host. Raises ``ValueError`` if the result is not a valid URL.
    Applying it to its own output returns the same string.
    """
    if not isinstance(value, str):
        raise ValueError("URL must be a string")
    url = value.strip()
    if not SCHEME_REGEX.match(url):
        url = "https://" + url
    if validators.url(url, strict_query=False) is not True:
        raise ValueError(f"Invalid URL: '{value}'")

    parts = urlsplit(url)
    netloc = parts.netloc if "@" in parts.netloc else parts.netloc.lower()
    return urlunsplit((parts.scheme.lower(), netloc, parts.path, parts.query, parts.fragment))


def unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def split_values(value):
    # строка "a,b,c" и список ["a", "b", "c"] означают одно и то же
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        return value
    return unique(item.strip() for item in value if item.strip())


def merge_tag_ids(tag_id: Optional[str], tag_ids: Optional[list[str]]) -> Optional[list[str]]:
    if tag_id is None and tag_ids is None:
        return None
    return unique(([tag_id] if tag_id else []) + (tag_ids or []))


def query_params_to_dict(query_params) -> dict:
    params = {}
    for name, value in query_params.multi_items():
        if name in params:
            current = params[name]
            params[name] = (current if isinstance(current, list) else [current]) + [value]
        else:
            params[name] = value
    return params


def utm_params_from_url(url: str) -> dict[str, Optional[str]]:
    query = parse_qs(urlsplit(url).query)
    return {field: query[field][0] if field in query else None for field in UTM_FIELDS}


def build_short_link(domain: str, key: str) -> str:
    return f"https://{domain}/{key}"


def build_qr_code(short_link: str) -> str:
    return f"{Settings().QR_API_URL}?url={short_link}"


def link_info_cache_key_builder(
    func,
    namespace: str = "",
    workspace_id: str = None,
    domain: str = None,
    key: str = None,
    *args,
    **kwargs
) -> str:
    if domain is None and key is None:
        endpoint_kwargs = kwargs.get("kwargs", {})
        workspace = endpoint_kwargs.get("workspace")
        workspace_id = workspace.id if workspace is not None else None
        domain = endpoint_kwargs.get("domain")
        key = endpoint_kwargs.get("key")
    return f"{func.__module__}:{func.__name__}:{workspace_id}:{domain}:{key}"


async def invalidate_cache(workspace_id: str = None, domain: str = None, key: str = None):
    if domain is None or key is None:
        return

    backend = FastAPICache.get_backend()

    from src.links.router import get_link_info
    info_key = link_info_cache_key_builder(
        func=get_link_info,
        workspace_id=workspace_id,
        domain=domain,
        key=key
    )

    if await backend.get(info_key) is not None:
        await backend.clear(key=info_key, namespace="")
