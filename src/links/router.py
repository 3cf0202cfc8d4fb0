from typing import Any, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi_cache.decorator import cache
from starlette import status

from src.config import Settings
from src.links.dependencies import get_link_service
from src.links.exceptions import InvalidPayloadError
from src.links.schemes import LinkResponse
from src.links.service import LinkService, transform_link
from src.links.utils import link_info_cache_key_builder, query_params_to_dict
from src.links.validation import (
    validate_bulk_create,
    validate_create,
    validate_domain_key,
    validate_links_count_query,
    validate_links_query,
    validate_update,
)
from src.workspaces.dependencies import get_workspace
from src.workspaces.models import Workspace

router = APIRouter(
    prefix="/links",
    tags=["links"]
)


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
        raw_body: Any = Body(default=None),
        workspace: Workspace = Depends(get_workspace),
        link_service: LinkService = Depends(get_link_service)
) -> LinkResponse:
    result = validate_create(raw_body)
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    link = await link_service.create(workspace, result.value)

    return transform_link(link)


@router.post("/bulk", response_model=list[LinkResponse], status_code=status.HTTP_201_CREATED)
async def bulk_create_links(
        raw_body: Any = Body(default=None),
        workspace: Workspace = Depends(get_workspace),
        link_service: LinkService = Depends(get_link_service)
) -> list[LinkResponse]:
    result = validate_bulk_create(raw_body)
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    links = await link_service.bulk_create(workspace, result.value)

    return [transform_link(link) for link in links]


@router.get("", response_model=list[LinkResponse], status_code=status.HTTP_200_OK)
async def get_links(
        request: Request,
        workspace: Workspace = Depends(get_workspace),
        link_service: LinkService = Depends(get_link_service)
) -> list[LinkResponse]:
    result = validate_links_query(query_params_to_dict(request.query_params))
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    links = await link_service.get_links(workspace, result.value)

    return [transform_link(link) for link in links]


@router.get("/count", status_code=status.HTTP_200_OK)
async def count_links(
        request: Request,
        workspace: Workspace = Depends(get_workspace),
        link_service: LinkService = Depends(get_link_service)
) -> Union[int, list[dict]]:
    result = validate_links_count_query(query_params_to_dict(request.query_params))
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    return await link_service.count_links(workspace, result.value)


@router.get("/info", response_model=LinkResponse, status_code=status.HTTP_200_OK)
@cache(expire=Settings().LINK_INFO_CACHE_TTL, key_builder=link_info_cache_key_builder)
async def get_link_info(
        domain: Optional[str] = Query(default=None),
        key: Optional[str] = Query(default=None),
        workspace: Workspace = Depends(get_workspace),
        link_service: LinkService = Depends(get_link_service)
) -> LinkResponse:
    params = {name: value for name, value in (("domain", domain), ("key", key)) if value is not None}
    result = validate_domain_key(params)
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    link = await link_service.get_by_domain_key(workspace, result.value.domain, result.value.key)

    return transform_link(link)


@router.patch("/{link_id}", response_model=LinkResponse, status_code=status.HTTP_200_OK)
async def update_link(
        link_id: str,
        raw_body: Any = Body(default=None),
        workspace: Workspace = Depends(get_workspace),
        link_service: LinkService = Depends(get_link_service)
) -> LinkResponse:
    result = validate_update(raw_body)
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    link = await link_service.update(workspace, link_id, result.value)

    return transform_link(link)
