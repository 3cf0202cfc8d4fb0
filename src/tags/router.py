from typing import Any

from fastapi import APIRouter, Body, Depends
from starlette import status

from src.links.exceptions import InvalidPayloadError
from src.tags.dependencies import get_tag_service
from src.tags.schemes import CreateTagRequest, TagResponse
from src.tags.service import TagService
from src.validation import validate_model
from src.workspaces.dependencies import get_workspace
from src.workspaces.models import Workspace

router = APIRouter(
    prefix="/tags",
    tags=["tags"]
)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
        raw_body: Any = Body(default=None),
        workspace: Workspace = Depends(get_workspace),
        tag_service: TagService = Depends(get_tag_service)
) -> TagResponse:
    result = validate_model(CreateTagRequest, raw_body)
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    tag = await tag_service.create(workspace, result.value)

    return TagResponse.model_validate(tag)


@router.get("", response_model=list[TagResponse], status_code=status.HTTP_200_OK)
async def get_tags(
        workspace: Workspace = Depends(get_workspace),
        tag_service: TagService = Depends(get_tag_service)
) -> list[TagResponse]:
    tags = await tag_service.get_tags(workspace)

    return [TagResponse.model_validate(tag) for tag in tags]
