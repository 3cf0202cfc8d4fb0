from typing import Any

from fastapi import APIRouter, Body, Depends
from starlette import status

from src.links.exceptions import InvalidPayloadError
from src.validation import validate_model
from src.workspaces.dependencies import get_workspace_service
from src.workspaces.schemes import CreateWorkspaceRequest, WorkspaceResponse
from src.workspaces.service import WorkspaceService

router = APIRouter(
    prefix="/workspaces",
    tags=["workspaces"]
)


@router.post("", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workspace(
        raw_body: Any = Body(default=None),
        workspace_service: WorkspaceService = Depends(get_workspace_service)
) -> WorkspaceResponse:
    result = validate_model(CreateWorkspaceRequest, raw_body)
    if not result.ok:
        raise InvalidPayloadError(result.errors)

    workspace = await workspace_service.create(result.value)

    return WorkspaceResponse.model_validate(workspace)


@router.get("/{workspace_id}", response_model=WorkspaceResponse, status_code=status.HTTP_200_OK)
async def get_workspace(
        workspace_id: str,
        workspace_service: WorkspaceService = Depends(get_workspace_service)
) -> WorkspaceResponse:
    workspace = await workspace_service.get(workspace_id)

    return WorkspaceResponse.model_validate(workspace)
