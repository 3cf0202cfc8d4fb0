from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_async_session
from src.links.exceptions import MissingWorkspaceError
from src.workspaces.models import Workspace
from src.workspaces.service import WorkspaceService


async def get_workspace_service(
    session: AsyncSession = Depends(get_async_session)
) -> WorkspaceService:
    return WorkspaceService(session)


async def get_workspace(
    workspace_id: Optional[str] = Query(default=None, alias="workspaceId"),
    project_id: Optional[str] = Query(default=None, alias="projectId", deprecated=True),
    workspace_service: WorkspaceService = Depends(get_workspace_service)
) -> Workspace:
    workspace_id = workspace_id or project_id
    if not workspace_id:
        raise MissingWorkspaceError()
    return await workspace_service.get(workspace_id)
