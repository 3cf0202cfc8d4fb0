import logging

from sqlalchemy import select

from src.database import AsyncSession
from src.links.exceptions import WorkspaceExistsError, WorkspaceNotFoundError
from src.workspaces.models import Workspace
from src.workspaces.schemes import CreateWorkspaceRequest

logger = logging.getLogger(__name__)


class WorkspaceService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, workspace_id: str) -> Workspace:
        workspace = (await self.session.execute(
            select(Workspace).filter(Workspace.id == workspace_id)
        )).scalar_one_or_none()
        if not workspace:
            raise WorkspaceNotFoundError()
        return workspace

    async def create(self, data: CreateWorkspaceRequest) -> Workspace:
        existing = (await self.session.execute(
            select(Workspace.id).filter(Workspace.slug == data.slug)
        )).scalar_one_or_none()
        if existing is not None:
            raise WorkspaceExistsError(data.slug)

        workspace = Workspace(name=data.name, slug=data.slug)

        try:
            self.session.add(workspace)
            await self.session.commit()
        except Exception as ex:
            await self.session.rollback()
            raise ex

        logger.info(f"Created workspace {workspace.slug}")
        return workspace
