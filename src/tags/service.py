import logging
import random

from sqlalchemy import func, select

from src.database import AsyncSession
from src.links.constants import TAG_COLORS
from src.links.exceptions import TagExistsError
from src.tags.models import Tag
from src.tags.schemes import CreateTagRequest
from src.workspaces.models import Workspace

logger = logging.getLogger(__name__)


class TagService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, workspace: Workspace, data: CreateTagRequest) -> Tag:
        existing = (await self.session.execute(
            select(Tag.id).filter(
                Tag.workspace_id == workspace.id,
                func.lower(Tag.name) == data.name.lower()
            )
        )).scalar_one_or_none()
        if existing is not None:
            raise TagExistsError(data.name)

        tag = Tag(
            name=data.name,
            color=data.color or random.choice(TAG_COLORS),
            workspace_id=workspace.id
        )

        try:
            self.session.add(tag)
            await self.session.commit()
        except Exception as ex:
            await self.session.rollback()
            raise ex

        logger.info(f"Created tag {tag.name} in workspace {workspace.id}")
        return tag

    async def get_tags(self, workspace: Workspace) -> list[Tag]:
        result = (await self.session.execute(
            select(Tag).filter(Tag.workspace_id == workspace.id).order_by(Tag.name)
        )).scalars().all()
        return [row for row in result]
