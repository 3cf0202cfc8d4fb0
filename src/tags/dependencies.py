from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_async_session
from src.tags.service import TagService


async def get_tag_service(
    session: AsyncSession = Depends(get_async_session)
) -> TagService:
    return TagService(session)
