import logging

import uvicorn
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_cache import FastAPICache
from fastapi_cache.backends.redis import RedisBackend
from redis import asyncio as aioredis
from src.config import Settings
from src.links.exception_handlers import api_error_handler, global_exception_handler
from src.links.exceptions import APIError
from src.links.router import router as links_router
from src.tags.router import router as tags_router
from src.workspaces.router import router as workspaces_router
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=Settings().LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    redis = aioredis.from_url(Settings().REDIS_URL)
    FastAPICache.init(RedisBackend(redis), prefix="fastapi-cache")
    logger.info("Link info cache initialized")
    yield
    await redis.aclose()
    logger.info("Redis connection closed")

app = FastAPI(
    lifespan=lifespan,
    title="Short Links API",
    description="Create, update and list short links of a workspace",
)

app.include_router(links_router)
app.include_router(tags_router)
app.include_router(workspaces_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=[Settings().SITE_IP],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(Exception, global_exception_handler)


if __name__ == '__main__':
    uvicorn.run("main:app", host="localhost", port=8000, reload=True)
