import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from loguru import logger

from brain.actions.bootstrap import init_executors
from brain.api.actions import router as actions_router
from brain.api.assistant import router as assistant_router
from brain.config.settings import settings
from brain.core.logger import setup_logger

setup_logger(level=settings.log_level, log_file=settings.log_file, app_name=settings.app_name)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Register executors before the first request is served.

    Note: FastAPI requires async for lifespan context manager,
    even if no await operations are used.
    """
    registry = init_executors()
    logger.info(f"[STARTUP] {len(registry.list_registered())} action executors ready")

    await asyncio.sleep(0)
    yield

    logger.info("[SHUTDOWN] Assistant brain stopped")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.include_router(assistant_router)
app.include_router(actions_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
