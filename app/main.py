import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes.health import router as health_router
from app.api.routes.healthcare import router as healthcare_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.services.cache.redis_cache import RedisCache

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize response cache once (fail-soft)
    app.state.cache = None
    if settings.ENABLE_CACHE:
        try:
            cache = RedisCache(RedisCache.connect(settings.REDIS_URL))
            cache.ping()
            app.state.cache = cache
            logger.info("Response cache connected: %s", settings.REDIS_URL)
        except Exception as e:
            app.state.cache = None
            logger.exception("Redis unavailable (cache disabled): %s", e)

    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(healthcare_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})

    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
