import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from linkdb.api import api_router
from linkdb.config import settings
from linkdb.database import init_db
from linkdb.exceptions import MetadataError
from linkdb.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    configure_logging(settings.log_format, settings.log_level)
    await init_db()
    logger.info("%s started", settings.app_name)
    yield
    # Shutdown (if needed in the future)


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.include_router(api_router)


@app.exception_handler(MetadataError)
async def metadata_error_handler(request: Request, exc: MetadataError) -> JSONResponse:
    logger.warning(
        "Metadata extraction failed for %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok", "app": settings.app_name}
