import re
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from .api.v1 import comments, health, packages
from .core.config import get_settings
from .core.database import init_db
from .core.logging import configure_logging

STATIC_DIR = Path(__file__).parent / "static"


class NormalizePathMiddleware(BaseHTTPMiddleware):
    """Collapse repeated slashes so //api/packages maps to /api/packages."""

    async def dispatch(self, request, call_next):
        scope = request.scope
        original_path = scope.get("path", "")
        normalized_path = re.sub(r"/{2,}", "/", original_path)
        if normalized_path != original_path:
            logger.debug("Normalizing path from {} to {}", original_path, normalized_path)
            scope["path"] = normalized_path
        return await call_next(request)


async def unhandled_error(request: Request, exc: Exception):
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.APP_NAME, version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(NormalizePathMiddleware)
    app.add_exception_handler(Exception, unhandled_error)

    @app.on_event("startup")
    def startup_event():
        configure_logging(get_settings())
        init_db()
        logger.info("{} ready ({} env)", settings.APP_NAME, settings.ENV)

    # API routes - must come before the UI mount
    app.include_router(packages.router, prefix="/api/packages", tags=["packages"])
    app.include_router(comments.router, prefix="/api/packages", tags=["comments"])
    app.include_router(health.router, prefix="/api/health", tags=["health"])

    # Browsing UI; html=True serves index.html for "/"
    if STATIC_DIR.exists():
        app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="ui")
    else:
        logger.warning("UI directory {} missing; serving API only", STATIC_DIR)

    return app


app = create_app()
