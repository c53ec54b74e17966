"""
FastAPI Application Factory

Assembles the remote control API: routers under /api/v1, the shared error
envelope, CORS for browser control panels, and an unversioned health check.

Services are not passed in; routes reach them through
api.dependencies.get_service_container(), which main_asyncio.py (or a test
fixture) fills with set_service_container().
"""

from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import services_ready
from api.middleware.error_handler import register_exception_handlers
from api.routes import controls, presets, system
from models.enums import LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

API_PREFIX = "/api/v1"

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def create_app(
    title: str = "Feedback Controls",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: Optional[Sequence[str]] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        title: API title (shown in docs)
        version: API version
        docs_enabled: Serve /docs, /redoc and /openapi.json
        cors_origins: Allowed browser origins (default: local dev servers)
    """
    app = FastAPI(
        title=title,
        description="Remote control for the video feedback parameters",
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins if cors_origins is not None else DEFAULT_CORS_ORIGINS),
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for module in (controls, presets, system):
        app.include_router(module.router, prefix=API_PREFIX)

    @app.get("/api/health", tags=["System"], summary="Health check")
    async def health_check():
        """Answers even while the controls are still starting (controls: "starting")"""
        return {
            "status": "healthy",
            "service": "feedback-controls-api",
            "version": version,
            "controls": "ready" if services_ready() else "starting",
        }

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": title, "docs": "/docs" if docs_enabled else None, "health": "/api/health"}

    log.debug("FastAPI app created", title=title, version=version, prefix=API_PREFIX)
    return app
