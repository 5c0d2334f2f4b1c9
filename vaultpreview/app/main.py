from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vaultpreview.app.core.config import settings
from vaultpreview.app.core.errors import register_exception_handlers
from vaultpreview.app.core.request_id import RequestIdMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from vaultpreview.app.dependencies import create_dependencies

    if getattr(app.state, "deps", None) is None:
        app.state.deps = create_dependencies()
        logger.info("Dependencies initialized")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Inline document preview through short-lived content grants",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.deps = None

    app.add_middleware(RequestIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    from vaultpreview.app.modules.content.router import router as content_router

    app.include_router(content_router, prefix="/api", tags=["Content Proxy"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "vaultpreview"}

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
