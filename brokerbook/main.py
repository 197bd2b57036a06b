"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from brokerbook.config import Settings, get_settings
from brokerbook.infrastructure.database import Database
from brokerbook.infrastructure.logging.log_config import setup_logging
from brokerbook.infrastructure.memory import InMemoryRecordStore
from brokerbook.infrastructure.storage.local_blob_storage import LocalBlobStorage
from brokerbook.presentation.api.error_handlers import register_error_handlers
from brokerbook.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: open the database, create tables, dispose on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    database: Database | None = None
    if settings.storage_backend == "sql":
        database = Database(settings.database_url, echo=settings.database_echo)
        await database.create_all()
        app.state.database = database
        logger.info("Record tables ready on %s", database.engine.url.render_as_string())
    else:
        logger.info("Using the in-memory record store")

    yield

    if database is not None:
        await database.dispose()
        app.state.database = None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = None
    app.state.memory_store = InMemoryRecordStore()
    app.state.blob_storage = LocalBlobStorage(
        upload_dir=settings.upload_dir,
        public_base_url=settings.public_base_url,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Mount API routes and the uploaded photos / documents
    app.include_router(api_router)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "brokerbook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
