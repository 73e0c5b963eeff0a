# movie_explorer/main.py

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from movie_explorer.api.errors import request_validation_handler
from movie_explorer.api.v1 import api_router
from movie_explorer.core.config import Settings, get_settings
from movie_explorer.database import Database
from movie_explorer.services.catalog_service import build_catalog_client
from movie_explorer.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )


async def _run_ingestion(ingestion_service: IngestionService) -> None:
    try:
        await ingestion_service.run()
    except asyncio.CancelledError:
        logger.info("Startup ingestion cancelled")
        raise
    except Exception:
        logger.exception("Startup ingestion failed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)

        # an unreachable store aborts startup
        database = Database.from_settings(settings)
        database.ping()
        if settings.auto_create_schema:
            database.create_all()

        catalog = build_catalog_client(settings)
        ingestion_service = IngestionService.from_settings(settings, database, catalog)

        app.state.settings = settings
        app.state.database = database
        app.state.catalog = catalog
        app.state.ingestion_service = ingestion_service

        ingestion_task = None
        if settings.ingest_on_startup:
            ingestion_task = asyncio.create_task(_run_ingestion(ingestion_service))
            logger.info("Startup ingestion scheduled")

        yield

        if ingestion_task:
            ingestion_task.cancel()
            try:
                await ingestion_task
            except asyncio.CancelledError:
                pass
        await catalog.aclose()
        database.dispose()
        logger.info("Movie Explorer stopped")

    app = FastAPI(
        title="Movie Explorer",
        description="Movie catalog search service",
        version="1.0.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    def read_root():
        """Service root"""
        return {
            "service": "movie-explorer",
            "description": "Movie catalog search service",
            "version": "1.0.0",
            "docs": "/docs",
        }

    return app

# uvicorn movie_explorer.main:create_app --factory
