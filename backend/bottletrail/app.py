"""
Bottle Trail - FastAPI read API
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bottletrail.config import settings
from bottletrail.database.db import init_db
from bottletrail.logging import setup_logging, get_logger
from bottletrail.routers import bottles, conversations, stats, trail
from bottletrail.services.event_store import EventStoreService
from bottletrail.services.reconstruction import ReconstructionService

logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting Bottle Trail API")

    await init_db(settings.DATABASE_PATH)
    logger.info("Database initialized")

    app.state.event_store = EventStoreService(db_path=settings.DATABASE_PATH)
    app.state.reconstruction_service = ReconstructionService(store=app.state.event_store)
    logger.info("Services initialized")

    yield

    logger.info("Shutting down application")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Bottle Trail API",
        description="Read-side reconstruction of bottle journeys, trails, stats and conversations",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(bottles.router, prefix="/api/bottles", tags=["Bottles"])
    app.include_router(trail.router, prefix="/api/trail", tags=["Trail"])
    app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
    app.include_router(conversations.router, prefix="/api/conversations", tags=["Conversations"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "bottle-trail",
        }

    @app.get("/")
    async def root():
        return {
            "name": "Bottle Trail API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
            "refresh_interval_seconds": settings.SNAPSHOT_REFRESH_SECONDS,
        }

    return app
