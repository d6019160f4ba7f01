"""
Symposium API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- The application context (database, Redis, mailer, storage, domain events)
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from symposium.api import api_router
from symposium.core.config import Settings, get_settings
from symposium.core.context import AppContext
from symposium.core.database import close_db, create_engine, create_session_maker, init_db
from symposium.core.email import Mailer
from symposium.core.events import EventDispatcher
from symposium.core.redis import close_redis, init_redis
from symposium.core.storage import FileStorage
from symposium.modules.submissions.events import register_handlers as register_submission_handlers

logger = logging.getLogger("symposium")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.is_development else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def build_context(settings: Settings) -> AppContext:
    """
    Create every long-lived collaborator.

    Redis is optional outside production: rate limiting falls back to
    process memory when it is unreachable.
    """
    settings.validate_runtime()

    engine = create_engine(settings.database_url, echo=False)
    try:
        await init_db(engine)
        logger.info("[OK] Database connected")
    except Exception as e:
        logger.error(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    redis = None
    try:
        redis = await init_redis(settings.redis_url)
        logger.info("[OK] Redis connected")
    except Exception as e:
        logger.error(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise

    events = EventDispatcher()
    register_submission_handlers(events)

    return AppContext(
        settings=settings,
        engine=engine,
        session_maker=create_session_maker(engine),
        mailer=Mailer(
            api_key=settings.resend_api_key,
            sender=settings.email_from,
            base_url=settings.public_base_url,
        ),
        storage=FileStorage(settings.upload_dir, settings.uploads_url),
        redis=redis,
        events=events,
    )


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    A prepared `context` is used as-is (tests); otherwise one is built from
    `settings` on startup and torn down on shutdown.
    """
    settings = settings or (context.settings if context else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting Symposium API in {settings.python_env} mode...")
        owned = context is None
        app.state.context = context or await build_context(settings)

        yield  # Application runs here

        # Shutdown
        if owned:
            logger.info("Shutting down Symposium API...")
            await close_redis(app.state.context.redis)
            await close_db(app.state.context.engine)
            logger.info("[OK] Cleanup complete")

    app = FastAPI(
        title="Symposium API",
        description="Registration and sign-off workflow for the science research symposium",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    app.include_router(api_router, prefix="/api/v1")
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint - API welcome message."""
        return {
            "message": "Welcome to the Symposium API",
            "status": "running",
            "environment": settings.python_env,
        }

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {"status": "healthy"}

    @app.get("/ready", tags=["Health"])
    async def readiness_check() -> dict[str, str]:
        """Readiness check endpoint."""
        return {"status": "ready"}

    return app


_settings = get_settings()
configure_logging(_settings)
app = create_app(_settings)
