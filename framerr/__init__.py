import atexit
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from framerr.core.helpers import _get_pyproject_attr
from framerr.core.logging import get_logger, setup_logging
from framerr.extensions import engine, scheduler
from framerr.metrics import init_metrics
from framerr.routes.errors import register_error_handlers

logger = get_logger("app")


def create_app(config: dict | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(level=logging.INFO)
    config = {"TESTING": False, **(config or {})}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not config["TESTING"]:
            _setup_scheduler()
        yield

    app = FastAPI(
        title=_get_pyproject_attr("name"),
        version=_get_pyproject_attr("version"),
        description=_get_pyproject_attr("description"),
        docs_url="/api/docs",
        lifespan=lifespan,
    )
    app.state.config = config

    _init_extensions(app)
    register_error_handlers(app)
    _register_routers(app)
    _init_database()

    logger.info("Application initialised")
    return app


def _init_extensions(app: FastAPI) -> None:
    """Initialise middleware and metrics."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )
    init_metrics(app)


def _register_routers(app: FastAPI) -> None:
    """Register all route modules."""
    from framerr.routes import (
        auth,
        health,
        integrations,
        notifications,
        request_actions,
        settings,
        users,
        webhooks,
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(notifications.router)
    app.include_router(webhooks.router)
    app.include_router(integrations.router)
    app.include_router(request_actions.router)
    app.include_router(settings.router)


def _init_database() -> None:
    """Create any missing tables."""
    from framerr.models import Base

    Base.metadata.create_all(bind=engine)


def _setup_scheduler() -> None:
    """Schedule the daily notification prune."""
    from framerr.tasks import prune_old_notifications

    scheduler.add_job(
        func=prune_old_notifications,
        trigger="interval",
        days=1,
        id="prune_notifications",
        replace_existing=True,
    )

    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")
        atexit.register(lambda: scheduler.shutdown(wait=False))
