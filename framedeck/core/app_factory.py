# framedeck/core/app_factory.py

"""
Application factory and server entry point.

`create_app` wires the storage layer, the API routes, the error translation
policy and the browser viewer into a FastAPI application. Its lifespan
verifies the database connection and synchronizes the schema before the app
accepts traffic; a failure there aborts startup. `serve` runs the app under
uvicorn.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rich.console import Console
from rich.panel import Panel

from .api import configure_error_handlers, configure_routes
from .settings import FramedeckSettings, load_settings
from .storage import FrameStore
from .web import configure_web_routes, setup_templates

logger = logging.getLogger("framedeck")


def bootstrap_storage(store: FrameStore) -> None:
    """Connection bootstrap followed by schema sync."""
    store.verify_connection()
    store.sync_schema()


def create_app(
    settings: Optional[FramedeckSettings] = None,
    store: Optional[FrameStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (default: loaded from the environment)
        store: Storage layer to use; when omitted one is created from
            settings.database and disposed on shutdown

    Returns:
        Configured FastAPI application
    """
    settings = settings or load_settings()
    owns_store = store is None
    store = store or FrameStore.from_config(settings.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.title} (database: {settings.database.safe_url})")
        bootstrap_storage(store)
        try:
            yield
        finally:
            logger.info(f"Shutting down {settings.title}")
            if owns_store:
                store.dispose()

    app = FastAPI(title=settings.title, debug=settings.debug, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "PUT", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    templates = setup_templates(settings.template_override)
    app.state.framedeck_store = store
    app.state.framedeck_settings = settings

    configure_error_handlers(app)
    configure_routes(app, store)
    configure_web_routes(app, store, templates)

    return app


def display_banner(settings: FramedeckSettings) -> None:
    console = Console(highlight=False)
    panel = Panel(
        f"FRAMEDECK API  http://{settings.host}:{settings.port}",
        border_style="blue",
        expand=False,
        padding=(0, 1),
    )
    console.print(panel)


def serve(settings: Optional[FramedeckSettings] = None) -> None:
    """Run the API server until interrupted."""
    settings = settings or load_settings()
    app = create_app(settings)
    display_banner(settings)
    logger.info(f"API listening on {settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
