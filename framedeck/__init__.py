# framedeck/__init__.py

"""
framedeck: Browse, preview and edit ordered HTML demo frames.

This package provides a FastAPI service over a relational store of demos
and their frames, an HTTP client for it, and an editor state machine shared
by a terminal editor and a server-rendered browser viewer.

Public API:
- create_app() / serve(): Build or run the HTTP API and browser viewer
- FrameStore: Storage layer for demos and frames
- FramedeckClient: HTTP client for GET /demos and PUT /frames/{id}
- EditorSession / EditorState: Frame navigation-and-edit state machine
- load_settings(): Configuration from the environment
"""

import logging

from .core.app_factory import create_app, serve
from .core.client import FramedeckClient
from .core.editor import EditorSession, EditorState, ViewMode
from .core.settings import FramedeckSettings, load_settings
from .core.storage import FrameStore
from .exceptions import (
    BadRequestError,
    FramedeckError,
    NetworkFailureError,
    NotFoundError,
    StorageUnavailableError,
)

# Get package-level logger (configuration happens in the CLI entry points)
logger = logging.getLogger("framedeck")

__all__ = [
    "create_app",
    "serve",
    "FramedeckClient",
    "EditorSession",
    "EditorState",
    "ViewMode",
    "FramedeckSettings",
    "load_settings",
    "FrameStore",
    "BadRequestError",
    "FramedeckError",
    "NetworkFailureError",
    "NotFoundError",
    "StorageUnavailableError",
    "logger",
]
