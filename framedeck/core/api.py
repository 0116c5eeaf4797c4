# framedeck/core/api.py

"""
HTTP routes for demos and frames.

The API layer is stateless: it passes requests through to the FrameStore and
translates storage outcomes into wire responses. Failures are mapped to
status codes here and nowhere else:

- NotFoundError -> 404
- BadRequestError, malformed bodies and invalid parameters -> 400
- StorageUnavailableError and anything unexpected -> 500 (logged, no details)
"""

import logging
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import BadRequestError, NotFoundError, StorageUnavailableError
from .schemas import (
    DemoRecord,
    FrameUpdate,
    UpdatedFrame,
    demo_to_record,
    frame_to_update_response,
)
from .storage import FrameStore

logger = logging.getLogger("framedeck")

GENERIC_SERVER_ERROR = "Internal server error"


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Summarize validation errors by location without echoing the submitted input."""
    problems: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(item) for item in error.get("loc", ())]
        source = loc[0] if loc else "body"
        name = ".".join(loc[1:])
        message = error.get("msg", "invalid value")
        problems.setdefault(source, []).append(f"{name}: {message}" if name else message)

    parts = []
    for source, messages in problems.items():
        label = "Malformed request body" if source == "body" else f"Invalid {source} parameter"
        details = "; ".join(messages)
        parts.append(f"{label} ({details})")
    return "; ".join(parts) or "Malformed request"


def configure_error_handlers(app: FastAPI) -> None:
    """Register the error translation policy on the app."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": _describe_validation_errors(exc)},
        )

    @app.exception_handler(StorageUnavailableError)
    async def storage_handler(request: Request, exc: StorageUnavailableError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception):
        logger.exception(f"Unexpected error handling {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})


def configure_routes(app: FastAPI, store: FrameStore) -> None:
    """Define the API routes: demo listing, frame update and health."""

    @app.get("/health")
    def health_check():
        healthy = store.check_health()
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={"status": "ok" if healthy else "unavailable", "database": healthy},
        )

    @app.get("/demos", response_model=List[DemoRecord])
    def list_demos():
        demos = store.list_demos_with_frames()
        logger.debug(f"Listing {len(demos)} demos")
        return [demo_to_record(demo) for demo in demos]

    @app.put("/frames/{frame_id}", response_model=UpdatedFrame)
    def update_frame(frame_id: str, payload: FrameUpdate):
        frame = store.update_frame_html(frame_id, payload.html)
        return frame_to_update_response(frame)
