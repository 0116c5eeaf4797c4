# framedeck/core/client.py

"""
HTTP client for the framedeck API.

Used by the terminal editor (through EditorSession) to fetch the demo list
and to save a frame. Transport problems and non-success responses are
mapped onto the framedeck exception taxonomy so callers deal with one set
of errors regardless of where the failure happened.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..exceptions import (
    BadRequestError,
    NetworkFailureError,
    NotFoundError,
    RemoteServerError,
)
from .schemas import DemoRecord, UpdatedFrame
from .settings import DEFAULT_API_URL

logger = logging.getLogger("framedeck")


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("error") or body.get("detail")
    return None


class FramedeckClient:
    """
    Synchronous API client.

    Args:
        base_url: Root URL of the API server
        timeout: Request timeout in seconds
        http_client: Pre-built httpx.Client (e.g. FastAPI's TestClient);
            when given, base_url and timeout are ignored and the caller
            owns its lifetime
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkFailureError(f"Could not reach {path}", original_error=e) from e

        if response.is_success:
            return response

        message = _error_message(response)
        if response.status_code == 404:
            raise NotFoundError(message or f"Not found: {path}")
        if response.status_code in (400, 422):
            raise BadRequestError(message)
        raise RemoteServerError(response.status_code, message)

    def fetch_demos(self) -> List[DemoRecord]:
        """GET /demos"""
        response = self._request("GET", "/demos")
        try:
            return [DemoRecord.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            raise NetworkFailureError("Unexpected response for /demos", original_error=e) from e

    def update_frame(self, frame_id: str, html: str) -> UpdatedFrame:
        """PUT /frames/{id}"""
        response = self._request("PUT", f"/frames/{quote(frame_id, safe='')}", json={"html": html})
        try:
            return UpdatedFrame.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise NetworkFailureError(f"Unexpected response for frame {frame_id}", original_error=e) from e

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "FramedeckClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
