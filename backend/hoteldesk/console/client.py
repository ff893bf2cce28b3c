"""
HTTP client for the HotelDesk API

Wraps an httpx.Client that keeps the session cookie between calls. Any 401
from an endpoint other than login flips ``session.expired`` so the console can
show its "session expired" prompt instead of a generic error.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from hoteldesk.config import settings

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"
DEFAULT_ERROR = "An unexpected error occurred"


class ApiError(Exception):
    """A failed API call, carrying the message to show the user"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionExpiredError(ApiError):
    """The server rejected the session cookie"""


@dataclass
class SessionState:
    expired: bool = False

    def reset(self) -> None:
        self.expired = False


def to_json(value: Any) -> Any:
    """Make form values (dates, decimals, enums) JSON-safe"""
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    return value


def error_message(response: httpx.Response, fallback: str = DEFAULT_ERROR) -> str:
    """Prefer the server's ``message``, then ``detail``, then the fallback"""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class ApiClient:
    """
    Thin JSON client over httpx

    Args:
        base_url: API root, defaults to settings.PUBLIC_BASE_URL
        http_client: a ready httpx.Client (e.g. FastAPI's TestClient)
        timeout: request timeout in seconds when the client is built here
    """

    def __init__(self, base_url: Optional[str] = None, http_client: Optional[httpx.Client] = None,
                 timeout: float = 10.0):
        self.session = SessionState()
        if http_client is None:
            http_client = httpx.Client(base_url=base_url or settings.PUBLIC_BASE_URL, timeout=timeout)
        http_client.event_hooks["response"].append(self._on_response)
        self.http = http_client

    def _on_response(self, response: httpx.Response) -> None:
        if response.status_code == 401 and response.request.url.path != LOGIN_PATH:
            if not self.session.expired:
                logger.warning("Session expired (%s %s)", response.request.method, response.request.url.path)
            self.session.expired = True

    def request(self, method: str, path: str, fallback: str = DEFAULT_ERROR, **kwargs) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body"""
        if "json" in kwargs:
            kwargs["json"] = to_json(kwargs["json"])
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(str(e) or fallback) from e

        if response.is_error:
            message = error_message(response, fallback)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            if response.status_code == 401 and path != LOGIN_PATH:
                raise SessionExpiredError(message, response.status_code)
            raise ApiError(message, response.status_code)

        if "application/json" not in response.headers.get("content-type", ""):
            return {"success": True, "content": response.text}
        return response.json()

    def get(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.http.close()
