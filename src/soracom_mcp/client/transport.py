"""
Async HTTP transport for the SORACOM REST API.

One transport exists per client registry entry. It owns an aiohttp session
bound to the region's base URL and a fixed request timeout, and wraps every
outbound call in two steps:

- request preparation: standard headers (User-Agent, Accept) plus the
  entry's short-lived auth headers, and a debug log line;
- response handling: non-2xx responses become SoracomApiError; a 401 on an
  authenticated request drives exactly one re-authentication and resubmit
  of the original request through the installed AuthHandler.

Timeouts and connection failures are logged and propagated, never retried.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from core.errors.exceptions import (
    ApiConnectionError,
    RequestTimeoutError,
    SoracomError,
)
from core.types import ErrorCategory
from soracom_mcp import SERVER_NAME, __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
ACCEPT_TYPE = "application/json"
API_KEY_HEADER = "X-Soracom-API-Key"
TOKEN_HEADER = "X-Soracom-Token"
HTTP_UNAUTHORIZED = 401


def default_user_agent() -> str:
    return f"{SERVER_NAME}/{__version__}"


class SoracomApiError(SoracomError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        category: ErrorCategory = ErrorCategory.TRANSIENT,
        api_message: str | None = None,
        url: str | None = None,
    ):
        super().__init__(message, context={"status_code": status_code, "url": url})
        self.status_code = status_code
        self.category = category
        self.api_message = api_message
        self.url = url


# (label, category) per status code
_STATUS_MAP: dict[int, tuple[str, ErrorCategory]] = {
    400: ("Bad request", ErrorCategory.PERMANENT),
    401: ("Unauthorized", ErrorCategory.AUTH),
    403: ("Forbidden", ErrorCategory.PERMANENT),
    404: ("Not found", ErrorCategory.PERMANENT),
    429: ("Rate limited", ErrorCategory.TRANSIENT),
    500: ("Server error", ErrorCategory.TRANSIENT),
    502: ("Server error", ErrorCategory.TRANSIENT),
    503: ("Server error", ErrorCategory.TRANSIENT),
    504: ("Server error", ErrorCategory.TRANSIENT),
}


def classify_api_error(status: int, url: str, api_message: str | None = None) -> SoracomApiError:
    """Classify an HTTP status into a SoracomApiError with the matching category."""
    entry = _STATUS_MAP.get(status)
    if entry:
        label, category = entry
    elif 400 <= status < 500:
        # Fallback: remaining 4xx are permanent, everything else is transient
        label, category = "Client error", ErrorCategory.PERMANENT
    else:
        label, category = "HTTP error", ErrorCategory.TRANSIENT

    message = f"{label} ({status}): {url}"
    if api_message:
        message = f"{message}: {api_message}"

    return SoracomApiError(
        message,
        status_code=status,
        category=category,
        api_message=api_message,
        url=url,
    )


class AuthHandler(Protocol):
    """Session owner consulted by the transport for auth headers and 401 recovery."""

    @property
    def can_reauthenticate(self) -> bool: ...

    def auth_headers(self) -> dict[str, str]: ...

    async def reauthenticate(self) -> None: ...


@dataclass
class ApiRequest:
    """A single logical request; survives a resubmit so the retry marker sticks."""

    method: str
    path: str
    params: dict[str, Any] | None = None
    json_body: Any = None
    authenticated: bool = True
    headers: dict[str, str] = field(default_factory=dict)
    retried: bool = False


def encode_path_segment(value: str) -> str:
    """Percent-encode a path parameter so it stays a single segment."""
    return quote(str(value), safe="")


def clean_params(params: dict[str, Any] | None) -> dict[str, str] | None:
    """Drop None values and render values the way the API expects them."""
    if not params:
        return None
    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned or None


class SoracomTransport:
    """Async HTTP client bound to one SORACOM API endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str | None = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else ""

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"SoracomTransport base_url must start with http:// or https://, got: {base_url!r}"
            )

        if timeout_seconds <= 0:
            raise ValueError("SoracomTransport timeout_seconds must be positive")

        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent or default_user_agent()
        self.auth: AuthHandler | None = None

        self._session: aiohttp.ClientSession | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise RuntimeError("SoracomTransport is closed, cannot create new session")
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        self._closed = True
        if self._session and not self._session.closed:
            await self._session.close()
            # Give the connector a loop iteration to release sockets
            await asyncio.sleep(0)
        self._session = None

    def build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _prepare(self, request: ApiRequest) -> None:
        """Attach standard and auth headers, then log the outbound call."""
        request.headers["User-Agent"] = self.user_agent
        request.headers["Accept"] = ACCEPT_TYPE
        if request.authenticated and self.auth is not None:
            request.headers.update(self.auth.auth_headers())

        logger.debug(
            "Making API request",
            extra={
                "api_method": request.method,
                "api_endpoint": request.path,
                "base_url": self.base_url,
            },
        )

    def _should_reauthenticate(self, error: SoracomApiError, request: ApiRequest) -> bool:
        return (
            error.status_code == HTTP_UNAUTHORIZED
            and request.authenticated
            and not request.retried
            and self.auth is not None
            and self.auth.can_reauthenticate
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        authenticated: bool = True,
    ) -> Any:
        """
        Issue one logical API call and return the parsed JSON body.

        A 401 on an authenticated request triggers at most one
        re-authentication followed by one resubmit of the same request. If
        re-authentication fails, the original 401 error is raised.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            params: Query parameters (None values dropped)
            json_body: JSON request body
            authenticated: Attach auth headers and allow 401 recovery

        Raises:
            SoracomApiError: Non-2xx response
            RequestTimeoutError: Request exceeded the fixed timeout
            ApiConnectionError: Connection-level failure
        """
        request = ApiRequest(
            method=method.upper(),
            path=path,
            params=clean_params(params),
            json_body=json_body,
            authenticated=authenticated,
        )
        self._prepare(request)

        try:
            return await self._send(request)
        except SoracomApiError as error:
            if not self._should_reauthenticate(error, request):
                raise
            original_error = error

        request.retried = True
        logger.info(
            "Received 401, re-authenticating and retrying request once",
            extra={"api_method": request.method, "api_endpoint": request.path},
        )

        try:
            await self.auth.reauthenticate()
        except SoracomError as reauth_error:
            logger.warning(
                "Re-authentication failed, returning original error",
                extra={
                    "api_endpoint": request.path,
                    "error": str(reauth_error),
                },
            )
            raise original_error from None

        request.headers.update(self.auth.auth_headers())
        return await self._send(request)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: Any = None, *, authenticated: bool = True) -> Any:
        return await self.request("POST", path, json_body=json_body, authenticated=authenticated)

    async def _handle_error_response(
        self, response: aiohttp.ClientResponse, request: ApiRequest, url: str, duration: float
    ) -> None:
        """Read error body, classify error, log, and raise."""
        api_message = None
        response_body_log = ""
        try:
            response_body = await response.text()
            response_body_log = (
                response_body[:500] + "..." if len(response_body) > 500 else response_body
            )
            payload = await response.json(content_type=None)
            if isinstance(payload, dict):
                api_message = payload.get("message") or payload.get("code")
        except (aiohttp.ClientError, ValueError):
            # Non-JSON error bodies are kept in the log only
            pass

        error = classify_api_error(response.status, url, api_message)
        logger.warning(
            "API request failed",
            extra={
                "api_method": request.method,
                "api_endpoint": request.path,
                "http_url": url,
                "http_status": response.status,
                "error_category": error.category.value,
                "api_message": api_message,
                "response_body": response_body_log,
                "retried": request.retried,
                "duration_ms": round(duration * 1000, 1),
            },
        )
        raise error

    async def _send(self, request: ApiRequest) -> Any:
        session = await self._ensure_session()
        url = self.build_url(request.path)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        try:
            async with session.request(
                request.method,
                url,
                params=request.params,
                json=request.json_body,
                headers=request.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                duration = loop.time() - start_time

                if not 200 <= response.status < 300:
                    await self._handle_error_response(response, request, url, duration)

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    logger.warning(
                        "API response is not valid JSON",
                        extra={
                            "api_method": request.method,
                            "api_endpoint": request.path,
                            "http_url": url,
                            "http_status": response.status,
                            "error_category": ErrorCategory.PERMANENT.value,
                        },
                    )
                    raise SoracomApiError(
                        f"Invalid JSON response ({response.status}): {url}",
                        status_code=response.status,
                        category=ErrorCategory.PERMANENT,
                        url=url,
                    ) from e

                logger.debug(
                    "API request succeeded",
                    extra={
                        "api_method": request.method,
                        "api_endpoint": request.path,
                        "http_status": response.status,
                        "duration_ms": round(duration * 1000, 1),
                    },
                )
                return data

        except TimeoutError as e:
            duration = loop.time() - start_time
            logger.error(
                "Request timeout",
                extra={
                    "api_method": request.method,
                    "api_endpoint": request.path,
                    "http_url": url,
                    "base_url": self.base_url,
                    "timeout_seconds": self.timeout_seconds,
                    "duration_ms": round(duration * 1000, 1),
                    "error_category": ErrorCategory.TRANSIENT.value,
                },
            )
            raise RequestTimeoutError(
                f"Timeout after {self.timeout_seconds}s: {url}",
                context={"url": url},
            ) from e

        except aiohttp.ClientError as e:
            duration = loop.time() - start_time
            logger.error(
                "API connection error",
                extra={
                    "api_method": request.method,
                    "api_endpoint": request.path,
                    "http_url": url,
                    "base_url": self.base_url,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "duration_ms": round(duration * 1000, 1),
                    "error_category": ErrorCategory.TRANSIENT.value,
                },
            )
            raise ApiConnectionError(f"Connection error: {e}", context={"url": url}) from e


__all__ = [
    "API_KEY_HEADER",
    "TOKEN_HEADER",
    "DEFAULT_TIMEOUT_SECONDS",
    "ApiRequest",
    "AuthHandler",
    "SoracomApiError",
    "SoracomTransport",
    "classify_api_error",
    "clean_params",
    "default_user_agent",
    "encode_path_segment",
]
