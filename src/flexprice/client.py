"""Authenticated HTTP client for the FlexPrice API.

One ``aiohttp.ClientSession`` per client; use it as an async context manager
or call ``close()``.  Requests are never retried: a 401 becomes
``UnauthorizedError``, a transport failure ``NetworkError``, any other
non-2xx ``ApiError``.  Callers that want resilience wrap calls themselves.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import aiohttp

from .auth import Credentials
from .errors import ApiError, NetworkError, UnauthorizedError
from .helpers import http_debug_log

REQUEST_TIMEOUT = 30.0
USER_AGENT = "flexprice-cli"

_STATUS_HINTS = {
    403: "Permission denied. Your credentials may not have access to this resource.",
    404: "Resource not found. Verify the ID is correct.",
}


def _error_message(status: int, reason: str, body: str) -> str:
    """Build a readable message from an error response body."""
    try:
        data = json.loads(body)
    except ValueError:
        data = None

    if isinstance(data, dict):
        msg = data.get("error") or data.get("message")
        if isinstance(msg, dict):
            msg = msg.get("message") or json.dumps(msg)
        if msg:
            hint = data.get("hint")
            text = f"{status} ({reason}): {msg}"
            return f"{text} - {hint}" if hint else text

    if status in _STATUS_HINTS:
        return _STATUS_HINTS[status]
    return f"HTTP {status}: {body[:200]}" if body else f"HTTP {status} {reason}"


def _decode_body(raw: bytes, charset: Optional[str]) -> str:
    try:
        return raw.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


class ApiClient:
    """FlexPrice API client signing every request with resolved credentials."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.credentials = credentials
        self.base_url = credentials.api_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def headers(self, *, authenticated: bool = True) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if authenticated:
            auth_header = self.credentials.auth_header()
            if auth_header is not None:
                name, value = auth_header
                headers[name] = value
            if self.credentials.environment_id:
                headers["x-environment-id"] = self.credentials.environment_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> Any:
        """Send one request and return the decoded JSON body ({} when empty)."""
        url = self.url(path)
        headers = self.headers(authenticated=authenticated)
        http_debug_log("api", "request", method=method, url=url, headers=headers, params=params)

        session = self._get_session()
        try:
            async with session.request(
                method,
                url,
                json=body,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                text = _decode_body(await resp.read(), resp.charset)
                http_debug_log("api", "response", method=method, url=url, status=resp.status)
                if resp.status == 401:
                    raise UnauthorizedError()
                if resp.status >= 400:
                    raise ApiError(resp.status, _error_message(resp.status, resp.reason or "", text))
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            http_debug_log("api", "network_error", method=method, url=url, error=repr(e))
            raise NetworkError(e) from e
        except aiohttp.ClientError as e:
            raise NetworkError(e) from e

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError as e:
            raise ApiError(resp.status, f"Expected JSON from {path}, got: {text[:120]!r}") from e

    async def get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body)

    async def health_check(self) -> None:
        """Raise unless ``GET /health`` answers 2xx."""
        await self.request("GET", "/health", authenticated=False)

    async def login(self, email: str, password: str) -> dict:
        """Exchange email/password for a session token.

        Returns the decoded ``{token, user_id, tenant_id}`` response.
        """
        data = await self.request(
            "POST",
            "/v1/auth/login",
            {"email": email, "password": password},
            authenticated=False,
        )
        if not isinstance(data, dict) or not data.get("token"):
            raise ApiError(0, "Login response did not include a token.")
        return data
