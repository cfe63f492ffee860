"""
api_client.py — HTTP client for the grab goals REST backend.
Attaches the bearer token, decodes JSON and turns failures into client errors.
Uses httpx (async) for every call.
"""
import logging
from typing import Any, Callable

import httpx

from grabgoals.config import API_BASE_URL, REQUEST_TIMEOUT
from grabgoals.exceptions import ApiError, BackendUnavailable, Unauthorized

logger = logging.getLogger(__name__)


def _error_message(resp: httpx.Response) -> str:
    """Pull a readable message out of an error response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {resp.status_code}"


class ApiClient:
    """Async wrapper around the backend's JSON resources."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        token_provider: Callable[[], str | None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    def _headers(self, auth: bool, token: str | None) -> dict:
        headers = {"Accept": "application/json"}
        if token is None and auth and self.token_provider:
            token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    # ------------------------------------------------------------------
    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
        files: dict | None = None,
        auth: bool = True,
        token: str | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty).

        Raises:
            Unauthorized: the backend answered 401.
            ApiError: any other non-2xx answer; the message comes from the body.
            BackendUnavailable: the request never got an answer.
        """
        try:
            resp = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                files=files,
                headers=self._headers(auth, token),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out: {e}")
            raise BackendUnavailable("The request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise BackendUnavailable(str(e) or "Network error") from e

        if resp.status_code == 401:
            raise Unauthorized(_error_message(resp))
        if resp.is_error:
            message = _error_message(resp)
            logger.debug(f"{method} {path} -> {resp.status_code}: {message}")
            raise ApiError(message, resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError("Invalid JSON in response", resp.status_code) from e

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)
