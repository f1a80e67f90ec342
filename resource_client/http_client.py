from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx

from .config import Settings, get_settings
from .errors import ParseClientError, RequestFailedError
from .logger import Log
from .resource_error import ResourceError

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


class ResourceHttpClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.client = httpx.AsyncClient(
            base_url=settings.base_url,
            follow_redirects=True,
            timeout=httpx.Timeout(settings.request_timeout_seconds),
            headers={"User-Agent": settings.user_agent},
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = await self._send_with_retries(method, url, **kwargs)

        if response.status_code >= 400:
            error = ResourceError.from_response(response, response.content, None)
            Log.warning(
                "Request failed with error status",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            raise RequestFailedError(error)

        return response

    async def fetch_text(self, url: str) -> str:
        response = await self.request("GET", url)
        return response.text

    async def fetch_json(self, url: str, params: Mapping[str, str | int] | None = None) -> Any:
        response = await self.request("GET", url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            parse_error = ParseClientError("The server response could not be read.")
            parse_error.__cause__ = exc
            Log.warning("Invalid JSON response", method="GET", url=url, status_code=response.status_code)
            raise RequestFailedError(
                ResourceError.from_response(response, response.content, parse_error)
            ) from exc

    async def _send_once(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        request = self.client.build_request(method, url, **kwargs)
        response = await self.client.send(request, stream=True)
        try:
            await response.aread()
        except httpx.DecodingError as exc:
            # The status line arrived; only the body is unreadable.
            Log.warning(
                "Undecodable response body",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            raise RequestFailedError(ResourceError.from_response(response, None, exc)) from exc
        finally:
            await response.aclose()
        return response

    async def _send_with_retries(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        retry_count = self.settings.max_retries
        backoff_base_seconds = self.settings.retry_backoff_base_seconds
        last_error: httpx.RequestError | None = None

        for attempt in range(1, retry_count + 1):
            try:
                return await self._send_once(method, url, **kwargs)
            except httpx.TransportError as exc:
                last_error = exc
                Log.debug(f"Transport error: {exc!r}", method=method, url=url, attempt=attempt)
                if attempt == retry_count or not is_retryable(method, exc):
                    break
            except httpx.RequestError as exc:
                last_error = exc
                break

            await asyncio.sleep(backoff_base_seconds * (2 ** (attempt - 1)))

        error = ResourceError.from_response(None, None, last_error)
        Log.error(f"Request failed: {error.user_message}", method=method, url=url)
        raise RequestFailedError(error) from last_error


def is_retryable(method: str, exc: httpx.TransportError) -> bool:
    """Whether resending after ``exc`` cannot repeat a side effect."""
    if method.upper() in IDEMPOTENT_METHODS:
        return True
    # Nothing reached the server if the connection was never established.
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


def create_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ResourceHttpClient:
    settings = settings or get_settings()
    Log.configure(settings.log_level)
    return ResourceHttpClient(settings, transport=transport)
