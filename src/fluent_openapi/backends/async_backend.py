"""Asynchronous httpx backend -- mirrors :class:`~fluent_openapi.backends.sync_backend.HttpxBackend`.

With this backend every verb call returns a coroutine, the pending result of
the request: awaiting it yields an :class:`~fluent_openapi.models.ApiResponse`
or raises exactly once. ``get_stream()`` returns an async generator of byte
chunks instead.

Example::

    async with AsyncHttpxBackend(ClientConfig(url=url)) as backend:
        client = create_client(spec, backend=backend)
        response = await client.magic.get()
        async for chunk in client.logs.get_stream():
            ...
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Awaitable, Optional

import httpx

from fluent_openapi.backends.base import (
    Backend,
    error_for_status,
    request_kwargs,
    to_api_response,
)
from fluent_openapi.exceptions import ConnectionError_
from fluent_openapi.models import ApiRequest, ApiResponse, ClientConfig
from fluent_openapi.output import get_output


class AsyncHttpxBackend(Backend):
    """Non-blocking backend backed by :class:`httpx.AsyncClient`.

    Args:
        config: Base URL, timeout, SSL, default headers and retry settings.
        transport: Optional async httpx transport (e.g.
            :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AsyncHttpxBackend:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def http(self, request: ApiRequest) -> Awaitable[ApiResponse] | AsyncIterator[bytes]:
        """Return a coroutine for *request*, or an async byte iterator for streams."""
        kwargs = request_kwargs(self._config, request)
        if request.stream:
            return self._stream(kwargs)
        return self._send(kwargs)

    async def _send(self, kwargs: dict[str, Any]) -> ApiResponse:
        response = await self._execute_with_retry(kwargs)
        error = error_for_status(response)
        if error is not None:
            raise error
        return to_api_response(response)

    async def _stream(self, kwargs: dict[str, Any]) -> AsyncIterator[bytes]:
        client = self._ensure_client()
        get_output().debug(f"Streaming {kwargs['method']} {kwargs['url']}")
        try:
            async with client.stream(**kwargs) as response:
                if not 200 <= response.status_code < 300:
                    await response.aread()
                    error = error_for_status(response)
                    assert error is not None
                    raise error
                async for chunk in response.aiter_bytes():
                    yield chunk
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Connection failed: {exc}") from exc

    async def _execute_with_retry(self, kwargs: dict[str, Any]) -> httpx.Response:
        """Execute the request, retrying 5xx and network errors with backoff."""
        client = self._ensure_client()
        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                output.debug(f"{kwargs['method']} {kwargs['url']}")
                response = await client.request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(delay)
                continue
            return response

        raise ConnectionError_("Request failed after all retries")  # pragma: no cover
