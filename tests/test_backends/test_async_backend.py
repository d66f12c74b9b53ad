"""Tests for the asynchronous httpx backend.

Coroutines are driven with :func:`asyncio.run` so no async pytest plugin is
needed.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from fluent_openapi.backends.async_backend import AsyncHttpxBackend
from fluent_openapi.client import create_client
from fluent_openapi.exceptions import ConnectionError_, NotFoundError
from fluent_openapi.models import ApiResponse, ClientConfig
from fluent_openapi.output import OutputManager, reset_output, set_output


SPEC: dict[str, Any] = {
    "paths": {
        "/magic": {"get": {"operationId": "getMagic"}},
        "/logs/{name}": {"get": {"operationId": "readLog"}},
    }
}


def _backend(handler, **overrides: Any) -> AsyncHttpxBackend:
    config = ClientConfig(url="https://foo.com", **overrides)
    return AsyncHttpxBackend(config, transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def _clean_output():
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


class TestPendingResult:
    def test_verb_returns_coroutine(self) -> None:
        backend = _backend(lambda request: httpx.Response(200, json={"message": "ta dah"}))
        client = create_client(SPEC, backend=backend)

        async def run() -> ApiResponse:
            async with backend:
                pending = client.magic.get()
                assert inspect.iscoroutine(pending)
                return await pending

        response = asyncio.run(run())
        assert response.status_code == 200
        assert response.body == {"message": "ta dah"}

    def test_rejection_carries_status(self) -> None:
        backend = _backend(lambda request: httpx.Response(404, json={"message": "fail!"}))
        client = create_client(SPEC, backend=backend)

        async def run() -> None:
            async with backend:
                await client.magic.get()

        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "fail!"

    def test_request_is_sent_once(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        backend = _backend(handler)
        client = create_client(SPEC, backend=backend)

        async def run() -> None:
            async with backend:
                await client.magic.get()

        asyncio.run(run())
        assert len(calls) == 1


class TestStreaming:
    def test_async_stream(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/logs/web-0"
            return httpx.Response(200, content=b"a\nb\n")

        backend = _backend(handler)
        client = create_client(SPEC, backend=backend)

        async def run() -> bytes:
            chunks = []
            async with backend:
                async for chunk in client.logs("web-0").get_stream():
                    chunks.append(chunk)
            return b"".join(chunks)

        assert asyncio.run(run()) == b"a\nb\n"


class TestRetry:
    def test_retries_then_fails_with_connection_error(self) -> None:
        attempts: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(1)
            raise httpx.ConnectError("Connection refused", request=request)

        backend = _backend(handler, max_retries=2)
        client = create_client(SPEC, backend=backend)

        async def run() -> None:
            async with backend:
                await client.magic.get()

        with patch(
            "fluent_openapi.backends.async_backend.asyncio.sleep", new=AsyncMock()
        ) as sleep:
            with pytest.raises(ConnectionError_):
                asyncio.run(run())

        assert len(attempts) == 3
        assert [c.args[0] for c in sleep.call_args_list] == [1, 2]
