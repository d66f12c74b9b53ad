"""Backends -- perform the requests that compiled nodes assemble.

Classes:
    :class:`Backend` -- abstract contract: ``http(request) -> result``.
    :class:`HttpxBackend` -- blocking backend over :class:`httpx.Client`.
    :class:`AsyncHttpxBackend` -- coroutine-returning backend over
        :class:`httpx.AsyncClient`.
    :class:`RawHttpxBackend` -- returns raw :class:`httpx.Response` objects.
    :class:`OperationBackend` -- hands requests to an ``operationId`` executor.
"""

from fluent_openapi.backends.async_backend import AsyncHttpxBackend
from fluent_openapi.backends.base import Backend, CallableBackend, as_backend
from fluent_openapi.backends.operation import OperationBackend
from fluent_openapi.backends.sync_backend import HttpxBackend, RawHttpxBackend

__all__ = [
    "AsyncHttpxBackend",
    "Backend",
    "CallableBackend",
    "HttpxBackend",
    "OperationBackend",
    "RawHttpxBackend",
    "as_backend",
]
