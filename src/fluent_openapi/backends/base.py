"""Backend contract and helpers shared by the httpx adapters.

A backend is the only collaborator the dispatcher talks to. It receives a
fully resolved :class:`~fluent_openapi.models.ApiRequest` and returns
whatever the caller should get back from a verb call: a response, an
awaitable, or a byte stream. Retry, status interpretation and streaming
policy all live here, never in the compiled tree.

Anything with an ``http(request)`` method, or a plain callable, can serve as
a backend; :func:`as_backend` normalises the two.
"""

from __future__ import annotations

import abc
from typing import Any, Callable, Optional

import httpx

from fluent_openapi.exceptions import (
    AuthError,
    HTTPError,
    InvalidUsageError,
    MissingBackendError,
    NotFoundError,
    ServerError,
)
from fluent_openapi.models import ApiRequest, ApiResponse, ClientConfig


class Backend(abc.ABC):
    """Abstract base class for request backends."""

    @abc.abstractmethod
    def http(self, request: ApiRequest) -> Any:
        """Perform *request* and return its result (or a handle to it)."""


class CallableBackend(Backend):
    """Adapt a plain ``fn(request)`` callable to the :class:`Backend` contract."""

    def __init__(self, fn: Callable[[ApiRequest], Any]) -> None:
        self._fn = fn

    def http(self, request: ApiRequest) -> Any:
        return self._fn(request)


def as_backend(obj: Any) -> Backend:
    """Return *obj* as a :class:`Backend`.

    Raises:
        MissingBackendError: If *obj* is ``None``.
        InvalidUsageError: If *obj* has no ``http`` method and is not callable.
    """
    if obj is None:
        raise MissingBackendError(
            "No backend supplied: pass backend=... or config=ClientConfig(url=...)"
        )
    if isinstance(obj, Backend):
        return obj
    http = getattr(obj, "http", None)
    if callable(http):
        return CallableBackend(http)
    if callable(obj):
        return CallableBackend(obj)
    raise InvalidUsageError(
        f"Backend must define http(request) or be callable (got {type(obj).__name__})"
    )


# ---------------------------------------------------------------------------
# httpx helpers
# ---------------------------------------------------------------------------


def build_url(config: ClientConfig, pathname: str) -> str:
    """Join ``config.url`` and *pathname* with exactly one slash."""
    base = (config.url or "").rstrip("/")
    if not pathname.startswith("/"):
        pathname = f"/{pathname}"
    return f"{base}{pathname}"


def request_kwargs(config: ClientConfig, request: ApiRequest) -> dict[str, Any]:
    """Translate *request* into keyword arguments for ``httpx.Client.request``."""
    headers: dict[str, str] = {"Accept": "application/json"}
    headers.update(config.headers)
    headers.update({k: str(v) for k, v in request.headers.items()})

    kwargs: dict[str, Any] = {
        "method": request.method.value,
        "url": build_url(config, request.pathname),
        "headers": headers,
    }
    if request.query:
        kwargs["params"] = request.query
    if isinstance(request.body, (str, bytes)):
        kwargs["content"] = request.body
    elif request.body is not None:
        kwargs["json"] = request.body
    return kwargs


def decode_body(response: httpx.Response) -> Any:
    """Return the response body as JSON, else text, else ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def to_api_response(response: httpx.Response) -> ApiResponse:
    return ApiResponse(
        status_code=response.status_code,
        headers=dict(response.headers),
        body=decode_body(response),
    )


def error_for_status(response: httpx.Response) -> Optional[HTTPError]:
    """Return the typed error for a non-2xx *response*, or ``None``.

    The message is the body's ``message``, ``error`` or ``detail`` field
    when present, otherwise the reason phrase.
    """
    status = response.status_code
    if 200 <= status < 300:
        return None

    body = decode_body(response)
    message = ""
    if isinstance(body, dict):
        message = str(body.get("message") or body.get("error") or body.get("detail") or "")
    elif isinstance(body, str):
        message = body[:200]
    if not message:
        message = response.reason_phrase or f"HTTP {status}"

    error_cls: type[HTTPError] = HTTPError
    if status in (401, 403):
        error_cls = AuthError
    elif status == 404:
        error_cls = NotFoundError
    elif status >= 500:
        error_cls = ServerError
    return error_cls(message, status_code=status, body=body, response=response)
