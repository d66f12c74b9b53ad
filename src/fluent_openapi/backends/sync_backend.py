"""Synchronous httpx backend with status mapping, streaming, and retry.

:class:`HttpxBackend` is the default backend built by
:func:`~fluent_openapi.client.create_client` when a
:class:`~fluent_openapi.models.ClientConfig` is given. It layers on top of
:class:`httpx.Client`:

- **Status mapping** -- 2xx responses come back as
  :class:`~fluent_openapi.models.ApiResponse`; anything else raises an
  :class:`~fluent_openapi.exceptions.HTTPError` subclass.
- **Streaming** -- ``get_stream()`` requests return a lazy generator of
  byte chunks.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...) up to ``config.max_retries``.

See Also:
    :class:`~fluent_openapi.backends.async_backend.AsyncHttpxBackend` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import time
from typing import Any, Iterator, Optional

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


class HttpxBackend(Backend):
    """Blocking backend backed by :class:`httpx.Client`.

    The underlying client is opened on first use (or on ``__enter__``) and
    closed by :meth:`close` / ``__exit__``.

    Args:
        config: Base URL, timeout, SSL, default headers and retry settings.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with HttpxBackend(ClientConfig(url="https://api.example.com")) as backend:
            client = create_client(spec, backend=backend)
            client.magic.get()
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpxBackend:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    # ------------------------------------------------------------------ #
    # Backend contract
    # ------------------------------------------------------------------ #

    def http(self, request: ApiRequest) -> ApiResponse | Iterator[bytes]:
        """Send *request*.

        Returns:
            An :class:`ApiResponse` for 2xx responses, or a generator of byte
            chunks when ``request.stream`` is set.

        Raises:
            HTTPError: For non-2xx statuses (subclassed by status).
            ConnectionError_: On network / timeout errors after all retries.
        """
        kwargs = request_kwargs(self._config, request)
        if request.stream:
            return self._stream(kwargs)

        response = self._execute_with_retry(kwargs)
        error = error_for_status(response)
        if error is not None:
            raise error
        return to_api_response(response)

    def _stream(self, kwargs: dict[str, Any]) -> Iterator[bytes]:
        client = self._ensure_client()
        get_output().debug(f"Streaming {kwargs['method']} {kwargs['url']}")
        try:
            with client.stream(**kwargs) as response:
                if not 200 <= response.status_code < 300:
                    response.read()
                    error = error_for_status(response)
                    assert error is not None
                    raise error
                yield from response.iter_bytes()
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Connection failed: {exc}") from exc

    def _execute_with_retry(self, kwargs: dict[str, Any]) -> httpx.Response:
        """Execute the request, retrying 5xx and network errors with backoff."""
        client = self._ensure_client()
        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                output.debug(f"{kwargs['method']} {kwargs['url']}")
                response = client.request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
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
                time.sleep(delay)
                continue
            return response

        raise ConnectionError_("Request failed after all retries")  # pragma: no cover


class RawHttpxBackend(HttpxBackend):
    """Backend that returns the :class:`httpx.Response` untouched.

    No status interpretation, no retry: useful when the caller wants headers,
    redirects or error bodies exactly as the server sent them.

    For ``get_stream()`` requests the response is returned unread; iterate
    ``response.iter_bytes()`` and call ``response.close()`` when done.
    """

    def http(self, request: ApiRequest) -> httpx.Response:  # type: ignore[override]
        kwargs = request_kwargs(self._config, request)
        client = self._ensure_client()
        if request.stream:
            return client.send(client.build_request(**kwargs), stream=True)
        return client.request(**kwargs)
