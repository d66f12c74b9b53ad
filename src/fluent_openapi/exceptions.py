"""Exception hierarchy for fluent_openapi.

All exceptions inherit from :class:`FluentError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`fluent_openapi.exit_codes`. The CLI entry point in
:func:`fluent_openapi.app.main` catches ``FluentError`` and exits with the
appropriate code. Library callers catch the specific subclasses.

Subclass hierarchy::

    FluentError (exit 1)
    +-- InvalidUsageError          (exit 2)
    |   +-- MissingBackendError    (exit 2)
    |   +-- UnsupportedOperationError (exit 2)
    +-- HTTPError                  (exit 5)
    |   +-- AuthError              (exit 3)
    |   +-- NotFoundError          (exit 4)
    |   +-- ServerError            (exit 5)
    +-- ConnectionError_           (exit 6)
    +-- SpecParseError             (exit 7)
    |   +-- SpecConflictError      (exit 7)
    +-- ConfigError                (exit 1)
"""

from __future__ import annotations

from typing import Any, Optional

from fluent_openapi.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_SPEC_ERROR,
)


class FluentError(Exception):
    """Base exception for all fluent_openapi errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`fluent_openapi.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FluentError):
    """Raised for invalid arguments, such as an unknown navigation expression."""

    exit_code = EXIT_INVALID_USAGE


class MissingBackendError(InvalidUsageError):
    """Raised when a client is constructed without a backend or a config to build one."""


class UnsupportedOperationError(InvalidUsageError):
    """Raised when a verb is invoked on a node whose path item does not declare it."""


class HTTPError(FluentError):
    """Raised by backends for a non-success HTTP status.

    The status is exposed as ``status_code`` and, for callers written
    against older clients, as ``code``.

    Args:
        message: Error message, usually taken from the response body.
        status_code: Numeric HTTP status.
        body: Decoded response body, if any.
        response: The underlying transport response, if any.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        response: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.response = response

    @property
    def code(self) -> int:
        return self.status_code


class AuthError(HTTPError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(HTTPError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(HTTPError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(FluentError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(FluentError):
    """Raised when an API description cannot be loaded or has no usable ``paths``."""

    exit_code = EXIT_SPEC_ERROR


class SpecConflictError(SpecParseError):
    """Raised when a path template cannot be reconciled with the compiled tree.

    This signals a self-contradictory set of path templates and aborts
    compilation; it is never raised for a single recoverable path.
    """


class ConfigError(FluentError):
    """Raised for configuration problems (invalid JSON, unknown keys)."""

    exit_code = EXIT_GENERIC_FAILURE
