"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~fluent_openapi.exceptions.FluentError` subclass.
Shell wrappers can inspect the exit code of ``fluent-openapi call`` to
determine the failure class without parsing stderr.

Example::

    $ fluent-openapi call 'api.v1.namespaces(nope)' get
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unknown navigation path."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the request as unauthenticated or forbidden (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP error status other than 401/403/404."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SPEC_ERROR = 7
"""The API description could not be loaded or compiled."""
