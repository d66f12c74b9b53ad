"""Request dispatcher -- turn a verb call on a node into one backend call.

Every compiled node inherits :class:`Dispatcher`. Its verb methods (``get``,
``get_stream``, ``put``, ``post``, ``delete``, ``patch``) are fixed; whether a
node actually supports a verb is decided by the verb table the compiler
fills in. Invoking a verb the path item never declared raises
:class:`~fluent_openapi.exceptions.UnsupportedOperationError` before anything
reaches the backend.

A verb call assembles an :class:`~fluent_openapi.models.ApiRequest`:

* ``pathname`` -- the node's absolute literal path, bound values included.
* ``pathname_parameters`` -- placeholder names from the node's own template
  zipped, in order, with the values bound while navigating to it.
* ``headers`` -- a default ``content-type`` for PUT/POST (JSON) and PATCH
  (JSON merge patch) unless the caller sets one.
* ``operation_id`` -- the verb object's ``operationId``.
* everything else the caller passed (``body``, ``parameters``, ``qs``, ...).

The request is handed to ``backend.http()`` as-is and whatever the backend
returns (a response, an awaitable, a byte stream) is returned unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from fluent_openapi.compiler.templates import placeholder_names
from fluent_openapi.exceptions import InvalidUsageError, UnsupportedOperationError
from fluent_openapi.models import ApiRequest, HTTPMethod

if TYPE_CHECKING:
    from fluent_openapi.backends.base import Backend

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
MERGE_PATCH_CONTENT_TYPE = "application/merge-patch+json"

DEFAULT_CONTENT_TYPES: dict[HTTPMethod, str] = {
    HTTPMethod.PUT: JSON_CONTENT_TYPE,
    HTTPMethod.POST: JSON_CONTENT_TYPE,
    HTTPMethod.PATCH: MERGE_PATCH_CONTENT_TYPE,
}

# Fields computed from the node; callers cannot override them.
_RESERVED_OPTIONS = frozenset({"method", "pathname", "pathname_parameters", "path_item"})


class Dispatcher:
    """Verb methods and request assembly shared by every node."""

    _segments: tuple[str, ...]
    _parameter_values: tuple[Any, ...]
    _path_template: Optional[str]
    _path_item: Optional[dict[str, Any]]
    _operations: dict[HTTPMethod, dict[str, Any]]
    _backend: Backend

    @property
    def path(self) -> str:
        """Absolute literal path, e.g. ``/api/v1/namespaces/default``."""
        return "/" + "/".join(self._segments)

    @property
    def verbs(self) -> list[HTTPMethod]:
        return list(self._operations)

    def supports(self, method: HTTPMethod | str) -> bool:
        """Return ``True`` if *method* is in this node's verb table."""
        if isinstance(method, str) and not isinstance(method, HTTPMethod):
            resolved = HTTPMethod.from_key(method)
            if resolved is None:
                return False
            method = resolved
        return method in self._operations

    def pathname_parameters(self) -> dict[str, Any]:
        """Map each placeholder of the node's template to its bound value.

        Names are taken in declaration order and values in binding order, so
        ``/foo/{name}/bar/{type}`` reached via ``foo("a").bar("b")`` gives
        ``{"name": "a", "type": "b"}``.
        """
        if not self._path_template:
            return {}
        return dict(zip(placeholder_names(self._path_template), self._parameter_values))

    # ------------------------------------------------------------------ #
    # Verb methods
    # ------------------------------------------------------------------ #

    def get(self, **options: Any) -> Any:
        """Send a GET request for this node.

        Args:
            **options: ``parameters`` (or legacy ``qs``) for the query
                string, ``headers``, and any backend-specific extras.
        """
        return self._request(HTTPMethod.GET, options)

    def get_stream(self, **options: Any) -> Any:
        """Send a GET request and return the backend's streaming handle."""
        return self._request(HTTPMethod.GET, {"stream": True, **options})

    def put(self, **options: Any) -> Any:
        """Send a PUT request; ``content-type`` defaults to JSON."""
        return self._request(HTTPMethod.PUT, options)

    def post(self, **options: Any) -> Any:
        """Send a POST request; ``content-type`` defaults to JSON."""
        return self._request(HTTPMethod.POST, options)

    def delete(self, **options: Any) -> Any:
        return self._request(HTTPMethod.DELETE, options)

    def patch(self, **options: Any) -> Any:
        """Send a PATCH request; ``content-type`` defaults to JSON merge patch."""
        return self._request(HTTPMethod.PATCH, options)

    # ------------------------------------------------------------------ #
    # Request assembly
    # ------------------------------------------------------------------ #

    def build_request(self, method: HTTPMethod, options: Mapping[str, Any]) -> ApiRequest:
        """Assemble the request descriptor for *method* without sending it.

        Raises:
            UnsupportedOperationError: If the path item does not declare
                *method* for this node.
            InvalidUsageError: If *options* tries to set a node-derived field.
        """
        if method not in self._operations:
            declared = ", ".join(m.value for m in self._operations) or "none"
            raise UnsupportedOperationError(
                f"{method.value} is not declared for {self.path} (declared: {declared})"
            )

        reserved = _RESERVED_OPTIONS.intersection(options)
        if reserved:
            raise InvalidUsageError(
                f"Cannot override {', '.join(sorted(reserved))} on {self.path}"
            )

        fields = dict(options)
        headers = _with_default_content_type(method, fields.pop("headers", None))
        operation = self._operations[method]
        operation_id = fields.pop("operation_id", None) or operation.get("operationId")

        return ApiRequest(
            method=method,
            pathname=self.path,
            pathname_parameters=self.pathname_parameters(),
            path_item=self._path_item,
            operation_id=operation_id,
            headers=headers,
            **fields,
        )

    def _request(self, method: HTTPMethod, options: Mapping[str, Any]) -> Any:
        request = self.build_request(method, options)
        logger.debug(
            "%s %s %s", request.method.value, request.pathname, request.pathname_parameters
        )
        return self._backend.http(request)


def _with_default_content_type(
    method: HTTPMethod,
    headers: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    """Return *headers* with the method's default content type filled in."""
    merged: dict[str, Any] = dict(headers or {})
    default = DEFAULT_CONTENT_TYPES.get(method)
    if default is None:
        return merged
    if any(key.lower() == "content-type" for key in merged):
        return merged
    return {"content-type": default, **merged}
