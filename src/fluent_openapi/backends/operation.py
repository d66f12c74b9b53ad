"""Operation-id backend -- delegate requests to an operation executor.

Some OpenAPI tool chains execute operations by ``operationId`` with one flat
parameter mapping instead of URL + query + body. :class:`OperationBackend`
adapts a compiled tree to such an executor, so navigation still picks the
operation while the executor handles transport.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from fluent_openapi.backends.base import Backend
from fluent_openapi.models import ApiRequest


class OperationBackend(Backend):
    """Call ``execute(operation_id=..., parameters=...)`` for each request.

    Parameters are merged from the body (when it is a mapping), the query
    parameters (``parameters`` or legacy ``qs``), and the path parameters,
    later sources winning on name clashes.

    Args:
        execute: Executor invoked once per request; its return value is
            returned from the verb call unchanged.
    """

    def __init__(self, execute: Callable[..., Any]) -> None:
        self._execute = execute

    def http(self, request: ApiRequest) -> Any:
        parameters: dict[str, Any] = {}
        if isinstance(request.body, Mapping):
            parameters.update(request.body)
        parameters.update(request.query or {})
        parameters.update(request.pathname_parameters)
        return self._execute(operation_id=request.operation_id, parameters=parameters)
