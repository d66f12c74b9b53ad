"""Tests for the operation-id backend."""

from __future__ import annotations

from typing import Any

from fluent_openapi.backends.operation import OperationBackend
from fluent_openapi.client import create_client


SPEC: dict[str, Any] = {
    "paths": {
        "/foo/{c}": {
            "post": {"operationId": "createFoo"},
            "get": {"operationId": "readFoo"},
        }
    }
}


class TestOperationBackend:
    def _client(self, calls: list[dict[str, Any]]):
        def execute(**kwargs: Any) -> str:
            calls.append(kwargs)
            return "done"

        return create_client(SPEC, backend=OperationBackend(execute))

    def test_merges_body_query_and_path(self) -> None:
        calls: list[dict[str, Any]] = []
        client = self._client(calls)

        result = client.foo(3).post(body={"a": 1}, parameters={"b": 2})

        assert result == "done"
        assert calls == [{"operation_id": "createFoo", "parameters": {"a": 1, "b": 2, "c": 3}}]

    def test_path_parameters_win(self) -> None:
        calls: list[dict[str, Any]] = []
        client = self._client(calls)

        client.foo("x").get(qs={"c": "query"})

        assert calls[0]["parameters"] == {"c": "x"}
        assert calls[0]["operation_id"] == "readFoo"

    def test_non_mapping_body_is_ignored(self) -> None:
        calls: list[dict[str, Any]] = []
        client = self._client(calls)

        client.foo("x").post(body="raw")

        assert calls[0]["parameters"] == {"c": "x"}
