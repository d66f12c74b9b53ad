"""End-to-end tests: spec in, HTTP out, through create_client and HttpxBackend."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from fluent_openapi import create_client
from fluent_openapi.backends.sync_backend import HttpxBackend
from fluent_openapi.exceptions import MissingBackendError, NotFoundError
from fluent_openapi.models import ClientConfig


MAGIC_SPEC: dict[str, Any] = {
    "paths": {"/magic": {"get": {"operationId": "getMagic"}}},
}


def _http_backend(handler) -> HttpxBackend:
    return HttpxBackend(
        ClientConfig(url="https://foo.com"), transport=httpx.MockTransport(handler)
    )


class TestMagic:
    def test_resolves_with_status_and_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/magic"
            return httpx.Response(200, json={"message": "ta dah"})

        with _http_backend(handler) as backend:
            client = create_client(MAGIC_SPEC, backend=backend)
            response = client.magic.get()

        assert response.status_code == 200
        assert response.body == {"message": "ta dah"}

    def test_rejects_with_status_and_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "fail!"})

        with _http_backend(handler) as backend:
            client = create_client(MAGIC_SPEC, backend=backend)
            with pytest.raises(NotFoundError) as exc_info:
                client.magic.get()

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == 404
        assert exc_info.value.message == "fail!"


class TestCreateClient:
    def test_missing_backend(self) -> None:
        with pytest.raises(MissingBackendError):
            create_client(MAGIC_SPEC)

    def test_config_builds_httpx_backend(self) -> None:
        client = create_client(MAGIC_SPEC, config=ClientConfig(url="https://foo.com"))
        assert isinstance(client._backend, HttpxBackend)
        assert client.magic._backend is client._backend

    def test_backend_takes_precedence_over_config(self, recording_backend) -> None:
        client = create_client(
            MAGIC_SPEC, backend=recording_backend, config=ClientConfig(url="https://foo.com")
        )
        client.magic.get()
        assert recording_backend.last.pathname == "/magic"

    def test_spec_from_file(self, tmp_path: Path, recording_backend) -> None:
        spec_file = tmp_path / "swagger.json"
        spec_file.write_text(json.dumps(MAGIC_SPEC), encoding="utf-8")
        client = create_client(str(spec_file), backend=recording_backend)
        assert client.magic.supports("GET")

    def test_empty_client_grows_later(self, recording_backend) -> None:
        client = create_client(backend=recording_backend)
        assert client.aliases() == []
        client.add_spec(MAGIC_SPEC)
        client.magic.get()
        assert recording_backend.last.operation_id == "getMagic"


class TestKubeFlow:
    """A Kubernetes-style walk through namespaces, pods and logs."""

    def test_full_walk(self, kube_spec: dict[str, Any]) -> None:
        seen: list[tuple[str, str, dict[str, str]]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path, dict(request.url.params)))
            if request.url.path.endswith("/log"):
                return httpx.Response(200, content=b"started\nready\n")
            return httpx.Response(200, json={"kind": "PodList", "items": []})

        with _http_backend(handler) as backend:
            client = create_client(kube_spec, backend=backend)
            pods = client.api.v1.namespaces("default").pods
            listing = pods.get(parameters={"labelSelector": "app=web"})
            log = b"".join(pods("web-0").log.get_stream())

        assert listing.body == {"kind": "PodList", "items": []}
        assert log == b"started\nready\n"
        assert seen == [
            ("GET", "/api/v1/namespaces/default/pods", {"labelSelector": "app=web"}),
            ("GET", "/api/v1/namespaces/default/pods/web-0/log", {}),
        ]

    def test_merge_patch_reaches_server(self, kube_spec: dict[str, Any]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PATCH"
            assert request.headers["content-type"] == "application/merge-patch+json"
            assert json.loads(request.content) == {"metadata": {"labels": {"team": "a"}}}
            return httpx.Response(200, json={"patched": True})

        with _http_backend(handler) as backend:
            client = create_client(kube_spec, backend=backend)
            response = client.api.v1.namespaces("default").patch(
                body={"metadata": {"labels": {"team": "a"}}}
            )
        assert response.body == {"patched": True}
