"""fluent_openapi -- Turn an OpenAPI paths object into a navigable client.

This package compiles the ``paths`` of an OpenAPI/Swagger document into a tree
of nodes. Literal path segments become attributes, path templates become
calls, and HTTP operations become methods::

    from fluent_openapi import create_client
    from fluent_openapi.models import ClientConfig

    client = create_client(spec, config=ClientConfig(url="https://k8s.local"))
    client.api.v1.namespaces("default").pods.get()
    # GET https://k8s.local/api/v1/namespaces/default/pods

Modules:
    client: :func:`create_client` factory.
    compiler: Path-template compiler, node tree, and request dispatcher.
    backends: Transport adapters (httpx sync/async, operation-id executor).
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"

from fluent_openapi.client import create_client  # noqa: E402

__all__ = ["create_client", "__version__"]
