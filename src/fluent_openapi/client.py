"""Client construction -- compile a spec into a root node bound to a backend.

:func:`create_client` is the public entry point. It resolves the backend
up front, so a client without one fails at construction rather than on its
first request, then compiles the spec into a fresh root node.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from fluent_openapi.backends.base import as_backend
from fluent_openapi.backends.sync_backend import HttpxBackend
from fluent_openapi.compiler.templates import NamingFunction
from fluent_openapi.compiler.tree import LiteralNode
from fluent_openapi.models import ClientConfig
from fluent_openapi.parser.loader import load_spec


def create_client(
    spec: Union[Mapping[str, Any], str, None] = None,
    *,
    backend: Any = None,
    config: Optional[ClientConfig] = None,
    get_names: Optional[NamingFunction] = None,
    extensions: Optional[Mapping[str, Callable[..., Any]]] = None,
) -> LiteralNode:
    """Build a client whose attributes mirror the paths of *spec*.

    Args:
        spec: A spec mapping, or a source accepted by
            :func:`~fluent_openapi.parser.loader.load_spec`. When ``None`` the
            root is empty; call ``root.add_spec(...)`` later.
        backend: A :class:`~fluent_openapi.backends.base.Backend`, an object
            with an ``http(request)`` method, or a callable. Takes precedence
            over *config*.
        config: Settings for a default
            :class:`~fluent_openapi.backends.sync_backend.HttpxBackend`, used
            when no *backend* is given.
        get_names: Naming function returning the aliases for each child
            segment. Defaults to the segment itself.
        extensions: Functions exposed as bound methods on every node.

    Returns:
        The root :class:`~fluent_openapi.compiler.tree.LiteralNode`.

    Raises:
        MissingBackendError: If neither *backend* nor *config* is given.
        SpecParseError: If *spec* cannot be loaded or has no ``paths``.

    Example::

        client = create_client(
            {"paths": {"/magic": {"get": {"operationId": "getMagic"}}}},
            config=ClientConfig(url="https://foo.com"),
        )
        client.magic.get().body
    """
    if backend is None and config is not None:
        backend = HttpxBackend(config)
    resolved = as_backend(backend)

    root = LiteralNode(backend=resolved, get_names=get_names, extensions=extensions)
    if isinstance(spec, str):
        spec = load_spec(spec)
    if spec is not None:
        root.add_spec(spec)
    return root
