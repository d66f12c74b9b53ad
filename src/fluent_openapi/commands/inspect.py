"""Inspect commands -- examine how a spec compiles.

``fluent-openapi tree`` prints the compiled node tree: aliases, declared
verbs, and the paths waiting behind each parameterized node.
``fluent-openapi paths`` lists the raw path templates with their verbs.

Both commands take an optional spec source; without one the spec is
resolved through :func:`~fluent_openapi.config.resolve_config`.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from fluent_openapi.output import error, get_output


def _load_spec(spec_source: Optional[str]) -> dict[str, Any]:
    """Resolve, load, and shape-check the spec.

    Raises:
        typer.Exit: With code 2 when no spec is configured or it cannot be
            loaded.
    """
    from fluent_openapi.config import resolve_config
    from fluent_openapi.parser import load_spec, validate_paths

    try:
        config = resolve_config(cli_spec=spec_source)
    except Exception as exc:
        error(f"Config error: {exc}")
        raise typer.Exit(code=2) from None

    if not config.default_spec:
        error("No spec given. Pass one or run: fluent-openapi config set default_spec <path>")
        raise typer.Exit(code=2)

    try:
        raw = load_spec(config.default_spec)
        validate_paths(raw)
    except Exception as exc:
        error(f"Failed to load spec: {exc}")
        raise typer.Exit(code=2) from None
    return raw


_VERBS = {"GET", "PUT", "POST", "DELETE", "PATCH"}


def describe_node(node: Any, aliases: list[str]) -> dict[str, Any]:
    """Build a ``{"label", "children"}`` description of *node* for printing."""
    label = " | ".join(aliases) if aliases else "/"
    if node.is_parameterized and node.pending_paths():
        label += f"({{{node.placeholder() or 'value'}}})"
    if node.verbs:
        label += " [" + ", ".join(m.value for m in node.verbs) + "]"

    children = [describe_node(child, names) for names, child in node.child_nodes()]
    if node.is_parameterized:
        for endpoint in node.pending_paths():
            verbs = [str(k).upper() for k in endpoint.path_item if str(k).upper() in _VERBS]
            suffix = f" [{', '.join(verbs)}]" if verbs else ""
            children.append({"label": f"-> {endpoint.name}{suffix}", "children": []})
    return {"label": label, "children": children}


def tree_command(
    spec: Optional[str] = typer.Argument(
        None, help="Spec URL, file path, or '-' for stdin."
    ),
    aliases: bool = typer.Option(
        False, "--identifiers", "-i",
        help="Add Python-identifier aliases for segments like 'custom.metrics.k8s.io'.",
    ),
) -> None:
    """Print the compiled node tree of a spec.

    Example::

        fluent-openapi tree swagger.json
        fluent-openapi --plain tree swagger.json
    """
    from fluent_openapi.backends.base import CallableBackend
    from fluent_openapi.client import create_client
    from fluent_openapi.compiler.templates import identifier_names

    raw = _load_spec(spec)
    root = create_client(
        raw,
        backend=CallableBackend(lambda request: None),
        get_names=identifier_names if aliases else None,
    )
    description = describe_node(root, [])
    get_output().print_tree(description, label=description["label"])


def paths_command(
    spec: Optional[str] = typer.Argument(
        None, help="Spec URL, file path, or '-' for stdin."
    ),
) -> None:
    """List every path template with its verbs and operation IDs.

    Example::

        fluent-openapi paths swagger.json
        fluent-openapi --json paths swagger.json
    """
    from fluent_openapi.models import HTTPMethod

    raw = _load_spec(spec)

    headers = ["Path", "Verbs", "Operation IDs"]
    rows: list[list[str]] = []
    for path in sorted(raw["paths"]):
        item = raw["paths"][path]
        verbs: list[str] = []
        operation_ids: list[str] = []
        for key, operation in item.items():
            method = HTTPMethod.from_key(str(key))
            if method is None:
                continue
            verbs.append(method.value)
            if isinstance(operation, dict) and operation.get("operationId"):
                operation_ids.append(str(operation["operationId"]))
        rows.append([path, ", ".join(verbs) or "-", ", ".join(operation_ids) or "-"])

    get_output().print_table(headers, rows, title=f"Paths ({len(rows)})")
