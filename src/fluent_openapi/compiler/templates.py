"""Path template parsing and child naming.

A path template such as ``/api/v1/namespaces/{namespace}/pods`` is split into
segments; a segment wrapped in braces is a *placeholder*. The compiler in
:mod:`fluent_openapi.compiler.tree` consumes these helpers, and the dispatcher
uses :func:`placeholder_names` to pair bound values with their names.

Naming functions decide under which attribute names a child node is reachable
from its parent. They receive the literal segment and the parent's absolute
segments and return one or more aliases::

    def get_names(segment, ancestors):
        if segment == "deployments":
            return ["deployments", "deployment", "deploy"]
        return [segment]
"""

from __future__ import annotations

import keyword
import re
from typing import Callable, Iterable

NamingFunction = Callable[[str, tuple[str, ...]], Iterable[str]]

_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def split_path(template: str) -> list[str]:
    """Split *template* on ``/`` after stripping one leading and trailing slash.

    ``"/foo/bar/"`` -> ``["foo", "bar"]``
    ``"baz/zab"``   -> ``["baz", "zab"]``
    ``"/"``         -> ``[]``
    """
    stripped = template[1:] if template.startswith("/") else template
    if stripped.endswith("/"):
        stripped = stripped[:-1]
    if not stripped:
        return []
    return stripped.split("/")


def is_placeholder(segment: str) -> bool:
    """Return ``True`` if *segment* is a path placeholder (e.g., ``{name}``)."""
    return segment.startswith("{") and segment.endswith("}")


def placeholder_name(segment: str) -> str:
    """Return the name inside a placeholder: ``"{name}"`` -> ``"name"``."""
    return segment[1:-1]


def placeholder_names(template: str) -> list[str]:
    """Return the placeholder names of *template* in declaration order.

    Example::

        >>> placeholder_names("/foo/{name}/bar/{type}")
        ['name', 'type']
    """
    return [placeholder_name(s) for s in template.split("/") if is_placeholder(s)]


# ---------------------------------------------------------------------------
# Naming functions
# ---------------------------------------------------------------------------


def default_names(segment: str, ancestors: tuple[str, ...] = ()) -> list[str]:
    """Identity naming: a child is reachable only under its own segment."""
    return [segment]


def to_identifier(segment: str) -> str:
    """Convert a path segment to a valid Python identifier.

    Dots, hyphens, and other invalid characters become underscores, a leading
    digit gets an underscore prefix, and Python keywords get a trailing
    underscore.

    Example::

        >>> to_identifier("custom.metrics.k8s.io")
        'custom_metrics_k8s_io'
        >>> to_identifier("class")
        'class_'
    """
    result = _INVALID_IDENT_RE.sub("_", segment)
    result = re.sub(r"_+", "_", result)
    if not result:
        return "_"
    if result[0].isdigit():
        result = f"_{result}"
    if keyword.iskeyword(result):
        result = f"{result}_"
    return result


def identifier_names(segment: str, ancestors: tuple[str, ...] = ()) -> list[str]:
    """Naming function adding an attribute-friendly alias to each segment.

    The literal segment always comes first so item access with the original
    name keeps working.
    """
    names = [segment]
    alias = to_identifier(segment)
    if alias != segment:
        names.append(alias)
    return names
