"""Compiler -- build a navigable node tree from an OpenAPI ``paths`` object.

Sub-modules:

* :mod:`~fluent_openapi.compiler.templates` -- Path template splitting,
  placeholder parsing, and naming functions for child aliases.
* :mod:`~fluent_openapi.compiler.tree` -- The core algorithm: the
  :class:`~fluent_openapi.compiler.tree.LiteralNode` /
  :class:`~fluent_openapi.compiler.tree.ParameterizedNode` variants and the
  deepest-first path walk that grows them.
* :mod:`~fluent_openapi.compiler.dispatch` -- Verb methods that assemble an
  :class:`~fluent_openapi.models.ApiRequest` and hand it to a backend.
"""

from fluent_openapi.compiler.templates import default_names, identifier_names
from fluent_openapi.compiler.tree import Endpoint, LiteralNode, Node, ParameterizedNode

__all__ = [
    "Endpoint",
    "LiteralNode",
    "Node",
    "ParameterizedNode",
    "default_names",
    "identifier_names",
]
