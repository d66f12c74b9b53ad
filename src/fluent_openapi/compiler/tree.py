"""Compile an OpenAPI ``paths`` object into a tree of navigable nodes.

This is the core algorithm of fluent_openapi. Each node stands for one
literal path segment. Literal segments are reached by attribute (or item)
access, path templates by calling a :class:`ParameterizedNode` with a value,
and the operations of a path item by verb methods on the node where the path
ends::

    /api/v1/namespaces                      -> root.api.v1.namespaces
    GET /api/v1/namespaces                  -> root.api.v1.namespaces.get()
    /api/v1/namespaces/{namespace}/pods     -> root.api.v1.namespaces(ns).pods

**Algorithm summary**

1. Split every path template into segments and sort the paths deepest first.
2. Walk each path from the node that is compiling it. A literal segment that
   is immediately followed by a placeholder *owns* it.
3. Create missing children lazily: a :class:`ParameterizedNode` when the
   segment owns a placeholder, a :class:`LiteralNode` otherwise. An existing
   literal child that now owns a placeholder is upgraded to a parameterized
   one.
4. At a placeholder, queue the rest of the path on the parameterized node and
   stop. Nothing below a placeholder exists until a value is supplied.
5. When the walk consumes every segment, attach the path item's verbs to the
   node reached.
6. Calling a parameterized node with a value creates a fresh literal node for
   that value and replays the queued paths onto it (steps 2-5 again, relative
   to the new node). The queue is left intact for the next value.

Deepest-first ordering plus the upgrade in step 3 make the result
independent of the order of the ``paths`` mapping.

Node-tree mutation happens only in :meth:`Node.add_spec` and
:meth:`Node.add_endpoint`. Navigating a compiled tree only reads shared
state; calling a parameterized node allocates new nodes per call.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional

from fluent_openapi.compiler.dispatch import Dispatcher
from fluent_openapi.compiler.templates import (
    NamingFunction,
    default_names,
    is_placeholder,
    placeholder_name,
    placeholder_names,
    split_path,
)
from fluent_openapi.exceptions import SpecConflictError, SpecParseError
from fluent_openapi.models import HTTPMethod

if TYPE_CHECKING:
    from fluent_openapi.backends.base import Backend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """A path item to register, relative to the node that registers it.

    Attributes:
        name: The original path template (e.g. ``/foo/{name}/bar``), kept so
            that placeholder names can be recovered at request time.
        segments: Segments still to walk.
        path_item: The OpenAPI *Path Item Object* (verb -> operation).
    """

    name: str
    segments: tuple[str, ...]
    path_item: Mapping[str, Any]

    @classmethod
    def from_template(cls, name: str, path_item: Mapping[str, Any]) -> Endpoint:
        return cls(name=name, segments=tuple(split_path(name)), path_item=path_item)


class Node(Dispatcher):
    """Base class of the compiled tree.

    Children are reachable as attributes and, for names that are not
    identifiers or collide with a public method (``get``, ``path``,
    ``verbs``, ...), by item access: ``node["custom.metrics.k8s.io"]``.
    Internal state is underscored, so segments such as ``extensions`` or
    ``backend`` resolve to child nodes.

    Args:
        segments: Absolute literal segments from the root to this node.
        parameter_values: Values bound by parameterized ancestors, in the order
            they were supplied.
        backend: Backend that verb methods hand requests to.
        get_names: Naming function returning the aliases of a child segment.
        extensions: Functions exposed on every node as bound methods, called
            as ``fn(node, *args, **kwargs)``.
    """

    is_parameterized = False

    def __init__(
        self,
        segments: Iterable[str] = (),
        parameter_values: Iterable[Any] = (),
        *,
        backend: Backend,
        get_names: Optional[NamingFunction] = None,
        extensions: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> None:
        # Underscored so that no path segment is shadowed by node state.
        self._segments: tuple[str, ...] = tuple(segments)
        self._parameter_values: tuple[Any, ...] = tuple(parameter_values)
        self._backend = backend
        self._get_names: NamingFunction = get_names or default_names
        self._extensions: Mapping[str, Callable[..., Any]] = extensions or {}
        self._children: dict[str, Node] = {}
        self._operations: dict[HTTPMethod, dict[str, Any]] = {}
        self._path_template: Optional[str] = None
        self._path_item: Optional[dict[str, Any]] = None
        # Keyed by literal segment; aliases live in ``_children``.
        self._by_segment: dict[str, Node] = {}

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if name.startswith("__"):
            raise AttributeError(name)
        children = self.__dict__.get("_children", {})
        if name in children:
            return children[name]
        extensions = self.__dict__.get("_extensions", {})
        if name in extensions:
            return functools.partial(extensions[name], self)
        raise AttributeError(f"{self.path} has no child named {name!r}")

    def __getitem__(self, name: str) -> Node:
        try:
            return self._children[name]
        except KeyError:
            raise KeyError(f"{self.path} has no child named {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._children

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._children))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.path}>"

    def aliases(self) -> list[str]:
        """Return every name a child is registered under, in insertion order."""
        return list(self._children)

    def child_nodes(self) -> list[tuple[list[str], Node]]:
        """Return each distinct child once, with all of its aliases."""
        grouped: dict[int, tuple[list[str], Node]] = {}
        for name, child in self._children.items():
            grouped.setdefault(id(child), ([], child))[0].append(name)
        return list(grouped.values())

    # ------------------------------------------------------------------ #
    # Compilation
    # ------------------------------------------------------------------ #

    def add_spec(self, spec: Mapping[str, Any]) -> None:
        """Add every path of *spec* below this node.

        Usually called on the root. Calling it again extends the tree, for
        example to add the paths of custom resources after start-up.

        Args:
            spec: A mapping with a ``paths`` key mapping path templates to
                *Path Item Objects*.

        Raises:
            SpecParseError: If ``paths`` is missing or malformed.
            SpecConflictError: If a placeholder cannot be attached to the tree.
        """
        paths = spec.get("paths") if isinstance(spec, Mapping) else None
        if not isinstance(paths, Mapping):
            raise SpecParseError("API description has no 'paths' mapping")

        endpoints: list[Endpoint] = []
        for name, path_item in paths.items():
            if not isinstance(path_item, Mapping):
                raise SpecParseError(
                    f"Path item for {name!r} must be a mapping "
                    f"(got {type(path_item).__name__})"
                )
            endpoints.append(Endpoint.from_template(str(name), path_item))

        # Deepest first: a placeholder must be seen before any shallower path
        # fixes the node that owns it as literal.
        endpoints.sort(key=lambda e: len(e.segments), reverse=True)
        for endpoint in endpoints:
            self.add_endpoint(endpoint)
        logger.debug("Compiled %d paths below %s", len(endpoints), self.path)

    def add_endpoint(self, endpoint: Endpoint) -> Optional[Node]:
        """Walk *endpoint* below this node and attach its operations.

        Returns:
            The node the operations were attached to, or ``None`` if the walk
            stopped at a placeholder and the endpoint was queued instead.
        """
        node = self._walk(endpoint)
        if node is None:
            return None

        node._path_template = endpoint.name
        node._path_item = dict(endpoint.path_item)
        for key, operation in endpoint.path_item.items():
            method = HTTPMethod.from_key(str(key))
            if method is None:
                continue
            node._operations[method] = dict(operation) if isinstance(operation, Mapping) else {}
        logger.debug("Attached %s to %s", [m.value for m in node._operations], node.path)
        return node

    def _walk(self, endpoint: Endpoint) -> Optional[Node]:
        segments = list(self._segments)
        remaining = list(endpoint.segments)

        parent: Node = self
        while remaining:
            segment = remaining.pop(0)
            segments.append(segment)

            # Placeholders are never adjacent, so at most one is owned here.
            template: Optional[str] = None
            if remaining and is_placeholder(remaining[0]):
                template = placeholder_name(remaining.pop(0))

            child = parent._by_segment.get(segment)
            if child is None:
                node_cls = ParameterizedNode if template is not None else LiteralNode
                child = self._spawn(node_cls, segments, self._parameter_values)
                parent._add_child(segment, child)
            elif template is not None and not child.is_parameterized:
                child = ParameterizedNode.upgrade(child)
                parent._replace_child(segment, child)
            parent = child

            if template is not None:
                if not isinstance(parent, ParameterizedNode):
                    raise SpecConflictError(
                        f"Path {endpoint.name!r} needs {parent.path} to take a "
                        f"'{template}' value, but it is a literal node"
                    )
                parent._pending.append(
                    Endpoint(endpoint.name, tuple(remaining), endpoint.path_item)
                )
                return None
        return parent

    def _spawn(
        self,
        node_cls: type[Node],
        segments: Iterable[str],
        parameter_values: Iterable[Any],
    ) -> Node:
        return node_cls(
            segments,
            parameter_values,
            backend=self._backend,
            get_names=self._get_names,
            extensions=self._extensions,
        )

    def _add_child(self, segment: str, child: Node) -> None:
        self._by_segment[segment] = child
        for name in self._get_names(segment, self._segments):
            self._children[name] = child

    def _replace_child(self, segment: str, child: Node) -> None:
        previous = self._by_segment[segment]
        self._by_segment[segment] = child
        for name, existing in self._children.items():
            if existing is previous:
                self._children[name] = child


class LiteralNode(Node):
    """A node reached by name only. Not callable."""


class ParameterizedNode(Node):
    """A node that owns a placeholder and must be called with its value.

    The node still has its own children and verbs (``/foo`` next to
    ``/foo/{name}/bar``), but paths that continue past the placeholder wait in
    a queue until :meth:`__call__` supplies a value.
    """

    is_parameterized = True

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._pending: list[Endpoint] = []

    @classmethod
    def upgrade(cls, node: Node) -> ParameterizedNode:
        """Return a parameterized node sharing *node*'s children, verbs and path data."""
        upgraded = cls(
            node._segments,
            node._parameter_values,
            backend=node._backend,
            get_names=node._get_names,
            extensions=node._extensions,
        )
        upgraded._children = node._children
        upgraded._by_segment = node._by_segment
        upgraded._operations = node._operations
        upgraded._path_template = node._path_template
        upgraded._path_item = node._path_item
        logger.debug("Upgraded %s to a parameterized node", node.path)
        return upgraded

    def pending_paths(self) -> tuple[Endpoint, ...]:
        """Return the paths queued behind the placeholder, in queue order."""
        return tuple(self._pending)

    def placeholder(self) -> Optional[str]:
        """Return the name of the owned placeholder, as spelled by the first queued path."""
        if not self._pending:
            return None
        names = placeholder_names(self._pending[0].name)
        position = len(self._parameter_values)
        return names[position] if position < len(names) else None

    def __call__(self, value: Any) -> LiteralNode:
        """Bind *value* to the owned placeholder.

        Returns:
            A new :class:`LiteralNode` for ``<path>/<value>`` with every
            pending path replayed below it. Two calls never share nodes.
        """
        node = self._spawn(
            LiteralNode,
            self._segments + (str(value),),
            self._parameter_values + (value,),
        )
        for endpoint in tuple(self._pending):
            node.add_endpoint(endpoint)
        return node  # type: ignore[return-value]
