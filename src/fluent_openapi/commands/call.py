"""Call command -- navigate a compiled client and send one request.

The navigation expression mirrors the Python attribute chain::

    fluent-openapi call 'api.v1.namespaces("default").pods' get
    fluent-openapi call 'apis["custom.metrics.k8s.io"].v1beta1' get

Each step is a child name, either bare or quoted inside ``[...]``,
optionally followed by ``(value)`` to bind a placeholder. Values are passed
as strings; quotes around them are stripped.
"""

from __future__ import annotations

import enum
import json
import re
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from fluent_openapi.backends.sync_backend import HttpxBackend
from fluent_openapi.exceptions import FluentError, InvalidUsageError
from fluent_openapi.models import ClientConfig
from fluent_openapi.output import debug, error, format_response, info


class Verb(str, enum.Enum):
    get = "get"
    stream = "stream"
    put = "put"
    post = "post"
    delete = "delete"
    patch = "patch"


_STEP_RE = re.compile(
    r"""
    (?:
        (?P<bare>[^.\[\]()"']+)
      | \[\s*(?P<quote>["'])(?P<quoted>.*?)(?P=quote)\s*\]
    )
    (?:\((?P<value>[^()]*)\))?
    """,
    re.VERBOSE,
)


def parse_expression(expression: str) -> list[tuple[str, Optional[str]]]:
    """Split a navigation expression into ``(name, value)`` steps.

    ``value`` is ``None`` for steps that are not called.

    Raises:
        InvalidUsageError: If the expression has characters no step accepts.
    """
    steps: list[tuple[str, Optional[str]]] = []
    position = 0
    text = expression.strip()
    while position < len(text):
        if text[position] == ".":
            position += 1
            continue
        match = _STEP_RE.match(text, position)
        if match is None or match.end() == position:
            raise InvalidUsageError(
                f"Cannot parse navigation expression at {text[position:]!r}"
            )
        bare = match.group("bare")
        name = bare.strip() if bare is not None else match.group("quoted")
        value = match.group("value")
        if value is not None:
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
        steps.append((name, value))
        position = match.end()
    return steps


def navigate(root: Any, steps: list[tuple[str, Optional[str]]]) -> Any:
    """Follow *steps* from *root* and return the node reached.

    Raises:
        InvalidUsageError: On an unknown child or a value given to a node
            that takes none.
    """
    node = root
    for name, value in steps:
        if name not in node:
            known = ", ".join(sorted(node.aliases())) or "none"
            raise InvalidUsageError(f"{node.path} has no child {name!r} (children: {known})")
        node = node[name]
        if value is not None:
            if not node.is_parameterized:
                raise InvalidUsageError(f"{node.path} does not take a value")
            node = node(value)
    return node


def _parse_pairs(pairs: list[str], option: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=" if option == "--param" else ":")
        if not sep or not key.strip():
            raise InvalidUsageError(f"Invalid {option} value: {pair!r}")
        parsed[key.strip()] = value.strip()
    return parsed


def _parse_body(body: Optional[str]) -> Any:
    """Parse *body* as JSON (reading ``@file`` first), keeping raw text on failure."""
    if body is None:
        return None
    if body.startswith("@"):
        path = Path(body[1:])
        try:
            body = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidUsageError(f"Cannot read body file {path}: {exc}") from exc
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body


def _make_backend(config: ClientConfig) -> HttpxBackend:
    return HttpxBackend(config)


def call_command(
    expression: str = typer.Argument(
        help="Navigation expression, e.g. 'api.v1.namespaces(\"default\").pods'."
    ),
    verb: Verb = typer.Argument(Verb.get, help="Verb to invoke on the node."),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Spec URL, file path, or '-' for stdin."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="Base URL requests are sent to."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as key=value (repeatable)."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header as 'Name: value' (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="Request body as JSON, or @file to read it."
    ),
) -> None:
    """Send one request through the compiled client.

    The response body is written to stdout; the status goes to stderr.

    Example::

        fluent-openapi call 'api.v1.namespaces' get --url https://k8s.local
        fluent-openapi call 'api.v1.namespaces("default")' patch -b @patch.json
    """
    from fluent_openapi.client import create_client
    from fluent_openapi.config import resolve_config
    from fluent_openapi.parser import load_spec

    try:
        config = resolve_config(cli_spec=spec, cli_url=url)
        if not config.default_spec:
            raise InvalidUsageError(
                "No spec given. Pass --spec or run: fluent-openapi config set default_spec <path>"
            )
        if not config.client.url:
            raise InvalidUsageError(
                "No base URL given. Pass --url or run: fluent-openapi config set client.url <url>"
            )

        options: dict[str, Any] = {}
        if param:
            options["parameters"] = _parse_pairs(param, "--param")
        if header:
            options["headers"] = _parse_pairs(header, "--header")
        parsed_body = _parse_body(body)
        if parsed_body is not None:
            options["body"] = parsed_body

        with _make_backend(config.client) as backend:
            root = create_client(load_spec(config.default_spec), backend=backend)
            node = navigate(root, parse_expression(expression))
            debug(f"{verb.value} {node.path}")

            if verb == Verb.stream:
                out = sys.stdout.buffer
                for chunk in node.get_stream(**options):
                    out.write(chunk)
                out.flush()
                return

            response = getattr(node, verb.value)(**options)
            info(f"HTTP {response.status_code}")
            format_response(response.body)
    except FluentError as exc:
        error(exc.message)
        raise typer.Exit(code=exc.exit_code) from None
