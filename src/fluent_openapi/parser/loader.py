"""Load API descriptions from a URL, local file, or stdin.

Both OpenAPI 3.x and Swagger 2.0 documents work: the compiler only reads the
``paths`` object. Supported encodings are JSON and YAML, either plain or
gzip-compressed (``.json.gz``, ``.yaml.gz``), with automatic format
detection.

* :func:`load_spec` -- Load and parse a spec from any supported source.
* :func:`validate_paths` -- Check that the document has a usable ``paths``
  mapping. This is a shape check, not schema validation.
"""

from __future__ import annotations

import gzip
import json
import sys
from pathlib import Path
from typing import Any, Mapping

import httpx
import yaml

from fluent_openapi.exceptions import SpecParseError


def load_spec(source: str) -> dict[str, Any]:
    """Load an API description from URL, file path, or stdin (``-``).

    Args:
        source: A URL (http/https), file path, or ``-`` for stdin.

    Returns:
        The parsed spec as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a spec over HTTP. The content type is used as a format hint."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    if url.endswith(".gz"):
        return _parse_content(_gunzip(response.content, url), hint=hint)
    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a spec from a local file, decompressing ``.gz`` files first."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    suffixes = [s.lower() for s in file_path.suffixes]
    compressed = bool(suffixes) and suffixes[-1] == ".gz"
    try:
        if compressed:
            content = _gunzip(file_path.read_bytes(), path)
            suffixes = suffixes[:-1]
        else:
            content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    hint = ""
    if suffixes and suffixes[-1] == ".json":
        hint = "json"
    elif suffixes and suffixes[-1] in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _gunzip(data: bytes, source: str) -> str:
    try:
        return gzip.decompress(data).decode("utf-8")
    except (OSError, EOFError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to decompress spec {source}: {exc}") from exc


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then YAML. Valid JSON is also
    valid YAML, but JSON parsing is stricter and faster.

    Raises:
        SpecParseError: If the content cannot be parsed as either format, or
            does not contain an object at the top level.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_object(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc
    return _require_object(result)


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result


def validate_paths(spec: Mapping[str, Any]) -> int:
    """Check that *spec* has a ``paths`` mapping of path-item mappings.

    Returns:
        The number of paths.

    Raises:
        SpecParseError: If ``paths`` is missing, not a mapping, or contains
            a path item that is not a mapping.
    """
    paths = spec.get("paths")
    if paths is None:
        raise SpecParseError("Missing 'paths' field. Is this an OpenAPI/Swagger document?")
    if not isinstance(paths, Mapping):
        raise SpecParseError(f"'paths' must be an object (got {type(paths).__name__})")
    for name, item in paths.items():
        if not isinstance(item, Mapping):
            raise SpecParseError(f"Path item for {name!r} must be an object")
    return len(paths)
