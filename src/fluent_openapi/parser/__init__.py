"""Spec parser -- load API descriptions for the compiler.

Typical usage::

    from fluent_openapi.parser import load_spec, validate_paths

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    validate_paths(raw)

Sub-modules:

* :mod:`~fluent_openapi.parser.loader` -- I/O layer (URL, file, stdin,
  gzip) plus format detection and the ``paths`` shape check.
"""

from fluent_openapi.parser.loader import load_spec, validate_paths

__all__ = ["load_spec", "validate_paths"]
