"""Canonical Pydantic models shared across all fluent_openapi modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ClientConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

**Request/response models** -- produced by the dispatcher and consumed by
backends:
    :class:`HTTPMethod`, :class:`ApiRequest`, and :class:`ApiResponse`.

All models use Pydantic v2. :class:`ApiRequest` uses ``extra="allow"`` so that
method-specific options passed to a verb method reach the backend untouched
and are accessible via ``model_extra``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class ClientConfig(BaseModel):
    """Connection settings used to build an HTTP backend.

    Example::

        ClientConfig(url="https://api.example.com", timeout=10)
    """

    url: Optional[str] = Field(
        default=None, description="Base URL that request pathnames are appended to"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    max_retries: int = Field(
        default=0, description="Retry attempts on 5xx and connection errors"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/fluent-openapi/config.json``.

    Loaded and saved by :func:`~fluent_openapi.config.load_global_config` and
    :func:`~fluent_openapi.config.save_global_config`. See
    :func:`~fluent_openapi.config.resolve_config` for the precedence chain.
    """

    default_spec: Optional[str] = Field(
        default=None, description="URL or file path of the spec used when none is given"
    )
    client: ClientConfig = Field(default_factory=ClientConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Requests ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods that become verb methods on compiled nodes.

    The set is closed: path-item keys outside it (``head``, ``options``,
    ``parameters``, vendor extensions) never produce a method.
    """

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def from_key(cls, key: str) -> Optional[HTTPMethod]:
        """Return the method for a path-item key, or ``None`` if unsupported."""
        try:
            return cls(key.upper())
        except ValueError:
            return None


class ApiRequest(BaseModel):
    """Fully resolved request descriptor handed to a backend.

    Built by :mod:`fluent_openapi.compiler.dispatch` for every verb call and
    forwarded verbatim to :meth:`~fluent_openapi.backends.base.Backend.http`.
    """

    model_config = ConfigDict(extra="allow")

    method: HTTPMethod
    pathname: str = Field(description="Absolute literal path, e.g. /api/v1/pods")
    pathname_parameters: dict[str, Any] = Field(
        default_factory=dict, description="Placeholder name -> bound value"
    )
    body: Any = None
    parameters: Optional[dict[str, Any]] = Field(
        default=None, description="Query parameters"
    )
    qs: Optional[dict[str, Any]] = Field(
        default=None, description="Query parameters (legacy name)"
    )
    headers: dict[str, Any] = Field(default_factory=dict)
    operation_id: Optional[str] = None
    path_item: Optional[dict[str, Any]] = None
    stream: bool = False

    @property
    def query(self) -> Optional[dict[str, Any]]:
        """Query parameters, preferring ``parameters`` over legacy ``qs``."""
        return self.parameters or self.qs


class ApiResponse(BaseModel):
    """Normalised response returned by the httpx backends."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
