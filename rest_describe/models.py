"""Data models for described endpoints and the requests built from them.

This module contains the core data structures that flow through the request
lifecycle: the endpoint descriptor given to ``describe``, the call intent
handed to the executor, the wire request sent by the transport, and the
normalized result returned to callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode


JSON_MIME_TYPE = "application/json"
FORM_MIME_TYPE = "application/x-www-form-urlencoded"


class HTTPMethod(Enum):
    """Supported HTTP methods for described endpoints"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @property
    def takes_path_from_arguments(self) -> bool:
        return self in (HTTPMethod.GET, HTTPMethod.DELETE)


@dataclass(frozen=True)
class EndpointDescriptor:
    """Declarative definition of one API operation

    Args:
        path: Path template, placeholders written as ``:name`` (e.g. /users/:id)
        method: HTTP method to use
        headers: Optional per-endpoint headers (``accept``/``content-type`` overrides)
        schema: Optional JSON schema the payload is validated against
        name: Optional operation name
        description: Optional human readable description
    """
    path: str
    method: HTTPMethod
    headers: Optional[Dict[str, str]] = None
    schema: Optional[Dict[str, Any]] = None
    name: Optional[str] = None
    description: str = ""

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "EndpointDescriptor":
        """Create an EndpointDescriptor from a configuration dictionary

        Raises:
            KeyError: If ``path`` or ``method`` is missing
            ValueError: If the method is not supported
        """
        method = config["method"]
        if not isinstance(method, HTTPMethod):
            method = HTTPMethod(str(method).upper())

        return cls(
            path=config["path"],
            method=method,
            headers=dict(config["headers"]) if config.get("headers") else None,
            schema=config.get("schema"),
            name=config.get("name"),
            description=config.get("description", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "method": self.method.value,
            "headers": self.headers,
            "schema": self.schema,
            "description": self.description,
        }


@dataclass(frozen=True)
class CallIntent:
    """Abstract description of one call, before it becomes a wire request"""
    path: str
    method: HTTPMethod
    payload: Dict[str, Any] = field(default_factory=dict)
    schema: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class WireRequest:
    """Concrete request handed to the transport

    Exactly one of ``json`` and ``form`` is set for body-bearing requests;
    both are None for GET.
    """
    uri: str
    method: HTTPMethod
    headers: Dict[str, str]
    query: Dict[str, Any]
    json: Optional[Any] = None
    form: Optional[Dict[str, Any]] = None

    def form_body(self) -> Optional[str]:
        """Return the url-encoded representation of the form body"""
        if self.form is None:
            return None
        return urlencode(self.form, doseq=True)


@dataclass(frozen=True)
class TransportResponse:
    status: int
    headers: Dict[str, str]
    body: Any = None


@dataclass(frozen=True)
class CallResult:
    """Successful outcome of a call"""
    status_code: int
    body: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "status_code": self.status_code,
            "data": self.body,
        }


__all__ = [
    "JSON_MIME_TYPE",
    "FORM_MIME_TYPE",
    "HTTPMethod",
    "EndpointDescriptor",
    "CallIntent",
    "WireRequest",
    "TransportResponse",
    "CallResult",
]
