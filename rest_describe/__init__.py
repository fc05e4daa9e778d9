"""Declarative REST client runtime.

This package turns endpoint descriptors (path template, method, optional
payload schema) into callable operations, manages an OAuth2 client-credentials
access token and normalizes request outcomes.
"""

from .client import RestClient
from .config import Configuration
from .endpoint_manager import EndpointManager
from .errors import (
    CallError,
    HttpStatusFailed,
    MissingCallback,
    MissingCredentials,
    MissingPathArguments,
    MissingPayloadProperties,
    MissingRefreshToken,
    TokenAcquisitionFailed,
    TransportFailed,
    ValidationFailed,
)
from .executor import Executor
from .models import CallIntent, CallResult, EndpointDescriptor, HTTPMethod, WireRequest
from .operations import Operation, OperationFactory, bind_arguments
from .request_builder import RequestBuilder
from .token_manager import TokenManager
from .transport import AiohttpTransport
from .validation import SchemaValidator, SchemaViolation

__version__ = "0.1.0"

__all__ = [
    "AiohttpTransport",
    "CallError",
    "CallIntent",
    "CallResult",
    "Configuration",
    "EndpointDescriptor",
    "EndpointManager",
    "Executor",
    "HTTPMethod",
    "HttpStatusFailed",
    "MissingCallback",
    "MissingCredentials",
    "MissingPathArguments",
    "MissingPayloadProperties",
    "MissingRefreshToken",
    "Operation",
    "OperationFactory",
    "RequestBuilder",
    "RestClient",
    "SchemaValidator",
    "SchemaViolation",
    "TokenAcquisitionFailed",
    "TokenManager",
    "TransportFailed",
    "ValidationFailed",
    "WireRequest",
    "bind_arguments",
]
