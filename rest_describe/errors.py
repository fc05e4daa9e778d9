"""Error types surfaced by generated operations.

Errors raised before any network call (missing completion, unbindable
arguments) are raised synchronously. Everything after that point is delivered
through the completion, or raised from ``Operation.invoke``.
"""

from typing import Any, Dict, List, Optional, Sequence


class CallError(Exception):
    """Base error class for operation calls."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the result dict shape used for failed calls."""
        return {"success": False, "message": self.message}


class MissingCallback(CallError):
    """The last argument of a completion-style call was not callable."""

    def __init__(self, message: str = "Callback is required"):
        super().__init__(message)


class MissingPathArguments(CallError):
    """Fewer positional arguments than path placeholders (GET/DELETE)."""

    def __init__(self, names: Sequence[str]):
        self.names: List[str] = list(names)
        super().__init__(f"Expecting parameters: {', '.join(self.names)}")

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["missing"] = self.names
        return result


class MissingPayloadProperties(CallError):
    """Payload lacks properties named by path placeholders (POST/PUT/PATCH)."""

    def __init__(self, names: Sequence[str]):
        self.names: List[str] = list(names)
        super().__init__(f"The JSON is missing the following properties: {', '.join(self.names)}")

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["missing"] = self.names
        return result


class ValidationFailed(CallError):
    """Payload does not satisfy the endpoint schema."""

    def __init__(self, messages: Sequence[str], message: Optional[str] = None):
        self.messages: List[str] = list(messages)
        super().__init__(message or "; ".join(self.messages))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["errors"] = self.messages
        return result


class TokenAcquisitionFailed(CallError):
    """The OAuth exchange could not produce an access token."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class MissingCredentials(TokenAcquisitionFailed):
    def __init__(self):
        super().__init__("Must set client_id and client_secret")


class MissingRefreshToken(TokenAcquisitionFailed):
    def __init__(self):
        super().__init__("You need the refresh_token to refresh the access_token")


class TransportFailed(CallError):
    """Connection, DNS, TLS or timeout failure below HTTP."""

    def __init__(self, cause: BaseException, message: Optional[str] = None):
        super().__init__(message or f"Connection error: {cause}")
        self.cause = cause


class HttpStatusFailed(CallError):
    """The server answered with a status code outside [200, 300)."""

    def __init__(self, status_code: int, message: str, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["status_code"] = self.status_code
        result["data"] = self.body
        return result


__all__ = [
    "CallError",
    "MissingCallback",
    "MissingPathArguments",
    "MissingPayloadProperties",
    "ValidationFailed",
    "TokenAcquisitionFailed",
    "MissingCredentials",
    "MissingRefreshToken",
    "TransportFailed",
    "HttpStatusFailed",
]
