"""Sends built requests and classifies their outcome."""

import logging
from typing import Any, Callable, Optional

from .errors import CallError, HttpStatusFailed
from .models import CallIntent, CallResult
from .request_builder import RequestBuilder

Completion = Callable[[Optional[BaseException], Optional[CallResult]], Any]

UNKNOWN_ERROR_MESSAGE = "Unknown Error"


class Executor:
    """Builds the wire request for an intent and performs it through a transport"""

    def __init__(self, builder: RequestBuilder, transport):
        self.builder = builder
        self.transport = transport

    async def execute(self, intent: CallIntent) -> CallResult:
        """Perform one call

        Returns:
            CallResult for any 2xx response

        Raises:
            ValidationFailed: Payload rejected by the schema, nothing was sent
            TransportFailed: The request never got an HTTP response
            HttpStatusFailed: Status code outside [200, 300)
        """
        request = self.builder.build(intent)
        logging.info(f"[Executor] Calling {request.method.value} {intent.path}")
        response = await self.transport.send(request)

        if response.status < 200 or response.status >= 300:
            message = _error_message(response.body)
            logging.warning(f"[Executor] {request.method.value} {intent.path} returned {response.status}: {message}")
            raise HttpStatusFailed(response.status, message, response.body)

        logging.info(f"[Executor] {request.method.value} {intent.path} returned {response.status}")
        return CallResult(status_code=response.status, body=response.body)

    async def exec(self, intent: CallIntent, completion: Completion) -> None:
        """Perform one call and deliver the outcome through ``completion``"""
        try:
            result = await self.execute(intent)
        except CallError as e:
            completion(e, None)
            return
        except Exception as e:
            logging.exception(f"[Executor] Unexpected error calling {intent.method.value} {intent.path}: {e}")
            completion(e, None)
            return
        completion(None, result)


def _error_message(body: Any) -> str:
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return UNKNOWN_ERROR_MESSAGE


__all__ = [
    "Completion",
    "Executor",
]
