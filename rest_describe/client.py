"""Client facade wiring the request lifecycle together.

RestClient owns one configuration and builds the validator, request builder,
executor, token manager, operation factory and endpoint manager around it.
"""

import logging
import sys
from typing import Any, Mapping, Optional, Union

from .config import Configuration
from .endpoint_manager import EndpointManager
from .executor import Executor
from .models import EndpointDescriptor
from .operations import Operation, OperationFactory
from .request_builder import RequestBuilder
from .token_manager import TokenManager
from .transport import AiohttpTransport
from .validation import SchemaValidator

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')


class RestClient:
    """Entry point for calling a described REST API

    Args:
        config: Shared configuration; read from the environment when omitted
        transport: Object with an async ``send(wire_request)``; aiohttp by default
        validator: Schema validator; jsonschema-backed by default

    Example:
        client = RestClient(Configuration(base_url="https://api.example.com",
                                          client_id="id", client_secret="secret"))
        get_user = client.describe({"path": "/users/:id", "method": "GET"})
        result = await get_user.invoke(42)
    """

    def __init__(
        self,
        config: Optional[Configuration] = None,
        transport=None,
        validator: Optional[SchemaValidator] = None,
    ):
        self.config = config or Configuration.from_env()
        self.validator = validator or SchemaValidator()
        self.transport = transport or AiohttpTransport(
            timeout=self.config.get_timeout(),
            ca_bundle=self.config.get_ca_bundle(),
        )
        self.builder = RequestBuilder(self.config, self.validator)
        self.executor = Executor(self.builder, self.transport)
        self.token_manager = TokenManager(self.config, self.executor)
        self.factory = OperationFactory(self.token_manager, self.executor)
        self.endpoints = EndpointManager(self.factory)
        logging.info(f"[RestClient] Initialized client for {self.config.get_base_url() or '<no base url>'}")

    def describe(self, descriptor: Union[EndpointDescriptor, Mapping[str, Any]]) -> Operation:
        return self.factory.describe(descriptor)

    async def ensure_token(self) -> str:
        return await self.token_manager.ensure_token()

    async def refresh_access_token(self) -> str:
        return await self.token_manager.refresh_token()


__all__ = [
    "RestClient",
]
