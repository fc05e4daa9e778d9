"""Endpoint management for described API endpoints.

This module provides the EndpointManager class which keeps named endpoint
descriptors and the operations generated from them.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Union

from .models import EndpointDescriptor
from .operations import Operation, OperationFactory


class EndpointManager:
    """Manages named endpoints and their generated operations

    Args:
        factory: OperationFactory used to describe added endpoints
    """

    def __init__(self, factory: OperationFactory):
        self.factory = factory
        self.endpoints: Dict[str, EndpointDescriptor] = {}
        self.operations: Dict[str, Operation] = {}
        logging.info("[EndpointManager] Initialized endpoint manager")

    def add_endpoint(self, name: str, descriptor: Union[EndpointDescriptor, Mapping[str, Any]]) -> Operation:
        """Add a new endpoint and create its operation

        Args:
            name: Unique endpoint name
            descriptor: EndpointDescriptor or descriptor config dict

        Returns:
            The generated Operation

        Raises:
            ValueError: If endpoint name already exists
        """
        if name in self.endpoints:
            raise ValueError(f"Endpoint '{name}' already exists")

        if not isinstance(descriptor, EndpointDescriptor):
            descriptor = EndpointDescriptor.from_config({**descriptor, "name": descriptor.get("name", name)})

        operation = self.factory.describe(descriptor)
        self.endpoints[name] = descriptor
        self.operations[name] = operation

        logging.info(f"[EndpointManager] Added endpoint '{name}' ({descriptor.method.value} {descriptor.path})")
        return operation

    def load_endpoints(self, configs: Iterable[Mapping[str, Any]]) -> List[Operation]:
        """Add every endpoint of a list of config dicts, each carrying a ``name``

        Raises:
            KeyError: If a config lacks ``name``, ``path`` or ``method``
            ValueError: If a name is duplicated or a method is unsupported
        """
        return [self.add_endpoint(config["name"], config) for config in configs]

    def remove_endpoint(self, name: str) -> bool:
        """Remove an endpoint and its operation

        Returns:
            True if endpoint was removed, False if it didn't exist
        """
        removed = False
        if name in self.endpoints:
            del self.endpoints[name]
            removed = True
        if name in self.operations:
            del self.operations[name]
            removed = True

        if removed:
            logging.info(f"[EndpointManager] Removed endpoint '{name}'")
        else:
            logging.warning(f"[EndpointManager] Endpoint '{name}' not found for removal")

        return removed

    def get_operation(self, name: str) -> Operation:
        """Raises KeyError for unknown names"""
        if name not in self.operations:
            raise KeyError(f"Endpoint '{name}' not found")
        return self.operations[name]

    def get_operations(self) -> Dict[str, Operation]:
        return self.operations

    def list_endpoints(self) -> List[dict]:
        return [descriptor.to_dict() for descriptor in self.endpoints.values()]


__all__ = [
    "EndpointManager",
]
