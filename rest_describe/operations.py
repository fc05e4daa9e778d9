"""Generated operations for described endpoints.

``OperationFactory.describe`` turns an endpoint descriptor into an
``Operation``. Calling an operation binds its arguments into a path and a
payload, makes sure an access token is available and executes the request.

Operations can be used in two ways::

    get_user = factory.describe({"path": "/users/:id", "method": "GET"})

    # completion style, from inside a running event loop
    get_user(42, lambda error, result: ...)

    # awaitable style
    result = await get_user.invoke(42)
"""

import asyncio
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union
from urllib.parse import quote

from .errors import CallError, MissingCallback, MissingPathArguments, MissingPayloadProperties
from .executor import Completion, Executor
from .models import CallIntent, CallResult, EndpointDescriptor
from .token_manager import TokenManager

PLACEHOLDER_PATTERN = re.compile(r":[A-Za-z0-9_\-]+")


@dataclass(frozen=True)
class BoundCall:
    path: str
    payload: Dict[str, Any]


def path_placeholders(template: str) -> List[str]:
    """Return placeholder names of a path template in order, colon stripped"""
    return [match.group(0)[1:] for match in PLACEHOLDER_PATTERN.finditer(template)]


def bind_arguments(descriptor: EndpointDescriptor, args: Sequence[Any]) -> BoundCall:
    """Bind call arguments (completion excluded) to a path and a payload

    The payload is the last argument when it is a mapping, otherwise empty.
    GET and DELETE fill placeholders from the positional arguments in order;
    the other methods fill them from same-named payload properties.

    Raises:
        MissingPathArguments: Fewer positional arguments than placeholders
        MissingPayloadProperties: Payload lacks (or has falsy) placeholder properties
    """
    args = list(args)
    if args and isinstance(args[-1], Mapping):
        payload = dict(args.pop())
    else:
        payload = {}

    names = path_placeholders(descriptor.path)

    if descriptor.method.takes_path_from_arguments:
        if len(args) < len(names):
            raise MissingPathArguments(names[len(args):])
        values = iter(args)
        path = PLACEHOLDER_PATTERN.sub(lambda match: _segment(next(values)), descriptor.path)
    else:
        missing = []
        for name in names:
            if not payload.get(name) and name not in missing:
                missing.append(name)
        if missing:
            raise MissingPayloadProperties(missing)
        path = PLACEHOLDER_PATTERN.sub(lambda match: _segment(payload[match.group(0)[1:]]), descriptor.path)

    return BoundCall(path=path, payload=payload)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class Operation:
    """Callable generated from an endpoint descriptor

    Args:
        descriptor: Endpoint the operation calls
        token_manager: Provides the access token before each call
        executor: Builds and sends the request
    """

    def __init__(self, descriptor: EndpointDescriptor, token_manager: TokenManager, executor: Executor):
        self.descriptor = descriptor
        self.token_manager = token_manager
        self.executor = executor
        self.__name__ = descriptor.name or f"{descriptor.method.value} {descriptor.path}"
        self.__doc__ = descriptor.description or None

    def __repr__(self) -> str:
        return f"<Operation {self.descriptor.method.value} {self.descriptor.path}>"

    def bind(self, *args) -> BoundCall:
        return bind_arguments(self.descriptor, args)

    def __call__(self, *args) -> "asyncio.Task":
        """Call the endpoint, delivering the outcome to the trailing completion

        The completion is called exactly once, as ``completion(error, None)``
        or ``completion(None, result)``. Must be called from a running event
        loop; the scheduled task is returned.

        Raises:
            MissingCallback: The last argument is not callable
            MissingPathArguments: See ``bind_arguments``
            MissingPayloadProperties: See ``bind_arguments``
        """
        completion = args[-1] if args else None
        if not callable(completion):
            raise MissingCallback()

        bound = self.bind(*args[:-1])
        loop = asyncio.get_running_loop()
        return loop.create_task(self._deliver(bound, completion))

    async def invoke(self, *args) -> CallResult:
        """Call the endpoint and return its result

        Raises:
            CallError: Any binding, token, validation, transport or HTTP failure
        """
        return await self._perform(self.bind(*args))

    async def _perform(self, bound: BoundCall) -> CallResult:
        intent = CallIntent(
            path=bound.path,
            method=self.descriptor.method,
            payload=bound.payload,
            schema=self.descriptor.schema,
            headers=self.descriptor.headers,
        )
        # an invalid payload must not trigger a token exchange
        self.executor.builder.validate_intent(intent)
        await self.token_manager.ensure_token()
        return await self.executor.execute(intent)

    async def _deliver(self, bound: BoundCall, completion: Completion) -> None:
        try:
            result = await self._perform(bound)
        except CallError as e:
            completion(e, None)
            return
        except Exception as e:
            logging.exception(f"[Operation] Unexpected error calling {self.__name__}: {e}")
            completion(e, None)
            return
        completion(None, result)


class OperationFactory:
    """Creates operations that share one token manager and executor"""

    def __init__(self, token_manager: TokenManager, executor: Executor):
        self.token_manager = token_manager
        self.executor = executor

    def describe(self, descriptor: Union[EndpointDescriptor, Mapping[str, Any]]) -> Operation:
        """Create an operation from a descriptor or a descriptor config dict

        Raises:
            KeyError: If a config dict lacks ``path`` or ``method``
            ValueError: If the method is not supported
        """
        if not isinstance(descriptor, EndpointDescriptor):
            descriptor = EndpointDescriptor.from_config(descriptor)
        logging.debug(f"[OperationFactory] Described {descriptor.method.value} {descriptor.path}")
        return Operation(descriptor, self.token_manager, self.executor)


__all__ = [
    "BoundCall",
    "Operation",
    "OperationFactory",
    "bind_arguments",
    "path_placeholders",
]
