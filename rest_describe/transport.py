"""aiohttp transport for wire requests.

Certificate verification is always enforced; there is no insecure fallback.
"""

import asyncio
import json
import logging
import ssl
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from .errors import TransportFailed
from .models import TransportResponse, WireRequest


class AiohttpTransport:
    """Sends wire requests over HTTP(S) with aiohttp

    Args:
        timeout: Total timeout of one request in seconds
        ca_bundle: Optional CA file added to the default trust store
    """

    def __init__(self, timeout: float = 30.0, ca_bundle: Optional[str] = None):
        self.timeout = timeout
        self.ssl_context = ssl.create_default_context(cafile=ca_bundle)

    async def send(self, request: WireRequest) -> TransportResponse:
        """Send a request and decode the response body

        Raises:
            TransportFailed: On connection, DNS, TLS or timeout errors
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        kwargs = {
            "params": _query_pairs(request.query),
            "headers": request.headers,
            "ssl": self.ssl_context,
        }
        if request.json is not None:
            kwargs["json"] = request.json
        elif request.form is not None:
            kwargs["data"] = request.form_body()

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(request.method.value, request.uri, **kwargs) as response:
                    body = await self._read_body(response)
                    return TransportResponse(
                        status=response.status,
                        headers=dict(response.headers),
                        body=body,
                    )
        except asyncio.TimeoutError as e:
            logging.error(f"[Transport] Request to {request.uri} timed out after {self.timeout} seconds")
            raise TransportFailed(e, f"Request timed out after {self.timeout} seconds") from e
        except aiohttp.ClientError as e:
            logging.error(f"[Transport] {request.method.value} {request.uri} failed: {e}")
            raise TransportFailed(e) from e

    async def _read_body(self, response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        if not text:
            return None
        if response.content_type and "json" in response.content_type:
            try:
                return json.loads(text)
            except ValueError:
                logging.warning(f"[Transport] Response declared {response.content_type} but is not valid JSON")
        return text


def _query_pairs(query: Dict[str, Any]) -> List[Tuple[str, Any]]:
    """Flatten a query mapping into pairs, repeating the key for list values"""
    pairs = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(item)) for item in value if item is not None)
        else:
            pairs.append((key, _query_value(value)))
    return pairs


def _query_value(value: Any) -> Any:
    # yarl only accepts str, int and float query values
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return value
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


__all__ = [
    "AiohttpTransport",
]
