"""OAuth2 access token management.

At most one token exchange (client-credentials acquisition or refresh) runs
at a time. Callers arriving while an exchange is in flight join it and
receive its token or its error; they never start a second exchange.
"""

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Dict, Optional

from .config import Configuration
from .errors import (
    CallError,
    MissingCredentials,
    MissingRefreshToken,
    TokenAcquisitionFailed,
)
from .executor import Executor
from .models import CallIntent, CallResult, HTTPMethod


class TokenManager:
    """Keeps a valid access token in the configuration

    Args:
        config: Shared configuration holding credentials and tokens
        executor: Executor used for the token endpoint calls
    """

    def __init__(self, config: Configuration, executor: Executor):
        self.config = config
        self.executor = executor
        self._lock = threading.Lock()
        self._inflight: Optional[asyncio.Future] = None

    @property
    def exchange_in_flight(self) -> bool:
        with self._lock:
            return self._inflight is not None

    async def ensure_token(self) -> str:
        """Return the stored access token, acquiring one if needed

        Raises:
            MissingCredentials: No client id/secret configured (no network call)
            TokenAcquisitionFailed: The client-credentials exchange failed
        """
        with self._lock:
            token = self.config.get_access_token()
            if token:
                return token
            future = self._join_or_start(self._acquire)
        return await asyncio.shield(future)

    async def refresh_token(self) -> str:
        """Exchange the stored refresh token for a new token pair

        Raises:
            MissingRefreshToken: No refresh token stored (no network call)
            TokenAcquisitionFailed: The refresh exchange failed
        """
        with self._lock:
            if self._inflight is None and not self.config.get_refresh_token():
                raise MissingRefreshToken()
            future = self._join_or_start(self._refresh)
        return await asyncio.shield(future)

    def _join_or_start(self, exchange: Callable[[], Awaitable[str]]) -> asyncio.Future:
        # caller holds self._lock
        if self._inflight is not None:
            logging.info("[TokenManager] Joining in-flight token exchange")
            return self._inflight
        self._inflight = asyncio.ensure_future(self._run_exchange(exchange))
        return self._inflight

    async def _run_exchange(self, exchange: Callable[[], Awaitable[str]]) -> str:
        try:
            return await exchange()
        finally:
            with self._lock:
                self._inflight = None

    async def _acquire(self) -> str:
        client_id = self.config.get_client_id()
        client_secret = self.config.get_client_secret()
        if not client_id or not client_secret:
            logging.error("[TokenManager] Cannot acquire access token: client credentials not configured")
            raise MissingCredentials()

        logging.info("[TokenManager] Requesting access token with client credentials")
        payload = {
            "client_id": client_id,
            "client_secret": client_secret,
            "grant_type": "client_credentials",
        }
        return await self._exchange(payload, "Error getting the access_token")

    async def _refresh(self) -> str:
        refresh_token = self.config.get_refresh_token()
        if not refresh_token:
            raise MissingRefreshToken()

        logging.info("[TokenManager] Refreshing access token")
        payload = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        if self.config.get_client_id():
            payload["client_id"] = self.config.get_client_id()
        if self.config.get_client_secret():
            payload["client_secret"] = self.config.get_client_secret()
        return await self._exchange(payload, "Error refreshing the access_token")

    async def _exchange(self, payload: Dict[str, str], failure_prefix: str) -> str:
        intent = CallIntent(
            path=self.config.get_token_path(),
            method=HTTPMethod.POST,
            payload=payload,
        )
        try:
            result = await self.executor.execute(intent)
        except CallError as e:
            logging.error(f"[TokenManager] {failure_prefix}: {e.message}")
            raise TokenAcquisitionFailed(f"{failure_prefix}: {e.message}", cause=e) from e

        access_token = _body_field(result, "access_token")
        if not access_token:
            logging.error(f"[TokenManager] {failure_prefix}: response carried no access_token")
            raise TokenAcquisitionFailed(f"{failure_prefix}: response carried no access_token")

        self.config.set_tokens(access_token, _body_field(result, "refresh_token"))
        logging.info("[TokenManager] Stored new access token")
        return access_token


def _body_field(result: CallResult, name: str) -> Optional[str]:
    if isinstance(result.body, dict):
        return result.body.get(name)
    return None


__all__ = [
    "TokenManager",
]
