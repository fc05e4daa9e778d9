"""Process-wide configuration for the described API.

One ``Configuration`` is created at startup and shared by reference with the
token manager, request builder and operation factory. The token fields are
the only mutable shared state and are guarded by a lock.
"""

import logging
import os
import threading
from typing import Optional, Tuple


DEFAULT_USER_AGENT = "rest-describe/0.1.0"
DEFAULT_TOKEN_PATH = "/oauth/token"
DEFAULT_TIMEOUT = 30.0
ENV_PREFIX = "REST_DESCRIBE_"


class Configuration:
    """Get/set store for connection settings and the current OAuth tokens

    Args:
        base_url: API base URL, prepended to every path
        user_agent: Value of the ``user-agent`` header
        client_id: OAuth client id used for the client-credentials grant
        client_secret: OAuth client secret
        token_path: Path of the OAuth token endpoint
        timeout: Total timeout for one transport call, in seconds
        ca_bundle: Optional CA file used to verify the server certificate
    """

    def __init__(
        self,
        base_url: str = "",
        user_agent: str = DEFAULT_USER_AGENT,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        token_path: str = DEFAULT_TOKEN_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        ca_bundle: Optional[str] = None,
    ):
        self._lock = threading.Lock()
        self._base_url = ""
        self.set_base_url(base_url)
        self._user_agent = user_agent
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_path = token_path
        self._timeout = timeout
        self._ca_bundle = ca_bundle
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None

    @classmethod
    def from_env(cls, **overrides) -> "Configuration":
        """Build a configuration from ``REST_DESCRIBE_*`` environment variables

        Keyword arguments that are not None take precedence over the environment.
        """
        timeout = os.getenv(f"{ENV_PREFIX}TIMEOUT")
        settings = {
            "base_url": os.getenv(f"{ENV_PREFIX}BASE_URL", ""),
            "user_agent": os.getenv(f"{ENV_PREFIX}USER_AGENT", DEFAULT_USER_AGENT),
            "client_id": os.getenv(f"{ENV_PREFIX}CLIENT_ID"),
            "client_secret": os.getenv(f"{ENV_PREFIX}CLIENT_SECRET"),
            "token_path": os.getenv(f"{ENV_PREFIX}TOKEN_PATH", DEFAULT_TOKEN_PATH),
            "timeout": float(timeout) if timeout else DEFAULT_TIMEOUT,
            "ca_bundle": os.getenv(f"{ENV_PREFIX}CA_BUNDLE"),
        }
        settings.update({key: value for key, value in overrides.items() if value is not None})
        logging.info(f"[Configuration] Loaded configuration for {settings['base_url'] or '<no base url>'}")
        return cls(**settings)

    # Connection settings

    def get_base_url(self) -> str:
        return self._base_url

    def set_base_url(self, base_url: str) -> "Configuration":
        self._base_url = (base_url or "").rstrip("/")
        return self

    def get_user_agent(self) -> str:
        return self._user_agent

    def set_user_agent(self, user_agent: str) -> "Configuration":
        self._user_agent = user_agent
        return self

    def get_client_id(self) -> Optional[str]:
        return self._client_id

    def set_client_id(self, client_id: Optional[str]) -> "Configuration":
        self._client_id = client_id
        return self

    def get_client_secret(self) -> Optional[str]:
        return self._client_secret

    def set_client_secret(self, client_secret: Optional[str]) -> "Configuration":
        self._client_secret = client_secret
        return self

    def get_token_path(self) -> str:
        return self._token_path

    def set_token_path(self, token_path: str) -> "Configuration":
        self._token_path = token_path
        return self

    def get_timeout(self) -> float:
        return self._timeout

    def set_timeout(self, timeout: float) -> "Configuration":
        self._timeout = timeout
        return self

    def get_ca_bundle(self) -> Optional[str]:
        return self._ca_bundle

    def set_ca_bundle(self, ca_bundle: Optional[str]) -> "Configuration":
        self._ca_bundle = ca_bundle
        return self

    # Token state

    def get_access_token(self) -> Optional[str]:
        with self._lock:
            return self._access_token

    def set_access_token(self, token: Optional[str]) -> "Configuration":
        with self._lock:
            self._access_token = token
        return self

    def get_refresh_token(self) -> Optional[str]:
        with self._lock:
            return self._refresh_token

    def set_refresh_token(self, token: Optional[str]) -> "Configuration":
        with self._lock:
            self._refresh_token = token
        return self

    def get_tokens(self) -> Tuple[Optional[str], Optional[str]]:
        with self._lock:
            return self._access_token, self._refresh_token

    def set_tokens(self, access_token: str, refresh_token: Optional[str]) -> "Configuration":
        """Store both tokens in one step"""
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token
        return self

    def reset_tokens(self) -> "Configuration":
        with self._lock:
            self._access_token = None
            self._refresh_token = None
        return self


__all__ = [
    "Configuration",
    "DEFAULT_TOKEN_PATH",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
]
