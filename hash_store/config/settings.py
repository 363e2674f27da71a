"""
Hash Store Configuration Settings

This module contains the Redis connection options and the
environment-driven defaults used when no options are passed in.

Connection options can be written as a single comma-separated string:

    localhost:7000,localhost:7001,password=secret,ssl=false,abortConnect=false

Bare tokens are endpoints (host[:port]); everything else is key=value.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

DEFAULT_PORT = 6379


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from None


def parse_endpoint(endpoint: str) -> Tuple[str, int]:
    """
    Split a 'host[:port]' endpoint into its parts.

    Args:
        endpoint: Endpoint string, e.g. 'localhost:7000'

    Returns:
        Tuple of (host, port); port defaults to 6379
    """
    host, sep, port = endpoint.strip().rpartition(":")
    if not sep:
        return port, DEFAULT_PORT
    if not host:
        raise ValueError(f"Invalid endpoint: {endpoint!r}")
    return host, _parse_int("endpoint port", port)


@dataclass
class RedisOptions:
    """
    Options describing how to reach the Redis server.

    Attributes:
        endpoints: 'host:port' strings, tried in order on connect
        password: AUTH password (None for no auth); may not contain a
            comma, which separates tokens in the configuration string
        ssl: Use TLS for the transport
        connect_timeout: Milliseconds before a connect attempt is abandoned
        sync_timeout: Milliseconds before a blocking command is abandoned
        connect_retry: Connect rounds over all endpoints before giving up
        allow_admin: Permit administrative commands on the shared connection
        default_version: Minimum server version expected, e.g. '3.0'
        abort_on_connect_fail: Fail the open if no endpoint answers,
            instead of returning a connection that reconnects on demand
    """

    endpoints: List[str] = field(default_factory=lambda: [f"localhost:{DEFAULT_PORT}"])
    password: Optional[str] = field(default=None, repr=False)
    ssl: bool = False
    connect_timeout: int = 5000
    sync_timeout: int = 5000
    connect_retry: int = 3
    allow_admin: bool = False
    default_version: Optional[str] = None
    abort_on_connect_fail: bool = True

    # config-string key -> attribute name
    _KEYS = {
        "password": "password",
        "ssl": "ssl",
        "connecttimeout": "connect_timeout",
        "synctimeout": "sync_timeout",
        "connectretry": "connect_retry",
        "allowadmin": "allow_admin",
        "version": "default_version",
        "abortconnect": "abort_on_connect_fail",
    }

    def __post_init__(self):
        if not self.endpoints:
            raise ValueError("At least one endpoint is required")
        if self.password is not None and "," in self.password:
            raise ValueError("Password may not contain ','")
        for endpoint in self.endpoints:
            parse_endpoint(endpoint)
        if self.connect_retry < 1:
            raise ValueError(f"connect_retry must be at least 1, got {self.connect_retry}")

    @classmethod
    def parse(cls, text: str) -> "RedisOptions":
        """
        Build options from a comma-separated configuration string.

        Raises:
            ValueError: On unknown keys or malformed values
        """
        endpoints: List[str] = []
        values = {}

        for token in text.split(","):
            token = token.strip()
            if not token:
                continue
            if "=" not in token:
                parse_endpoint(token)
                endpoints.append(token)
                continue

            key, _, raw = token.partition("=")
            attr = cls._KEYS.get(key.strip().lower())
            if attr is None:
                raise ValueError(f"Unknown configuration key: {key.strip()!r}")

            raw = raw.strip()
            if attr in ("ssl", "allow_admin", "abort_on_connect_fail"):
                values[attr] = _parse_bool(raw)
            elif attr in ("connect_timeout", "sync_timeout", "connect_retry"):
                values[attr] = _parse_int(key.strip(), raw)
            else:
                values[attr] = raw

        if endpoints:
            values["endpoints"] = endpoints
        return cls(**values)

    @property
    def addresses(self) -> List[Tuple[str, int]]:
        """Endpoints as (host, port) tuples."""
        return [parse_endpoint(endpoint) for endpoint in self.endpoints]

    def __str__(self) -> str:
        parts = list(self.endpoints)
        if self.password is not None:
            parts.append(f"password={self.password}")
        parts.append(f"ssl={str(self.ssl).lower()}")
        parts.append(f"connectTimeout={self.connect_timeout}")
        parts.append(f"syncTimeout={self.sync_timeout}")
        parts.append(f"connectRetry={self.connect_retry}")
        parts.append(f"allowAdmin={str(self.allow_admin).lower()}")
        if self.default_version is not None:
            parts.append(f"version={self.default_version}")
        parts.append(f"abortConnect={str(self.abort_on_connect_fail).lower()}")
        return ",".join(parts)


@dataclass
class Settings:
    """Environment-driven defaults."""

    # Connection string; wins over the individual values below when set
    REDIS: str = os.environ.get("HASH_STORE_REDIS", "")

    ENDPOINTS: str = os.environ.get("HASH_STORE_ENDPOINTS", f"localhost:{DEFAULT_PORT}")
    PASSWORD: str = os.environ.get("HASH_STORE_PASSWORD", "")
    SSL: bool = os.environ.get("HASH_STORE_SSL", "false").lower() == "true"
    CONNECT_TIMEOUT: int = int(os.environ.get("HASH_STORE_CONNECT_TIMEOUT", "5000"))
    SYNC_TIMEOUT: int = int(os.environ.get("HASH_STORE_SYNC_TIMEOUT", "5000"))
    CONNECT_RETRY: int = int(os.environ.get("HASH_STORE_CONNECT_RETRY", "3"))
    ALLOW_ADMIN: bool = os.environ.get("HASH_STORE_ALLOW_ADMIN", "false").lower() == "true"
    ABORT_ON_CONNECT_FAIL: bool = os.environ.get("HASH_STORE_ABORT_CONNECT", "true").lower() == "true"

    # Logging settings
    DEBUG: bool = os.environ.get("HASH_STORE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("HASH_STORE_LOG_LEVEL", "INFO")

    def redis_options(self) -> RedisOptions:
        """Build RedisOptions from these settings."""
        if self.REDIS:
            return RedisOptions.parse(self.REDIS)

        return RedisOptions(
            endpoints=[e.strip() for e in self.ENDPOINTS.split(",") if e.strip()],
            password=self.PASSWORD or None,
            ssl=self.SSL,
            connect_timeout=self.CONNECT_TIMEOUT,
            sync_timeout=self.SYNC_TIMEOUT,
            connect_retry=self.CONNECT_RETRY,
            allow_admin=self.ALLOW_ADMIN,
            abort_on_connect_fail=self.ABORT_ON_CONNECT_FAIL,
        )


# Global settings instance
settings = Settings()
