"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

from typing import Dict, Optional
from unittest.mock import MagicMock

import pytest

from hash_store.config.settings import RedisOptions
from hash_store.connection import shared
from hash_store.connection.shared import SharedConnection
from hash_store.store.hash_store import RedisHashStore


# ============================================================================
# Fake Redis client
# ============================================================================

class FakeRedis:
    """
    In-memory stand-in for redis.Redis covering the hash commands.

    Records every call in `calls` as (command, args, kwargs).
    """

    def __init__(self, host: str = "localhost", port: int = 6379, version: str = "7.2.4"):
        self.host = host
        self.port = port
        self.version = version
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.calls = []
        self.closed = False

    def hset(self, name: str, key: Optional[str] = None, value: Optional[str] = None,
             mapping: Optional[dict] = None, items: Optional[list] = None) -> int:
        self.calls.append(("hset", (name, key, value), {"mapping": mapping, "items": items}))
        pairs = []
        if key is not None:
            pairs.append((key, value))
        if mapping:
            pairs.extend(mapping.items())
        if items:
            pairs.extend(zip(items[::2], items[1::2]))

        record = self.hashes.setdefault(name, {})
        added = 0
        for field, val in pairs:
            added += field not in record
            record[field] = val
        return added

    def hgetall(self, name: str) -> Dict[str, str]:
        self.calls.append(("hgetall", (name,), {}))
        return dict(self.hashes.get(name, {}))

    def hexists(self, name: str, key: str) -> bool:
        self.calls.append(("hexists", (name, key), {}))
        return key in self.hashes.get(name, {})

    def ping(self) -> bool:
        return True

    def info(self, section: Optional[str] = None) -> dict:
        return {"redis_version": self.version}

    def close(self) -> None:
        self.closed = True


# ============================================================================
# Options Fixtures
# ============================================================================

@pytest.fixture
def options() -> RedisOptions:
    """Options mirroring a small two-node deployment."""
    return RedisOptions(
        endpoints=["localhost:7000", "localhost:7001"],
        password="mypassword",
        ssl=False,
        connect_timeout=5000,
        sync_timeout=5000,
        connect_retry=3,
        allow_admin=True,
        default_version="3.0",
        abort_on_connect_fail=False,
    )


# ============================================================================
# Connection Fixtures
# ============================================================================

@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def connection(fake_redis: FakeRedis, options: RedisOptions) -> SharedConnection:
    """A connection over the in-memory fake."""
    return SharedConnection(fake_redis, options)


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_connection(mock_client: MagicMock, options: RedisOptions) -> SharedConnection:
    """A connection over a MagicMock client, for call and failure checks."""
    return SharedConnection(mock_client, options)


@pytest.fixture(autouse=True)
def clean_shared_connection():
    """Make sure no test leaks the process-wide connection."""
    shared._shared = None
    yield
    shared._shared = None


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def store(connection: SharedConnection) -> RedisHashStore:
    """A store backed by the in-memory fake."""
    return RedisHashStore(connection=connection)


@pytest.fixture
def mock_store(mock_connection: SharedConnection) -> RedisHashStore:
    """A store backed by a MagicMock client."""
    return RedisHashStore(connection=mock_connection)
