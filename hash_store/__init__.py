"""
Hash Store: Redis hash-map wrapper

A thin synchronous facade over a shared Redis connection for
writing, reading and probing hash-map records.
"""

from redis import RedisError as RemoteOperationError

from .config.settings import RedisOptions, Settings, settings
from .connection.shared import (
    ConnectionEvent,
    SharedConnection,
    get_shared_connection,
    reset_shared_connection,
)
from .store.hash_store import RedisHashStore
from .store.mapping import from_hash_entries, to_hash_entries

__version__ = "1.0.0"

__all__ = [
    "ConnectionEvent",
    "RedisHashStore",
    "RedisOptions",
    "RemoteOperationError",
    "Settings",
    "SharedConnection",
    "from_hash_entries",
    "get_shared_connection",
    "reset_shared_connection",
    "settings",
    "to_hash_entries",
]
