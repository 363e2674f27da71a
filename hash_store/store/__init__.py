"""Store module for Hash Store."""

from .hash_store import RedisHashStore
from .mapping import flatten_hash_entries, from_hash_entries, to_hash_entries

__all__ = [
    "RedisHashStore",
    "flatten_hash_entries",
    "from_hash_entries",
    "to_hash_entries",
]
