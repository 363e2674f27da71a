"""
Redis Hash Store Module

Facade over a shared Redis connection for hash-map records.

Every operation maps to a single Redis command:
- set_values: HSET key f1 v1 f2 v2 ...
- get_values: HGETALL key
- add_or_update_key: HSET key field value
- key_exists: HEXISTS key field

Failures are logged with the record key (and field) and re-raised
unchanged; nothing is retried here.
"""

import logging
from typing import Dict, Mapping, Optional

from ..config.settings import RedisOptions
from ..connection.shared import SharedConnection, get_shared_connection
from .mapping import flatten_hash_entries, from_hash_entries, to_hash_entries


class RedisHashStore:
    """
    Read and write Redis hash-map records.

    Instances are cheap: they share one connection, either the one
    passed in or the process-wide default from get_shared_connection().
    Lifecycle logging belongs to the connection, so constructing many
    stores does not add observers.

    Usage:
        store = RedisHashStore(options=RedisOptions.parse("localhost:6379"))
        store.set_values("payment-123", {"status": "paid"})
        store.get_values("payment-123")  # {'status': 'paid'}

    Attributes:
        connection: The SharedConnection commands run through
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 options: Optional[RedisOptions] = None,
                 connection: Optional[SharedConnection] = None):
        """
        Initialize the store.

        Args:
            logger: Logger for operation errors (default: this module's)
            options: Options for the process-wide connection when it
                has not been opened yet
            connection: Explicit connection to use instead of the
                process-wide one
        """
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self.connection = connection if connection is not None else get_shared_connection(options)

    def set_values(self, redis_key: str, values: Mapping[str, str]) -> None:
        """
        Write all pairs of a mapping into the record in one HSET.

        An empty mapping writes nothing.
        """
        try:
            entries = to_hash_entries(values)
            if not entries:
                return
            self.connection.execute("hset", redis_key, items=flatten_hash_entries(entries))
        except Exception:
            self._logger.exception(f"Error setting value for redisKey {redis_key}")
            raise

    def get_values(self, redis_key: str) -> Dict[str, str]:
        """
        Read every field of the record.

        Returns:
            field -> value dict; empty when the record does not exist
        """
        try:
            entries = self.connection.execute("hgetall", redis_key)
        except Exception:
            self._logger.exception(f"Error getting value for redisKey {redis_key}")
            raise

        return from_hash_entries(entries or {})

    def add_or_update_key(self, redis_key: str, key: str, value: str) -> None:
        """Set a single field, overwriting any previous value."""
        try:
            self.connection.execute("hset", redis_key, key, value)
        except Exception:
            self._logger.exception(
                f"Error adding or updating key for redisKey {redis_key}, key {key}"
            )
            raise

    def key_exists(self, redis_key: str, key: str) -> bool:
        """Check whether the record has the given field."""
        try:
            return bool(self.connection.execute("hexists", redis_key, key))
        except Exception:
            self._logger.exception(
                f"Error checking key existence for redisKey {redis_key}, key {key}"
            )
            raise
