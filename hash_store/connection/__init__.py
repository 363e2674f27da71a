"""Connection module for Hash Store."""

from .shared import (
    ConnectionEvent,
    SharedConnection,
    get_shared_connection,
    reset_shared_connection,
)

__all__ = [
    "ConnectionEvent",
    "SharedConnection",
    "get_shared_connection",
    "reset_shared_connection",
]
