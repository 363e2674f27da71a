"""
Shared Redis Connection Module

One SharedConnection wraps one redis.Redis client (and its connection
pool) and is meant to be created once per process and handed to every
RedisHashStore.

The connection watches the commands run through execute() and
publishes lifecycle events to its observers:

- FAILED: a command (or the initial connect) hit a connection error
  or timeout while the connection was considered up
- RESTORED: a command succeeded while the connection was considered down
- ERROR_MESSAGE: the server answered a command with an error reply

Logging observers are attached once, when the connection is opened.
"""

import logging
import threading
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple

import redis

from ..config.settings import RedisOptions, settings

logger = logging.getLogger(__name__)

Observer = Callable[[str], None]


class ConnectionEvent(Enum):
    """Lifecycle events published by a SharedConnection."""
    FAILED = auto()
    RESTORED = auto()
    ERROR_MESSAGE = auto()


def _version_tuple(version: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in str(version).split(".") if part.isdigit())


def _build_client(options: RedisOptions, host: str, port: int) -> redis.Redis:
    return redis.Redis(
        host=host,
        port=port,
        password=options.password,
        ssl=options.ssl,
        socket_connect_timeout=options.connect_timeout / 1000,
        socket_timeout=options.sync_timeout / 1000,
        decode_responses=True,
    )


def _connect(options: RedisOptions) -> Tuple[redis.Redis, Optional[redis.RedisError]]:
    """
    Try every endpoint, connect_retry rounds in total.

    Returns:
        (client, None) for the first endpoint that answers PING, or a
        client for the first endpoint plus the last connect error
    """
    last_error = None

    for attempt in range(1, options.connect_retry + 1):
        for host, port in options.addresses:
            client = _build_client(options, host, port)
            try:
                client.ping()
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning(
                    f"Connect attempt {attempt}/{options.connect_retry} "
                    f"to {host}:{port} failed: {e}"
                )
                client.close()
                last_error = e
                continue

            logger.debug(f"Connected to Redis at {host}:{port}")
            return client, None

    host, port = options.addresses[0]
    return _build_client(options, host, port), last_error


class SharedConnection:
    """
    Shared handle to a Redis server.

    Usage:
        connection = SharedConnection.open(RedisOptions.parse("localhost:6379"))
        store = RedisHashStore(connection=connection)

    Attributes:
        client: The underlying redis.Redis client
        options: The options the connection was opened with
    """

    def __init__(self, client: redis.Redis, options: Optional[RedisOptions] = None,
                 connected: bool = True):
        self.client = client
        self.options = options if options is not None else RedisOptions()
        self._connected = connected
        self._state_lock = threading.Lock()
        self._observers: Dict[ConnectionEvent, List[Observer]] = {
            event: [] for event in ConnectionEvent
        }

    @classmethod
    def open(cls, options: Optional[RedisOptions] = None,
             event_logger: Optional[logging.Logger] = None) -> "SharedConnection":
        """
        Connect to Redis and attach the lifecycle logging observers.

        Args:
            options: Connection options (default from settings)
            event_logger: Logger receiving lifecycle events (default: this module's)

        Returns:
            The opened connection; when no endpoint answered and
            abort_on_connect_fail is false it starts in the failed state

        Raises:
            redis.ConnectionError, redis.TimeoutError: No endpoint answered
                and abort_on_connect_fail is true
        """
        if options is None:
            options = settings.redis_options()

        client, error = _connect(options)
        try:
            connection = cls(client, options, connected=error is None)
            connection.add_logging_observers(event_logger or logger)

            if error is not None:
                connection._emit(ConnectionEvent.FAILED, str(error))
                if options.abort_on_connect_fail:
                    raise error
            else:
                connection._check_version()
        except BaseException:
            client.close()
            raise

        return connection

    def add_logging_observers(self, log: logging.Logger) -> None:
        """Log every lifecycle event to the given logger."""
        self.subscribe(ConnectionEvent.FAILED,
                       lambda message: log.error(f"Redis connection failed: {message}"))
        self.subscribe(ConnectionEvent.RESTORED,
                       lambda message: log.info("Redis connection restored"))
        self.subscribe(ConnectionEvent.ERROR_MESSAGE,
                       lambda message: log.error(f"Redis error: {message}"))

    def subscribe(self, event: ConnectionEvent, observer: Observer) -> None:
        """Register an observer called with the event message."""
        self._observers[event].append(observer)

    def observer_count(self, event: ConnectionEvent) -> int:
        return len(self._observers[event])

    @property
    def is_connected(self) -> bool:
        return self._connected

    def execute(self, command: str, *args, **kwargs) -> Any:
        """
        Run a client command, publishing lifecycle events on the way.

        Args:
            command: redis.Redis method name, e.g. 'hgetall'

        Returns:
            Whatever the client command returns

        Raises:
            Any error raised by the client, unchanged
        """
        try:
            result = getattr(self.client, command)(*args, **kwargs)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            self._set_connected(False, str(e))
            raise
        except redis.ResponseError as e:
            # An error reply still proves the link is up
            self._set_connected(True)
            self._emit(ConnectionEvent.ERROR_MESSAGE, str(e))
            raise

        self._set_connected(True)
        return result

    def close(self) -> None:
        """Release the client's pooled connections."""
        self.client.close()

    def _set_connected(self, connected: bool, message: str = "") -> None:
        with self._state_lock:
            if self._connected == connected:
                return
            self._connected = connected

        event = ConnectionEvent.RESTORED if connected else ConnectionEvent.FAILED
        self._emit(event, message)

    def _emit(self, event: ConnectionEvent, message: str) -> None:
        for observer in list(self._observers[event]):
            try:
                observer(message)
            except Exception:
                logger.exception(f"Observer for {event.name} raised")

    def _check_version(self) -> None:
        floor = self.options.default_version
        if not floor:
            return

        try:
            server_version = self.client.info("server").get("redis_version", "")
        except redis.RedisError as e:
            logger.warning(f"Could not check Redis server version against {floor}: {e}")
            return

        if _version_tuple(server_version) < _version_tuple(floor):
            logger.warning(
                f"Redis server version {server_version} is below "
                f"the configured minimum {floor}"
            )

    def __repr__(self) -> str:
        return (f"SharedConnection(endpoints={self.options.endpoints}, "
                f"connected={self._connected})")


_shared: Optional[SharedConnection] = None
_shared_lock = threading.Lock()


def get_shared_connection(options: Optional[RedisOptions] = None) -> SharedConnection:
    """
    Return the process-wide connection, opening it on first use.

    Concurrent first callers block until the single open completes.
    Options passed after the connection exists are ignored.
    """
    global _shared

    if _shared is None:
        with _shared_lock:
            if _shared is None:
                _shared = SharedConnection.open(options)
    return _shared


def reset_shared_connection() -> None:
    """Close and forget the process-wide connection."""
    global _shared

    with _shared_lock:
        connection, _shared = _shared, None
    if connection is not None:
        connection.close()
