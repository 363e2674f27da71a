#!/usr/bin/env python3
"""
Hash Store Command Line

Runs the hash-store operations against a Redis server.

Usage:
    hash-store get payment-123
    hash-store set payment-123 status=paid amount=10
    hash-store put payment-123 status refunded
    hash-store exists payment-123 status
    hash-store --config "localhost:7000,password=secret" get payment-123
    hash-store --debug get payment-123

Environment Variables:
    HASH_STORE_REDIS        - Connection string (see --config)
    HASH_STORE_ENDPOINTS    - Comma-separated host:port list
    HASH_STORE_DEBUG        - Enable debug logging (true/false)
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

import redis

from .config.settings import RedisOptions, settings
from .connection.shared import SharedConnection
from .store.hash_store import RedisHashStore


def field_value(text: str) -> Tuple[str, str]:
    """argparse type for FIELD=VALUE arguments."""
    field, sep, value = text.partition("=")
    if not sep or not field:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    return field, value


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="hash-store",
        description="Hash Store: read and write Redis hash-map records",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=settings.REDIS or None,
        help="Connection string, e.g. 'localhost:6379,password=x,ssl=false'",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    set_cmd = commands.add_parser("set", help="Write several fields at once")
    set_cmd.add_argument("key")
    set_cmd.add_argument("pairs", nargs="+", type=field_value, metavar="FIELD=VALUE")

    get_cmd = commands.add_parser("get", help="Read all fields")
    get_cmd.add_argument("key")

    put_cmd = commands.add_parser("put", help="Add or update a single field")
    put_cmd.add_argument("key")
    put_cmd.add_argument("field")
    put_cmd.add_argument("value")

    exists_cmd = commands.add_parser("exists", help="Check whether a field exists")
    exists_cmd.add_argument("key")
    exists_cmd.add_argument("field")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def run(store: RedisHashStore, args: argparse.Namespace) -> None:
    """Dispatch one parsed command to the store and print the result."""
    if args.command == "set":
        store.set_values(args.key, dict(args.pairs))
        print("OK")
    elif args.command == "get":
        for field, value in sorted(store.get_values(args.key).items()):
            print(f"{field}={value}")
    elif args.command == "put":
        store.add_or_update_key(args.key, args.field, args.value)
        print("OK")
    elif args.command == "exists":
        print("true" if store.key_exists(args.key, args.field) else "false")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    try:
        options = RedisOptions.parse(args.config) if args.config else settings.redis_options()
    except ValueError as e:
        parser.error(f"argument --config: {e}")

    logger.debug(f"Connecting to {', '.join(options.endpoints)}")

    try:
        connection = SharedConnection.open(options)
    except redis.RedisError as e:
        logger.error(f"Could not connect to Redis: {e}")
        return 1

    try:
        run(RedisHashStore(connection=connection), args)
    except redis.RedisError:
        # already logged by the store
        return 1
    finally:
        connection.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
