"""Command-line interface for remsh.

Provides the main entry point for running the command server or
connecting to one with the interactive client.
"""

from __future__ import annotations

import argparse
import ipaddress
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_PORT = 65535


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="remsh",
        description="Minimal remote command-execution server and client",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/remsh.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the command server")
    serve_parser.add_argument(
        "--host", type=str, default=None,
        help="Interface to bind (default from config: 0.0.0.0)",
    )
    serve_parser.add_argument(
        "--port", type=str, default=None,
        help="TCP port to listen on (default from config: 8080)",
    )

    connect_parser = subparsers.add_parser("connect", help="Open an interactive client session")
    connect_parser.add_argument(
        "server_ip", type=str, nargs="?", default=None,
        help="IPv4 address of the server (default from config: 127.0.0.1)",
    )
    connect_parser.add_argument(
        "port", type=str, nargs="?", default=None,
        help="Server TCP port (default from config: 8080)",
    )

    return parser.parse_args(argv)


def parse_port(value: str) -> int | None:
    """Return the port number, or None if ``value`` is not in 1..65535."""
    try:
        port = int(value, 10)
    except ValueError:
        return None
    if port <= 0 or port > MAX_PORT:
        return None
    return port


def _serve(settings, args) -> int:
    """Bind the server and run the accept loop until shutdown."""
    from remsh.server.listener import CommandServer, ServerError

    config = settings.server
    updates: dict[str, object] = {}
    if args.host:
        updates["host"] = args.host
    if args.port is not None:
        port = parse_port(args.port)
        if port is None:
            print("Invalid port number.", file=sys.stderr)
            return 1
        updates["port"] = port
    if updates:
        config = config.model_copy(update=updates)

    server = CommandServer(config)
    try:
        server.bind()
    except ServerError as e:
        logger.error("%s", e)
        return 1
    server.shutdown.install()
    server.serve_forever()
    return 0


def _connect(settings, args) -> int:
    """Run the interactive client against ``server_ip:port``.

    Either may be omitted on the command line, in which case the
    ``client`` section of the configuration supplies it.
    """
    from remsh.client.terminal import ClientError, RemoteShellClient, interactive_loop

    host = args.server_ip if args.server_ip is not None else settings.client.host
    port_value = args.port if args.port is not None else str(settings.client.port)

    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        print("Invalid server address.", file=sys.stderr)
        return 1
    port = parse_port(port_value)
    if port is None:
        print("Invalid port number.", file=sys.stderr)
        return 1

    client = RemoteShellClient(
        host, port, buffer_size=settings.client.buffer_size,
    )
    try:
        client.connect()
        interactive_loop(client)
    except ClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the remsh CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 1

    from remsh.config.settings import load_settings
    from remsh.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Starting command server")
        return _serve(settings, args)

    elif args.command == "connect":
        return _connect(settings, args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
