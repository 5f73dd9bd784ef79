"""Interactive terminal client for the remsh server.

Sends each typed line to the server and prints the reply. The server's
reply to one command is whatever arrives in a single read; there is no
length prefix or terminator on the wire.
"""

from __future__ import annotations

import logging
import socket
from typing import Callable

from remsh.config.settings import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
PROMPT = "> "


class RemoteShellClient:
    """TCP connection to a remsh server.

    Usage::

        with RemoteShellClient("127.0.0.1", 8080) as client:
            print(client.send_command("pwd"), end="")
    """

    def __init__(
        self,
        host: str,
        port: int,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._host = host
        self._port = port
        self._buffer_size = buffer_size
        self._sock: socket.socket | None = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """Open the TCP connection to the server."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect((self._host, self._port))
        except OSError as e:
            sock.close()
            raise ClientError(f"connect to {self._host}:{self._port} failed: {e}") from e
        self._sock = sock
        logger.info("Connected to %s:%d", self._host, self._port)

    def disconnect(self) -> None:
        """Close the connection. Safe to call multiple times."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def send_line(self, line: str) -> None:
        """Send one command line, adding the newline if missing."""
        if self._sock is None:
            raise ClientError("Not connected to server")
        if not line.endswith("\n"):
            line += "\n"
        try:
            self._sock.sendall(line.encode())
        except OSError as e:
            raise ClientError(f"send failed: {e}") from e

    def receive(self) -> str:
        """Read one reply. An empty string means the server closed the connection."""
        if self._sock is None:
            raise ClientError("Not connected to server")
        try:
            data = self._sock.recv(self._buffer_size - 1)
        except OSError as e:
            raise ClientError(f"receive failed: {e}") from e
        return data.decode("utf-8", errors="replace")

    def send_command(self, line: str) -> str:
        """Send a command line and return the server's reply."""
        self.send_line(line)
        return self.receive()

    def __enter__(self) -> RemoteShellClient:
        self.connect()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.disconnect()


class ClientError(Exception):
    """Raised when talking to the server fails."""


def interactive_loop(
    client: RemoteShellClient,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], object] = print,
) -> int:
    """Run the prompt/send/print loop until ``exit``, EOF, or server close.

    Args:
        client: A connected client.
        read_line: Prompt function returning one line without its newline
                   (``input`` by default). EOFError ends the loop.
        write: Output function taking one string (``print`` by default).

    Returns:
        The number of commands sent.
    """
    write(f"Connected to server {client.host}:{client.port}. Type '{EXIT_COMMAND}' to quit.")
    sent = 0
    try:
        while True:
            try:
                line = read_line(PROMPT)
            except EOFError:
                break
            reply = client.send_command(line)
            sent += 1
            if not reply:
                logger.info("Server closed the connection")
                break
            write(reply[:-1] if reply.endswith("\n") else reply)
            if line == EXIT_COMMAND:
                break
    finally:
        client.disconnect()
        write("Disconnected from server.")
    return sent
