"""TCP listener and accept loop for the remsh server.

Accepts one client at a time and runs its whole session before the
next accept. Both loops stop once the shutdown flag is set, either by
the ``exit`` builtin or by SIGINT.
"""

from __future__ import annotations

import logging
import socket

from remsh.config.settings import ServerConfig
from remsh.server.builtins import BuiltinRegistry
from remsh.server.executor import CommandExecutor
from remsh.server.session import Session
from remsh.server.shutdown import ShutdownController

logger = logging.getLogger(__name__)


class ServerError(Exception):
    """Raised when the listening socket cannot be set up."""


class CommandServer:
    """Single-session remote command server.

    Usage::

        with CommandServer(ServerConfig(port=8080)) as server:
            server.shutdown.install()
            server.serve_forever()
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        shutdown: ShutdownController | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._config = config or ServerConfig()
        self._shutdown = shutdown or ShutdownController()
        self._executor = executor or CommandExecutor(buffer_size=self._config.buffer_size)
        self._builtins = BuiltinRegistry(self._shutdown, buffer_size=self._config.buffer_size)
        self._sock: socket.socket | None = None
        self._sessions_served = 0

    @property
    def shutdown(self) -> ShutdownController:
        return self._shutdown

    @property
    def is_bound(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> tuple[str, int]:
        """The bound (host, port); useful when binding to port 0."""
        if self._sock is None:
            raise ServerError("Server socket is not bound")
        return self._sock.getsockname()[:2]

    @property
    def sessions_served(self) -> int:
        return self._sessions_served

    def bind(self) -> None:
        """Create, bind and listen on the server socket.

        Python sockets are non-inheritable, so spawned commands never
        hold the listening or client descriptors open.
        """
        if self._sock is not None:
            return
        host, port = self._config.host, self._config.port
        backlog = self._config.backlog or socket.SOMAXCONN
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(backlog)
            sock.settimeout(self._config.accept_poll_interval)
        except OSError as e:
            sock.close()
            raise ServerError(f"Cannot listen on {host}:{port}: {e}") from e
        self._sock = sock
        logger.info("Server listening on %s:%d (backlog=%d)", *self.address, backlog)

    def serve_forever(self) -> None:
        """Accept and serve clients one at a time until shutdown."""
        self.bind()
        assert self._sock is not None
        try:
            while self._shutdown.running:
                try:
                    conn, addr = self._sock.accept()
                except socket.timeout:
                    continue
                except OSError as e:
                    if not self._shutdown.running:
                        break
                    logger.error("accept failed: %s", e)
                    continue
                self._serve_client(conn, addr)
        finally:
            self.close()
        logger.info("Server stopped after %d sessions", self._sessions_served)

    def _serve_client(self, conn: socket.socket, addr: tuple[str, int]) -> None:
        peer = f"{addr[0]}:{addr[1]}"
        logger.info("Client connected: %s", peer)
        with conn:
            session = Session(
                conn,
                shutdown=self._shutdown,
                builtins=self._builtins,
                executor=self._executor,
                buffer_size=self._config.buffer_size,
                max_args=self._config.max_args,
                peer=peer,
            )
            session.run()
        self._sessions_served += 1
        logger.info("Client disconnected: %s", peer)

    def close(self) -> None:
        """Close the listening socket. Safe to call more than once."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None
            logger.debug("Listening socket closed")

    def __enter__(self) -> CommandServer:
        self.bind()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()
