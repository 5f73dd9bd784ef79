"""Per-client session loop.

Reads one command per iteration from the connection, routes it to the
builtin registry or the command executor, and writes one response back.
"""

from __future__ import annotations

import logging
import socket

from remsh.config.settings import DEFAULT_BUFFER_SIZE, DEFAULT_MAX_ARGS
from remsh.domain.models import SessionState
from remsh.server.builtins import BuiltinRegistry
from remsh.server.executor import CommandExecutor
from remsh.server.shutdown import ShutdownController
from remsh.server.tokenizer import tokenize

logger = logging.getLogger(__name__)


class Session:
    """Serves one connected client until disconnect or shutdown.

    Cycle: awaiting-command -> dispatching -> responding -> awaiting-command,
    ending in closed. Reads block with no timeout; the shutdown flag is only
    checked between iterations. The caller owns (and closes) ``conn``.
    """

    def __init__(
        self,
        conn: socket.socket,
        shutdown: ShutdownController,
        builtins: BuiltinRegistry,
        executor: CommandExecutor,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        max_args: int = DEFAULT_MAX_ARGS,
        peer: str = "client",
    ) -> None:
        self._conn = conn
        self._shutdown = shutdown
        self._builtins = builtins
        self._executor = executor
        self._buffer_size = buffer_size
        self._max_args = max_args
        self._peer = peer
        self._state = SessionState.AWAITING_COMMAND
        self._commands_handled = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def commands_handled(self) -> int:
        return self._commands_handled

    def run(self) -> None:
        """Run the read-dispatch-respond loop to completion."""
        try:
            while self._shutdown.running:
                self._state = SessionState.AWAITING_COMMAND
                data = self._read_command()
                if not data:
                    break
                if not self._dispatch(data):
                    break
                self._commands_handled += 1
        finally:
            self._state = SessionState.CLOSED
            logger.debug(
                "Session with %s closed after %d commands", self._peer, self._commands_handled
            )

    def _read_command(self) -> bytes:
        """Read one chunk; an empty result means the client is gone."""
        try:
            return self._conn.recv(self._buffer_size - 1)
        except OSError as e:
            logger.warning("Read from %s failed: %s", self._peer, e)
            return b""

    def _dispatch(self, data: bytes) -> bool:
        """Handle one command line. Returns False if the connection broke."""
        self._state = SessionState.DISPATCHING
        args = tokenize(data, self._max_args)
        logger.info("Command from %s: %s", self._peer, " ".join(args.tokens) or "<empty>")

        try:
            if self._builtins.is_builtin(args):
                self._state = SessionState.RESPONDING
                self._builtins.handle(args, self._conn)
                return True

            output = self._executor.execute(args)
            self._state = SessionState.RESPONDING
            self._conn.sendall(output.value)
        except OSError as e:
            logger.warning("Write to %s failed: %s", self._peer, e)
            return False
        return True
