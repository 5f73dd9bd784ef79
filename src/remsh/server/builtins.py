"""Built-in commands run inside the server process.

These commands read or change state of the server process itself
(working directory, shutdown flag), so they cannot run in a child.
The working directory is process-wide: a ``cd`` persists across
commands and across client sessions.
"""

from __future__ import annotations

import logging
import os
import socket
from typing import Callable

from remsh.config.settings import DEFAULT_BUFFER_SIZE
from remsh.domain.models import ArgumentList, OutputBuffer
from remsh.server.shutdown import ShutdownController

logger = logging.getLogger(__name__)

CD_NO_DIRECTORY_MESSAGE = "cd: No specified directory\n"
CD_FAILED_MESSAGE = "cd: No such directory\n"
PWD_FAILED_MESSAGE = "pwd: Error getting current directory\n"
EXIT_MESSAGE = "Exiting shell...\n"

BuiltinHandler = Callable[["BuiltinRegistry", ArgumentList, OutputBuffer], None]

BUILTINS: dict[str, BuiltinHandler] = {}


def register_builtin(name: str) -> Callable[[BuiltinHandler], BuiltinHandler]:
    """Decorator adding a handler to the builtin table under ``name``."""

    def decorator(func: BuiltinHandler) -> BuiltinHandler:
        BUILTINS[name] = func
        return func

    return decorator


class BuiltinRegistry:
    """Recognizes and runs the fixed set of builtin commands.

    Membership is an exact, case-sensitive match on the first token.
    Unlike external commands, a builtin's response is written to the
    client connection here, by :meth:`handle`.
    """

    def __init__(
        self,
        shutdown: ShutdownController,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._shutdown = shutdown
        self._buffer_size = buffer_size

    @property
    def shutdown(self) -> ShutdownController:
        return self._shutdown

    @staticmethod
    def names() -> frozenset[str]:
        return frozenset(BUILTINS)

    def is_builtin(self, args: ArgumentList) -> bool:
        return args.command is not None and args.command in BUILTINS

    def run(self, args: ArgumentList) -> OutputBuffer:
        """Execute a builtin and return its response without sending it."""
        if not self.is_builtin(args):
            raise KeyError(f"Not a builtin: {args.command!r}")
        output = OutputBuffer(self._buffer_size)
        BUILTINS[args.command](self, args, output)  # type: ignore[index]
        return output

    def handle(self, args: ArgumentList, conn: socket.socket) -> OutputBuffer:
        """Execute a builtin and write its response to ``conn``.

        Raises:
            OSError: If writing to the connection fails.
        """
        output = self.run(args)
        conn.sendall(output.value)
        logger.debug("Builtin %s replied with %d bytes", args.command, len(output))
        return output


# ---------------------------------------------------------------------------
# Builtin implementations
# ---------------------------------------------------------------------------


@register_builtin("cd")
def _builtin_cd(registry: BuiltinRegistry, args: ArgumentList, output: OutputBuffer) -> None:
    if not args.arguments:
        output.set_message(CD_NO_DIRECTORY_MESSAGE)
        return
    target = args.arguments[0]
    try:
        os.chdir(target)
    except OSError as e:
        logger.info("cd %s failed: %s", target, e)
        output.set_message(CD_FAILED_MESSAGE)
        return
    logger.info("Working directory changed to %s", os.getcwd())
    output.set_message(f"Changed directory to {target}\n")


@register_builtin("pwd")
def _builtin_pwd(registry: BuiltinRegistry, args: ArgumentList, output: OutputBuffer) -> None:
    try:
        cwd = os.getcwd()
    except OSError as e:
        logger.warning("getcwd failed: %s", e)
        output.set_message(PWD_FAILED_MESSAGE)
        return
    # A path that does not fit with its newline is an error, not a truncated path
    if len(os.fsencode(cwd)) + 1 > output.limit:
        logger.warning("Working directory path too long for reply (%d bytes)", len(os.fsencode(cwd)))
        output.set_message(PWD_FAILED_MESSAGE)
        return
    output.set_message(f"{cwd}\n")


@register_builtin("echo")
def _builtin_echo(registry: BuiltinRegistry, args: ArgumentList, output: OutputBuffer) -> None:
    # Each argument is followed by one space: "echo a b" -> "a b \n"
    output.clear()
    for arg in args.arguments:
        output.write(os.fsencode(arg))
        output.write(b" ")
    output.write(b"\n")


@register_builtin("exit")
def _builtin_exit(registry: BuiltinRegistry, args: ArgumentList, output: OutputBuffer) -> None:
    output.set_message(EXIT_MESSAGE)
    registry.shutdown.request_stop("exit command")
