"""External command execution with bounded output capture.

Each command runs in a forked child whose stdout and stderr are
redirected into a pipe. The parent drains the pipe into a fixed-size
OutputBuffer and always reaps the child before returning.
"""

from __future__ import annotations

import logging
import os
import signal
from typing import NoReturn

from remsh.config.settings import DEFAULT_BUFFER_SIZE
from remsh.domain.models import ArgumentList, OutputBuffer

logger = logging.getLogger(__name__)

NO_COMMAND_MESSAGE = "Error: No command provided.\n"
PIPE_FAILED_MESSAGE = "Error: Failed to create pipe.\n"
FORK_FAILED_MESSAGE = "Error: Failed to fork.\n"
COMMAND_FAILED_MESSAGE = "Error: Command failed to execute.\n"

# Exit status used by the child when execvp fails
EXEC_FAILURE_STATUS = 1


class CommandExecutor:
    """Runs external programs and captures their combined output.

    Usage::

        executor = CommandExecutor(buffer_size=1024)
        output = executor.execute(ArgumentList(tokens=("ls", "-l")))
        conn.sendall(output.value)

    Output beyond ``buffer_size - 1`` bytes is dropped silently. A child
    that exits with a non-zero status has its output replaced by a
    generic failure message, so the client never sees the program's
    own diagnostics.
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self._buffer_size = buffer_size

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    def execute(self, args: ArgumentList) -> OutputBuffer:
        """Run ``args`` as an external program and return its output."""
        output = OutputBuffer(self._buffer_size)

        if args.command is None:
            output.set_message(NO_COMMAND_MESSAGE)
            return output

        # os.pipe() descriptors are created non-inheritable (close-on-exec)
        try:
            read_fd, write_fd = os.pipe()
        except OSError as e:
            logger.error("Failed to create pipe for %s: %s", args.command, e)
            output.set_message(PIPE_FAILED_MESSAGE)
            return output

        try:
            pid = os.fork()
        except OSError as e:
            logger.error("Failed to fork for %s: %s", args.command, e)
            os.close(read_fd)
            os.close(write_fd)
            output.set_message(FORK_FAILED_MESSAGE)
            return output

        if pid == 0:
            # Child process
            _exec_child(list(args.tokens), read_fd, write_fd)

        # Parent process
        os.close(write_fd)
        try:
            self._drain(read_fd, output)
        finally:
            os.close(read_fd)

        _, status = os.waitpid(pid, 0)

        if os.WIFEXITED(status):
            exit_code = os.WEXITSTATUS(status)
            logger.debug(
                "Command %s (pid=%d) exited with %d, %d bytes captured",
                args.command, pid, exit_code, len(output),
            )
            if exit_code != 0:
                output.set_message(COMMAND_FAILED_MESSAGE)
        elif os.WIFSIGNALED(status):
            # Usually SIGPIPE after the read end was closed on a full buffer
            logger.debug(
                "Command %s (pid=%d) killed by signal %d, %d bytes captured",
                args.command, pid, os.WTERMSIG(status), len(output),
            )
        return output

    @staticmethod
    def _drain(read_fd: int, output: OutputBuffer) -> None:
        """Read from the pipe until EOF or until the buffer is full."""
        while not output.is_full:
            try:
                chunk = os.read(read_fd, output.remaining)
            except OSError as e:
                logger.warning("Error reading command output: %s", e)
                break
            if not chunk:
                break
            output.write(chunk)
        if output.is_full:
            logger.debug("Output truncated at %d bytes", output.limit)


def _exec_child(argv: list[str], read_fd: int, write_fd: int) -> NoReturn:
    """Redirect stdout/stderr into the pipe and exec ``argv``. Never returns."""
    try:
        os.close(read_fd)
        os.dup2(write_fd, 1)
        os.dup2(write_fd, 2)
        os.close(write_fd)
        # Python ignores SIGPIPE; the program should die on a closed pipe
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
        os.execvp(argv[0], argv)
    except OSError as e:
        try:
            os.write(2, f"execvp: {e.strerror or e}\n".encode())
        except OSError:
            pass
    finally:
        os._exit(EXEC_FAILURE_STATUS)
