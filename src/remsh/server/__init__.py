"""Remote command server for remsh.

Accepts one TCP client at a time and executes the command lines it
sends, either as builtins inside the server process or as external
programs whose combined output is captured and returned.

Public API:
    CommandServer -- Listening socket and accept loop
    Session -- Per-client read-dispatch-respond loop
    BuiltinRegistry -- cd, pwd, echo, exit
    CommandExecutor -- fork/exec with bounded output capture
    ShutdownController -- Shutdown flag and SIGINT handler
    tokenize -- Command line to ArgumentList
"""

from remsh.server.builtins import BuiltinRegistry
from remsh.server.executor import CommandExecutor
from remsh.server.listener import CommandServer, ServerError
from remsh.server.session import Session
from remsh.server.shutdown import ShutdownController
from remsh.server.tokenizer import tokenize

__all__ = [
    "BuiltinRegistry",
    "CommandExecutor",
    "CommandServer",
    "ServerError",
    "Session",
    "ShutdownController",
    "tokenize",
]
