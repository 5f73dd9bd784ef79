"""Shared test fixtures for the remsh test suite.

Provides the server components wired together the way the listener
wires them, a connected socket pair standing in for a client
connection, and an isolated working directory for builtins that
change it.
"""

from __future__ import annotations

import socket
from pathlib import Path
from typing import Iterator

import pytest

from remsh.server.builtins import BuiltinRegistry
from remsh.server.executor import CommandExecutor
from remsh.server.shutdown import ShutdownController


# ---------------------------------------------------------------------------
# Server component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def shutdown() -> ShutdownController:
    """A fresh shutdown flag in the running state."""
    return ShutdownController()


@pytest.fixture
def registry(shutdown: ShutdownController) -> BuiltinRegistry:
    """A builtin registry with the reference 1024-byte buffer."""
    return BuiltinRegistry(shutdown, buffer_size=1024)


@pytest.fixture
def executor() -> CommandExecutor:
    """A command executor with the reference 1024-byte buffer."""
    return CommandExecutor(buffer_size=1024)


# ---------------------------------------------------------------------------
# Environment fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside tmp_path; the previous cwd is restored afterwards."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def socket_pair() -> Iterator[tuple[socket.socket, socket.socket]]:
    """A connected (server_side, client_side) socket pair."""
    server_side, client_side = socket.socketpair()
    server_side.settimeout(5.0)
    client_side.settimeout(5.0)
    yield server_side, client_side
    server_side.close()
    client_side.close()
