"""Core domain models for remsh.

These models represent the data flowing through one session iteration:
the tokenized argument list produced from a command line, the bounded
output buffer holding a command's response, and the session states.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SessionState(str, enum.Enum):
    """Where a client session is in its read-dispatch-respond cycle."""

    AWAITING_COMMAND = "awaiting-command"
    DISPATCHING = "dispatching"
    RESPONDING = "responding"
    CLOSED = "closed"  # Terminal


# ---------------------------------------------------------------------------
# Command models
# ---------------------------------------------------------------------------


class ArgumentList(BaseModel):
    """Tokens decoded from one command line.

    The first token is the command name, the rest are its positional
    arguments. An empty list means no command was given.
    """

    model_config = ConfigDict(frozen=True)

    tokens: tuple[str, ...] = Field(
        default=(), description="Command name followed by its arguments"
    )

    @property
    def command(self) -> str | None:
        """The command name, or None when the line held no tokens."""
        return self.tokens[0] if self.tokens else None

    @property
    def arguments(self) -> tuple[str, ...]:
        return self.tokens[1:]

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> str:
        return self.tokens[index]


class OutputBuffer:
    """Fixed-capacity byte buffer for one command's response.

    Holds at most ``capacity - 1`` bytes; the last slot is kept free the
    way a terminated C buffer would be. Writes beyond that are silently
    dropped, with no truncation marker.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 2:
            raise ValueError(f"Output buffer capacity must be at least 2, got {capacity}")
        self._capacity = capacity
        self._data = bytearray()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def limit(self) -> int:
        """Maximum number of bytes the buffer will hold."""
        return self._capacity - 1

    @property
    def remaining(self) -> int:
        return self.limit - len(self._data)

    @property
    def is_full(self) -> bool:
        return self.remaining <= 0

    def write(self, data: bytes) -> int:
        """Append as much of ``data`` as fits. Returns the bytes kept."""
        kept = data[: self.remaining]
        self._data.extend(kept)
        return len(kept)

    def set_message(self, message: str) -> None:
        """Replace the buffer content with a text message."""
        self._data.clear()
        self.write(message.encode("utf-8", errors="surrogateescape"))

    def clear(self) -> None:
        self._data.clear()

    @property
    def value(self) -> bytes:
        return bytes(self._data)

    def text(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def __bytes__(self) -> bytes:
        return self.value

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"OutputBuffer(capacity={self._capacity}, size={len(self._data)})"
