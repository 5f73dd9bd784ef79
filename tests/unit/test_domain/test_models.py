"""Tests for the core domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from remsh.domain.models import ArgumentList, OutputBuffer, SessionState


class TestArgumentList:
    def test_command_and_arguments(self) -> None:
        args = ArgumentList(tokens=("ls", "-l", "/"))
        assert args.command == "ls"
        assert args.arguments == ("-l", "/")
        assert len(args) == 3
        assert args[2] == "/"

    def test_empty(self) -> None:
        args = ArgumentList()
        assert args.command is None
        assert args.arguments == ()
        assert args.is_empty

    def test_list_input_is_coerced(self) -> None:
        assert ArgumentList(tokens=["pwd"]).tokens == ("pwd",)

    def test_frozen(self) -> None:
        args = ArgumentList(tokens=("pwd",))
        with pytest.raises(ValidationError):
            args.tokens = ("cd",)  # type: ignore[misc]


class TestOutputBuffer:
    def test_holds_capacity_minus_one(self) -> None:
        buf = OutputBuffer(8)
        assert buf.limit == 7
        assert buf.write(b"0123456789") == 7
        assert buf.value == b"0123456"
        assert buf.is_full
        assert buf.remaining == 0

    def test_writes_after_full_are_dropped(self) -> None:
        buf = OutputBuffer(4)
        buf.write(b"abc")
        assert buf.write(b"d") == 0
        assert bytes(buf) == b"abc"

    def test_set_message_replaces_content(self) -> None:
        buf = OutputBuffer(64)
        buf.write(b"partial output")
        buf.set_message("Error: Command failed to execute.\n")
        assert buf.text() == "Error: Command failed to execute.\n"

    def test_set_message_is_bounded(self) -> None:
        buf = OutputBuffer(5)
        buf.set_message("Exiting shell...\n")
        assert buf.value == b"Exit"

    def test_clear(self) -> None:
        buf = OutputBuffer(16)
        buf.write(b"data")
        buf.clear()
        assert len(buf) == 0
        assert buf.remaining == 15

    def test_capacity_too_small(self) -> None:
        with pytest.raises(ValueError, match="at least 2"):
            OutputBuffer(1)


class TestSessionState:
    def test_values(self) -> None:
        assert [s.value for s in SessionState] == [
            "awaiting-command",
            "dispatching",
            "responding",
            "closed",
        ]
