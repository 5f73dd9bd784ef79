"""Tests for the shutdown flag and SIGINT handler."""

from __future__ import annotations

import signal
import threading
from unittest.mock import patch

from remsh.server.shutdown import SIGNAL_NOTICE, ShutdownController


class TestShutdownFlag:
    def test_starts_running(self) -> None:
        controller = ShutdownController()
        assert controller.running
        assert not controller.stopped

    def test_request_stop(self) -> None:
        controller = ShutdownController()
        controller.request_stop("test")
        assert controller.stopped
        assert not controller.running

    def test_stop_is_monotonic(self) -> None:
        controller = ShutdownController()
        controller.request_stop("first")
        controller.request_stop("second")
        assert controller.stopped


class TestSignalHandler:
    def test_handler_writes_notice_and_stops(self) -> None:
        controller = ShutdownController()
        with patch("os.write") as mock_write:
            controller._handle_signal(signal.SIGINT, None)
        mock_write.assert_called_once_with(1, SIGNAL_NOTICE)
        assert controller.stopped

    def test_handler_survives_closed_stdout(self) -> None:
        controller = ShutdownController()
        with patch("os.write", side_effect=OSError("bad fd")):
            controller._handle_signal(signal.SIGINT, None)
        assert controller.stopped

    def test_notice_text(self) -> None:
        assert SIGNAL_NOTICE == b"\nSIGINT received. Server shutting down.\n"

    def test_install_registers_sigint(self) -> None:
        controller = ShutdownController()
        with patch("signal.signal") as mock_signal:
            controller.install()
        mock_signal.assert_called_once_with(signal.SIGINT, controller._handle_signal)

    def test_installed_handler_receives_signal(self) -> None:
        controller = ShutdownController()
        previous = signal.getsignal(signal.SIGUSR1)
        try:
            controller.install(signal.SIGUSR1)
            with patch("os.write"):
                signal.raise_signal(signal.SIGUSR1)
            assert controller.stopped
        finally:
            signal.signal(signal.SIGUSR1, previous)

    def test_handler_does_not_wait_on_event_lock(self) -> None:
        controller = ShutdownController()
        # Hold the event's internal lock, as interrupted code might be doing
        with controller._stopped._cond:
            with patch("os.write"):
                worker = threading.Thread(
                    target=controller._handle_signal, args=(signal.SIGINT, None)
                )
                worker.start()
                worker.join(timeout=2.0)
            finished = not worker.is_alive()
        worker.join(timeout=2.0)
        assert finished
        assert controller.stopped
        assert not controller.running

    def test_request_stop_after_signal_is_noop(self) -> None:
        controller = ShutdownController()
        with patch("os.write"):
            controller._handle_signal(signal.SIGINT, None)
        controller.request_stop("exit command")
        assert controller.stopped
