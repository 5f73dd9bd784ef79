"""Process-wide shutdown flag.

Toggled by SIGINT or by the ``exit`` builtin, and checked by the accept
loop and the session loop at their iteration boundaries.
"""

from __future__ import annotations

import logging
import os
import signal
import threading
from types import FrameType

logger = logging.getLogger(__name__)

SIGNAL_NOTICE = b"\nSIGINT received. Server shutting down.\n"


class ShutdownController:
    """Monotonic running -> stopped flag shared by the server loops.

    Backed by a threading.Event, so it is safe to share if connections
    are ever handled outside the main thread. Once stopped it never
    reverts. The signal handler only stores a plain attribute and never
    touches the event or its lock.
    """

    def __init__(self) -> None:
        self._stopped = threading.Event()
        self._signalled = False

    @property
    def running(self) -> bool:
        return not (self._signalled or self._stopped.is_set())

    @property
    def stopped(self) -> bool:
        return not self.running

    def request_stop(self, reason: str = "requested") -> None:
        """Move the flag to stopped. Repeated calls are no-ops."""
        if self.stopped:
            return
        self._stopped.set()
        logger.info("Shutdown requested (%s)", reason)

    def install(self, signum: int = signal.SIGINT) -> None:
        """Route ``signum`` to the shutdown handler.

        Must be called from the main thread.
        """
        signal.signal(signum, self._handle_signal)
        logger.debug("Installed shutdown handler for %s", signal.Signals(signum).name)

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        # Only a direct write and a plain attribute store happen here; no locks.
        try:
            os.write(1, SIGNAL_NOTICE)
        except OSError:
            pass
        self._signalled = True
