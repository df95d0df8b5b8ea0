"""Graceful shutdown handling for the scheduler loop.

The first SIGINT/SIGTERM asks the loop to stop after the current job;
a second one exits immediately.
"""

import signal
import sys
import threading
from typing import Optional

from catalog.logging_config import get_logger

__all__ = ["ShutdownHandler"]

logger = get_logger("shutdown")


class ShutdownHandler:
    """Tracks a shutdown request raised by a signal.

    Usage:
        handler = ShutdownHandler().install()
        while not handler.shutdown_requested:
            ...
        handler.uninstall()
    """

    def __init__(self) -> None:
        self._shutdown_requested = threading.Event()
        self._original_sigint = None
        self._original_sigterm = None
        self._installed = False

    def install(self) -> "ShutdownHandler":
        """Install signal handlers. Returns self for chaining."""
        if self._installed:
            return self

        self._original_sigint = signal.getsignal(signal.SIGINT)
        self._original_sigterm = signal.getsignal(signal.SIGTERM)

        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

        self._installed = True
        return self

    def uninstall(self) -> None:
        """Restore original signal handlers."""
        if not self._installed:
            return

        if self._original_sigint is not None:
            signal.signal(signal.SIGINT, self._original_sigint)
        if self._original_sigterm is not None:
            signal.signal(signal.SIGTERM, self._original_sigterm)

        self._installed = False

    def _handle_signal(self, signum: int, frame) -> None:
        signal_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
        logger.warning(f"Received {signal_name} - stopping after the current job (repeat to force quit)")
        self.request_shutdown()
        signal.signal(signum, self._force_exit)

    def _force_exit(self, signum: int, frame) -> None:
        logger.error("Force quitting")
        sys.exit(1)

    def request_shutdown(self) -> None:
        self._shutdown_requested.set()

    @property
    def shutdown_requested(self) -> bool:
        """Check if shutdown has been requested."""
        return self._shutdown_requested.is_set()

    def wait(self, timeout: Optional[float]) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on shutdown."""
        return self._shutdown_requested.wait(timeout)

    def reset(self) -> None:
        """Reset shutdown state (for testing or reuse)."""
        self._shutdown_requested.clear()
