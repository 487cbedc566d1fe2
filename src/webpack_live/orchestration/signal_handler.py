"""
Signal handling for a watch session.

SIGINT and SIGTERM only set the controller's shutdown event; the actual
teardown runs on the main thread once `run_forever` notices it.
"""

import logging
import signal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .watch_controller import WatchController

logger = logging.getLogger(__name__)


class SignalHandler:
    """
    Installs and restores SIGINT/SIGTERM handlers for one controller.
    """

    def __init__(self, controller: "WatchController"):
        self.controller = controller
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def setup_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to the controller."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._handle_signal)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._handle_signal)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for watch session")
        except ValueError as e:
            # Only the main thread may install handlers
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore the original signal handlers."""
        if not self._signal_handlers_set:
            return
        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def _handle_signal(self, signum: int, frame: Any) -> None:
        if self.controller.shutdown_requested.is_set():
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.info(f"Signal {signal.strsignal(signum)} received. Stopping watch session...")
        self.controller.request_shutdown()

    def __enter__(self) -> "SignalHandler":
        self.setup_signal_handlers()
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup_signal_handlers()
