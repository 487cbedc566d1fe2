"""
Unit tests for session signal handling.
"""

import signal
import threading
from unittest.mock import Mock

import pytest

from webpack_live.orchestration import SignalHandler


@pytest.fixture
def controller():
    controller = Mock()
    controller.shutdown_requested = threading.Event()
    controller.request_shutdown.side_effect = controller.shutdown_requested.set
    return controller


@pytest.mark.unit
class TestSignalHandler:
    """Test cases for SignalHandler."""

    def test_handlers_installed_and_restored(self, controller):
        original = signal.getsignal(signal.SIGINT)

        with SignalHandler(controller) as handler:
            assert signal.getsignal(signal.SIGINT) == handler._handle_signal
            assert signal.getsignal(signal.SIGTERM) == handler._handle_signal

        assert signal.getsignal(signal.SIGINT) == original

    def test_signal_requests_shutdown_once(self, controller):
        handler = SignalHandler(controller)

        handler._handle_signal(signal.SIGINT, None)
        handler._handle_signal(signal.SIGINT, None)

        controller.request_shutdown.assert_called_once_with()

    def test_setup_outside_main_thread(self, controller):
        handler = SignalHandler(controller)
        worker = threading.Thread(target=handler.setup_signal_handlers)

        worker.start()
        worker.join()

        assert handler._signal_handlers_set is False
