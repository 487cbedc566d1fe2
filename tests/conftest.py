"""
Pytest configuration and shared fixtures for the webpack_live test suite.

This module provides the fakes the orchestration tests are built on: a
scripted build engine, a fake process launcher, and a reporter that records
everything written to it.
"""

import io
import shutil
import sys
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Tuple

import pytest
from rich.console import Console

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webpack_live.engine import AbstractBuildEngine, Watching  # noqa: E402
from webpack_live.models import (  # noqa: E402
    AssetInfo,
    BuildConfiguration,
    BuildEntry,
    BuildResult,
    ExecuteCommand,
)
from webpack_live.reporting import ConsoleReporter  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Fakes
# ============================================================================


class RecordingReporter(ConsoleReporter):
    """Reporter that keeps (level, text) pairs instead of printing."""

    def __init__(self):
        super().__init__(console=Console(file=io.StringIO()), raw_stream=io.BytesIO())
        self.events: List[Tuple[str, object]] = []
        self._events_lock = threading.Lock()

    def _record(self, level: str, payload) -> None:
        with self._events_lock:
            self.events.append((level, payload))

    def info(self, text):
        self._record("info", str(text))

    def warning(self, text):
        self._record("warning", str(text))

    def error(self, text):
        self._record("error", str(text))

    def plain(self, text):
        self._record("plain", str(text))

    def write_output(self, data: bytes):
        self._record("output", data)

    def clear(self):
        self._record("clear", "")

    def texts(self, level: str) -> List:
        with self._events_lock:
            return [payload for lvl, payload in self.events if lvl == level]


class FakeWatching(Watching):
    def __init__(self):
        self._closed = False

    def close(self):
        self._closed = True

    @property
    def closed(self):
        return self._closed


class FakeEngine(AbstractBuildEngine):
    """Build engine whose notifications are pushed by the test."""

    def __init__(self, on_watch=None):
        self.callback = None
        self.config = None
        self.watching = FakeWatching()
        self.on_watch = on_watch

    def watch(self, config, on_build):
        self.config = config
        self.callback = on_build
        if self.on_watch is not None:
            self.on_watch(self)
        return self.watching

    def emit(self, error=None, result=None):
        self.callback(error, result)


class FakeProcess:
    """Stand-in for subprocess.Popen that runs until told to stop."""

    _next_pid = 900000

    def __init__(self, command: ExecuteCommand, stdout: bytes = b"", stderr: bytes = b""):
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.command = command
        self.stdout = io.BytesIO(stdout)
        self.stderr = io.BytesIO(stderr)
        self.returncode: Optional[int] = None
        self.terminate_calls = 0
        self._done = threading.Event()

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        self._done.wait(timeout)
        return self.returncode

    def finish(self, code: int) -> None:
        if self.returncode is None:
            self.returncode = code
        self._done.set()

    def terminate(self):
        self.terminate_calls += 1
        self.finish(-15)

    def kill(self):
        self.finish(-9)


class FakeLauncher:
    """Records every launch and hands out FakeProcess objects."""

    def __init__(self, stdout: bytes = b"", stderr: bytes = b""):
        self.stdout = stdout
        self.stderr = stderr
        self.processes: List[FakeProcess] = []

    def __call__(self, command: ExecuteCommand) -> FakeProcess:
        process = FakeProcess(command, self.stdout, self.stderr)
        self.processes.append(process)
        return process

    def running(self) -> List[FakeProcess]:
        return [p for p in self.processes if p.returncode is None]


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def make_engine():
    """Factory for scripted engines, optionally reacting to watch()."""
    return FakeEngine


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def make_launcher():
    """Factory for launchers whose processes produce the given output."""
    return FakeLauncher


@pytest.fixture
def no_descendants(monkeypatch):
    """Keep psutil away from the fake PIDs handed out by FakeLauncher."""
    monkeypatch.setattr(
        "webpack_live.orchestration.process_supervisor.ProcessSupervisor._get_descendants",
        staticmethod(lambda pid: []),
    )


@pytest.fixture
def dist_config():
    """Single-target configuration writing to /dist."""
    return BuildConfiguration(entries=[BuildEntry(output_path="/dist", context="")])


@pytest.fixture
def build_result():
    """A clean build with one entry-point emitting bundle.js."""
    return BuildResult(
        time=42,
        hash="abc123",
        entrypoints={"main": ["bundle.js"]},
        assets=[
            AssetInfo(name="bundle.js", size=1024, emitted=True),
            AssetInfo(name="cached.js", size=10, emitted=False),
        ],
    )


@pytest.fixture
def sample_stats():
    """webpack 5 style stats for a two-target build."""
    return {
        "hash": "parenthash",
        "time": 120,
        "errors": [],
        "warnings": [],
        "children": [
            {
                "hash": "aaa",
                "time": 80,
                "outputPath": "/proj/dist",
                "errors": [],
                "warnings": [{"message": "big bundle", "moduleName": "./index.js"}],
                "entrypoints": {"main": {"name": "main", "assets": [{"name": "main.js", "size": 300}]}},
                "assets": [{"name": "main.js", "size": 300, "emitted": True}],
            },
            {
                "hash": "bbb",
                "time": 40,
                "outputPath": "/proj/dist",
                "errors": [],
                "warnings": [],
                "entrypoints": {"bar": {"name": "bar", "assets": [{"name": "bar.js", "size": 120}]}},
                "assets": [{"name": "bar.js", "size": 120, "emitted": False}],
            },
        ],
    }
