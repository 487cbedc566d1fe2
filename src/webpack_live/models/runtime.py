"""
Runtime data models.

This module contains the options of a watch session, the controller's
state machine states, and the timeouts used across the package.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .command import ExecuteCommand


class WatchState(Enum):
    """States of the watch loop controller."""
    IDLE = "idle"
    BUILDING = "building"
    FAILED = "failed"
    REPORTED = "reported"
    STOPPED = "stopped"


@dataclass
class SessionOptions:
    """
    Options for one watch session, as given on the command line.
    """

    # Path to the bundler configuration file.
    config_path: Path = Path("./webpack.config.js")
    # Run the artifact from the in-memory store instead of from disk.
    in_memory: bool = False
    # Command used for every build instead of running the artifact.
    execute_command: Optional[ExecuteCommand] = None
    # Program capable of executing the artifact.
    runtime: str = "node"
    # Command line that invokes the bundler CLI.
    webpack_command: List[str] = field(default_factory=lambda: ["npx", "webpack"])
    # Clear the terminal at startup.
    clear_console: bool = True


class TimeoutConstants:
    """
    Centralized timeout configuration.
    """
    # Watch worker queue polling
    QUEUE_GET_TIMEOUT = 0.5
    # Longest a batch of changes is held back while changes keep arriving
    MAX_AGGREGATE_WAIT = 5.0

    # Joining helper threads on close
    OBSERVER_JOIN_TIMEOUT = 5.0
    WORKER_JOIN_TIMEOUT = 10.0
    STREAM_JOIN_TIMEOUT = 2.0

    # Child process termination at shutdown
    TERMINATION_GRACEFUL_TIMEOUT = 3
    TERMINATION_FORCE_TIMEOUT = 2
