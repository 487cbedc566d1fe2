"""
Orchestration of a watch session.

Components:
- ArtifactLocator: finds the primary emitted artifact of a build
- CommandResolver: picks the command to run after a successful build
- ProcessSupervisor: owns the single live child process
- WatchController: reacts to build notifications
- SignalHandler: routes SIGINT/SIGTERM to the controller
"""

from .artifact_locator import ArtifactLocator
from .command_resolver import DEFAULT_RUNTIME, CommandResolver
from .process_supervisor import ChildProcessHandle, ProcessSupervisor, popen_launcher
from .signal_handler import SignalHandler
from .watch_controller import WatchController

__all__ = [
    "ArtifactLocator",
    "CommandResolver",
    "DEFAULT_RUNTIME",
    "ChildProcessHandle",
    "ProcessSupervisor",
    "popen_launcher",
    "SignalHandler",
    "WatchController",
]
