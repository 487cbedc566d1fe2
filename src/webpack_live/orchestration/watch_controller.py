"""
The watch loop controller.

On every build notification the controller kills the previous child,
classifies the result, reports it, and, for a successful build, resolves
and starts the next command. Failures are contained in their cycle; the
subscription stays open for the next change.
"""

import logging
import threading
from typing import Optional

from ..engine import AbstractBuildEngine, Watching
from ..models import BuildConfiguration, BuildResult, ExecuteCommand, WatchState
from ..reporting import ConsoleReporter, format_problems, format_report_list
from ..validation import (
    ArtifactNotFound,
    EngineFailure,
    ErrorSeverity,
    StoreReadFailure,
    handle_subprocess_error,
)
from .command_resolver import CommandResolver
from .process_supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)


class WatchController:
    """
    Drives one watch session.

    Args:
        config: The resolved build configuration
        engine: Build engine to subscribe to
        supervisor: Owner of the child process slot
        resolver: Resolves the command to run after each build
        reporter: Console sinks
        execute_command: Command used for every build instead of the artifact
        in_memory: Run the artifact from the in-memory store
    """

    def __init__(self, config: BuildConfiguration, engine: AbstractBuildEngine,
                 supervisor: ProcessSupervisor, resolver: CommandResolver,
                 reporter: ConsoleReporter,
                 execute_command: Optional[ExecuteCommand] = None,
                 in_memory: bool = False):
        self.config = config
        self.engine = engine
        self.supervisor = supervisor
        self.resolver = resolver
        self.reporter = reporter
        self.execute_command = execute_command
        self.in_memory = in_memory

        self.state = WatchState.IDLE
        self.cycles = 0
        self.shutdown_requested = threading.Event()
        self._watching: Optional[Watching] = None

    def start(self) -> None:
        """Subscribe to the build engine."""
        if self.state is not WatchState.IDLE:
            raise RuntimeError(f"Cannot start a watch session in state {self.state.value}")
        self.state = WatchState.BUILDING
        self._watching = self.engine.watch(self.config, self.on_build)

    def on_build(self, error: Optional[EngineFailure], result: Optional[BuildResult]) -> None:
        """Process one build notification."""
        if self.state is WatchState.STOPPED:
            logger.debug("Ignoring build notification after shutdown")
            return
        self.cycles += 1
        self.state = WatchState.BUILDING

        # Before anything else, so a broken build never leaves a stale process
        self.supervisor.kill_current()

        if error is not None:
            self._report_engine_failure(error)
            self.state = WatchState.FAILED
            return

        if result is None:
            self.reporter.error("build engine reported neither a result nor an error")
            self.state = WatchState.FAILED
            return

        if result.has_errors:
            self.reporter.error(format_problems(result.all_errors()))
            self.state = WatchState.FAILED
            return

        if result.has_warnings:
            self.reporter.warning(format_problems(result.all_warnings()))

        for report in format_report_list(result):
            self.reporter.plain(report)

        if self._launch(result):
            self.state = WatchState.REPORTED
        else:
            self.state = WatchState.FAILED

    def _report_engine_failure(self, error: EngineFailure) -> None:
        logger.debug(f"Engine failure in cycle {self.cycles}: {error}")
        self.reporter.error(str(error))
        if error.details:
            self.reporter.error(error.details)

    def _launch(self, result: BuildResult) -> bool:
        try:
            command = self.resolver.resolve_command(
                self.config, result, self.execute_command, self.in_memory
            )
        except (ArtifactNotFound, StoreReadFailure) as e:
            self.reporter.error(f"cannot run build output: {e}")
            return False

        try:
            self.supervisor.spawn_next(command)
        except OSError as e:
            handle_subprocess_error(
                e, str(command), severity=ErrorSeverity.WARNING, reraise=False, logger=logger
            )
            self.reporter.error(f"failed to start '{command.command}': {e}")
            return False
        return True

    def request_shutdown(self) -> None:
        """Ask `run_forever` to stop. Safe to call from a signal handler."""
        self.shutdown_requested.set()

    def shutdown(self) -> None:
        """Close the subscription and terminate the current child."""
        if self.state is WatchState.STOPPED:
            return
        self.state = WatchState.STOPPED
        if self._watching is not None:
            self._watching.close()
        self.supervisor.shutdown()
        logger.info(f"Watch session stopped after {self.cycles} builds")

    def run_forever(self, poll_interval: float = 0.5) -> None:
        """Start watching and block until shutdown is requested."""
        self.start()
        try:
            while not self.shutdown_requested.wait(poll_interval):
                pass
        finally:
            self.shutdown()
