"""
Child process lifecycle management.

The supervisor owns the single "current child process" slot of a watch
session. A new process is only ever started after the previous one has been
asked to terminate, so two generations of the watched program never run
side by side from the controller's point of view.
"""

import logging
import subprocess
import threading
from typing import IO, Callable, List, Optional

import psutil

from ..models import ExecuteCommand, TimeoutConstants
from ..reporting import ConsoleReporter

logger = logging.getLogger(__name__)

# Starts a process for a command. Must return an object with the
# subprocess.Popen interface (pid, stdout, stderr, poll, wait, terminate, kill).
Launcher = Callable[[ExecuteCommand], subprocess.Popen]

_READ_CHUNK_SIZE = 65536


def popen_launcher(command: ExecuteCommand) -> subprocess.Popen:
    """Start a command with piped output streams."""
    return subprocess.Popen(
        command.argv(),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )


class ChildProcessHandle:
    """
    A running (or finished) child process plus the threads serving it.
    """

    def __init__(self, process: subprocess.Popen, command: ExecuteCommand):
        self.process = process
        self.command = command
        self.killed = False
        self.returncode: Optional[int] = None
        self.threads: List[threading.Thread] = []
        self.exited = threading.Event()

    @property
    def pid(self) -> int:
        return self.process.pid

    def is_running(self) -> bool:
        return self.process.poll() is None

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Wait until the exit has been observed and reported.

        Returns:
            The exit code, or None if the timeout expired first
        """
        if not self.exited.wait(timeout):
            return None
        return self.returncode


class ProcessSupervisor:
    """
    Owns at most one live child process.

    Args:
        reporter: Sink for child output and exit reports
        launcher: Starts processes; replaced in tests
    """

    def __init__(self, reporter: ConsoleReporter, launcher: Launcher = popen_launcher):
        self.reporter = reporter
        self.launcher = launcher
        self._current: Optional[ChildProcessHandle] = None
        self._lock = threading.RLock()

    @property
    def current(self) -> Optional[ChildProcessHandle]:
        return self._current

    def kill_current(self) -> None:
        """
        Request termination of the current child and forget it.

        Does not wait for the process to exit. Calling it with no live
        child is a no-op.
        """
        with self._lock:
            handle = self._current
            self._current = None
            if handle is None or handle.killed or not handle.is_running():
                return
            logger.info(f"Terminating process {handle.pid} ({handle.command.command})")
            self._request_termination(handle)

    def spawn_next(self, command: ExecuteCommand) -> ChildProcessHandle:
        """
        Kill the current child, then start `command` as the new one.

        Raises:
            OSError: If the process cannot be started
        """
        with self._lock:
            self.kill_current()

            self.reporter.info("starting process ...")
            process = self.launcher(command)
            handle = ChildProcessHandle(process, command)
            logger.info(f"Started process {handle.pid}: {command.command}")

            stdout_thread = self._start_thread(
                self._pump_stdout, process.stdout, f"child-{handle.pid}-stdout"
            )
            stderr_thread = self._start_thread(
                self._pump_stderr, process.stderr, f"child-{handle.pid}-stderr"
            )
            handle.threads = [t for t in (stdout_thread, stderr_thread) if t is not None]
            self._start_thread(self._observe_exit, handle, f"child-{handle.pid}-exit")

            self._current = handle
            return handle

    def shutdown(self) -> None:
        """
        Terminate the current child at session end, escalating to a
        forced kill if it does not exit in time.
        """
        with self._lock:
            handle = self._current
            self.kill_current()
        if handle is None or handle.process.poll() is not None:
            return
        try:
            handle.process.wait(timeout=TimeoutConstants.TERMINATION_GRACEFUL_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {handle.pid} ignored SIGTERM, killing it")
            self._force_kill(handle)

    @staticmethod
    def _start_thread(target: Callable, arg, name: str) -> Optional[threading.Thread]:
        if arg is None:
            return None
        thread = threading.Thread(target=target, args=(arg,), name=name, daemon=True)
        thread.start()
        return thread

    def _pump_stdout(self, stream: IO[bytes]) -> None:
        # Forward chunks as they arrive; prompts carry no trailing newline
        try:
            while True:
                chunk = stream.read1(_READ_CHUNK_SIZE)
                if not chunk:
                    break
                self.reporter.write_output(chunk)
        finally:
            stream.close()

    def _pump_stderr(self, stream: IO[bytes]) -> None:
        try:
            for line in iter(stream.readline, b""):
                self.reporter.error(line.decode("utf-8", errors="replace").rstrip("\r\n"))
        finally:
            stream.close()

    def _observe_exit(self, handle: ChildProcessHandle) -> None:
        code = handle.process.wait()
        # Report only after the output streams are drained
        for thread in handle.threads:
            thread.join(timeout=TimeoutConstants.STREAM_JOIN_TIMEOUT)
        handle.returncode = code
        logger.debug(f"Process {handle.pid} exited with code {code} (killed={handle.killed})")
        # Negative codes are signal deaths and stay silent
        if code > 0 and not handle.killed:
            self.reporter.error(f"process exited with code {code}")
        handle.exited.set()

    def _request_termination(self, handle: ChildProcessHandle) -> None:
        handle.killed = True
        descendants = self._get_descendants(handle.pid)
        try:
            handle.process.terminate()
        except ProcessLookupError:
            pass
        for child in descendants:
            try:
                child.terminate()
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                logger.warning(f"Access denied sending SIGTERM to PID {child.pid}")

    def _force_kill(self, handle: ChildProcessHandle) -> None:
        processes = self._get_descendants(handle.pid)
        try:
            handle.process.kill()
        except ProcessLookupError:
            pass
        for child in processes:
            try:
                child.kill()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        _, still_alive = psutil.wait_procs(processes, timeout=TimeoutConstants.TERMINATION_FORCE_TIMEOUT)
        for proc in still_alive:
            logger.error(f"Process {proc.pid} survived SIGKILL")

    @staticmethod
    def _get_descendants(pid: int) -> List[psutil.Process]:
        """Children of the process, recursively; empty if it is gone."""
        try:
            return psutil.Process(pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return []
