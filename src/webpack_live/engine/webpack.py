"""
Build engine backed by the webpack command line interface.

The engine runs `webpack --json` once at startup and once per batch of
source changes detected by a watchdog observer. Each run's stats are parsed
into a BuildResult and handed to the watch callback on a single worker
thread, so callbacks never overlap.
"""

import copy
import fnmatch
import json
import logging
import os
import queue
import shutil
import tempfile
import threading
import time
from pathlib import Path
from typing import List, Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from ..config.loader import JS_SUFFIXES
from ..models import DEFAULT_WATCH_EXTENSIONS, BuildConfiguration, BuildResult, TimeoutConstants
from ..storage import MemoryStore
from ..system import run_command
from ..validation import EngineFailure
from .base import AbstractBuildEngine, BuildCallback, Watching
from .stats import parse_stats_output

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_DIRS = ("node_modules", ".git", "__pycache__")

# Event types that signal a content change. Open/close notifications are not.
_CHANGE_EVENTS = {"created", "modified", "deleted", "moved"}

_INITIAL_BUILD = object()
_STOP = object()


class _ChangeHandler(FileSystemEventHandler):
    """Forward changes to source files to the watch queue."""

    def __init__(self, events: "queue.Queue", ignored_dirs: Sequence[str],
                 ignored_patterns: Sequence[str],
                 extensions: Sequence[str] = DEFAULT_WATCH_EXTENSIONS,
                 watched_files: Sequence[str] = ()):
        super().__init__()
        self._events = events
        self._ignored_dirs = [os.path.abspath(d) for d in ignored_dirs]
        self._ignored_patterns = list(ignored_patterns)
        self._extensions = tuple(ext.lower() for ext in extensions)
        self._watched_files = {os.path.abspath(f) for f in watched_files}

    def is_ignored(self, path: str) -> bool:
        absolute = os.path.abspath(path)
        if absolute in self._watched_files:
            return False
        if not absolute.lower().endswith(self._extensions):
            return True
        for directory in self._ignored_dirs:
            if absolute == directory or absolute.startswith(directory + os.sep):
                return True
        parts = Path(absolute).parts
        if any(part in DEFAULT_IGNORED_DIRS for part in parts):
            return True
        return any(fnmatch.fnmatch(absolute, pattern) for pattern in self._ignored_patterns)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _CHANGE_EVENTS:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        changed = [os.fsdecode(p) for p in paths if p]
        relevant = [p for p in changed if not self.is_ignored(p)]
        if not relevant:
            return
        logger.debug(f"Change detected: {event.event_type} {relevant[0]}")
        self._events.put(relevant[0])


class WebpackCliEngine(AbstractBuildEngine):
    """
    Runs the webpack CLI to produce build results.

    Args:
        webpack_command: Command line invoking webpack (e.g. ["npx", "webpack"])
        store: In-memory artifact store; when given, webpack writes to a
            scratch directory and emitted assets are moved into the store
        cwd: Working directory webpack runs in, defaults to the current one
    """

    def __init__(self, webpack_command: Sequence[str] = ("npx", "webpack"),
                 store: Optional[MemoryStore] = None, cwd: Optional[Path] = None):
        self.webpack_command = list(webpack_command)
        self.store = store
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self._scratch = tempfile.TemporaryDirectory(prefix="webpack-live-")

    @property
    def scratch_dir(self) -> str:
        """Directory for generated config files and in-memory build output."""
        return self._scratch.name

    def _config_argument(self, config: BuildConfiguration) -> str:
        """Return a configuration file webpack itself can read."""
        source = config.source_path
        if source is not None and source.suffix.lower() in JS_SUFFIXES + (".json",):
            return str(source)
        # webpack only accepts absolute output paths
        options = copy.deepcopy(config.raw)
        targets = options if isinstance(options, list) else [options]
        for target, entry in zip(targets, config.entries):
            target.setdefault("output", {})["path"] = os.path.abspath(
                os.path.join(self.cwd, entry.context, entry.output_path)
            )
        resolved = Path(self._scratch.name) / "webpack.config.json"
        with open(resolved, "w", encoding="utf-8") as f:
            json.dump(options, f)
        return str(resolved)

    def _ingest(self, config: BuildConfiguration, result: BuildResult, output_dir: Path) -> None:
        targets = result.children or [result]
        for index, target in enumerate(targets):
            entry = config.entries[min(index, len(config.entries) - 1)]
            target_dir = os.path.abspath(
                os.path.join(self.cwd, entry.context, entry.output_path)
            )
            names = [asset.name for asset in target.emitted_assets()]
            stored = self.store.ingest_directory(output_dir, target_dir, names)
            logger.debug(f"Stored {stored} emitted assets under {target_dir}")

    def build_once(self, config: BuildConfiguration) -> BuildResult:
        """
        Run one compilation.

        Raises:
            EngineFailure: If webpack cannot be run or its stats cannot be read
        """
        try:
            config_file = self._config_argument(config)
        except (TypeError, ValueError) as e:
            raise EngineFailure(
                "configuration cannot be passed to webpack as JSON",
                details=f"{type(e).__name__}: {e}",
            ) from e
        except OSError as e:
            raise EngineFailure("cannot write generated webpack configuration", details=str(e)) from e

        argv = [*self.webpack_command, "--config", config_file, "--json"]
        output_dir = None
        if self.store is not None:
            try:
                output_dir = Path(tempfile.mkdtemp(prefix="output-", dir=self._scratch.name))
            except OSError as e:
                raise EngineFailure("cannot create in-memory output directory", details=str(e)) from e
            argv += ["--output-path", str(output_dir)]

        try:
            return_code, stdout, stderr = run_command(argv, cwd=self.cwd)
            if return_code == -1:
                raise EngineFailure(f"failed to run {' '.join(self.webpack_command)}", details=stderr)
            try:
                result = parse_stats_output(stdout)
            except EngineFailure as e:
                raise EngineFailure(
                    f"webpack exited with code {return_code}: {e}",
                    details=stderr.strip() or None,
                ) from e
            if output_dir is not None:
                try:
                    self._ingest(config, result, output_dir)
                except OSError as e:
                    raise EngineFailure("cannot read webpack output into memory", details=str(e)) from e
            return result
        finally:
            if output_dir is not None:
                shutil.rmtree(output_dir, ignore_errors=True)

    def watch(self, config: BuildConfiguration, on_build: BuildCallback) -> "WebpackWatching":
        watching = WebpackWatching(self, config, on_build)
        watching.start()
        return watching

    def close(self) -> None:
        """Remove the scratch directory."""
        self._scratch.cleanup()


class WebpackWatching(Watching):
    """
    A watch subscription: a watchdog observer feeding a queue, and one
    worker thread draining it and running builds.
    """

    def __init__(self, engine: WebpackCliEngine, config: BuildConfiguration,
                 on_build: BuildCallback):
        self._engine = engine
        self._config = config
        self._on_build = on_build
        self._events: "queue.Queue" = queue.Queue()
        self._stop_requested = threading.Event()

        self._observer = PollingObserver() if config.watch.poll else Observer()
        handler = _ChangeHandler(
            self._events,
            ignored_dirs=self._ignored_dirs(),
            ignored_patterns=config.watch.ignored,
            extensions=config.watch.extensions,
            watched_files=[str(config.source_path)] if config.source_path else [],
        )
        self._observer.schedule(handler, str(self.watch_root()), recursive=True)
        self._worker = threading.Thread(
            target=self._run, name="webpack-live-watch", daemon=True
        )

    def watch_root(self) -> Path:
        context = self._config.primary.context
        return Path(self._engine.cwd, context).resolve() if context else self._engine.cwd

    def _ignored_dirs(self) -> List[str]:
        ignored = [self._engine.scratch_dir]
        for entry in self._config.entries:
            ignored.append(os.path.join(self._engine.cwd, entry.context, entry.output_path))
        return ignored

    @property
    def closed(self) -> bool:
        return self._stop_requested.is_set()

    def start(self) -> None:
        logger.info(f"Watching {self.watch_root()} for changes")
        self._observer.start()
        self._worker.start()
        self._events.put(_INITIAL_BUILD)

    def _wait_until_quiet(self) -> bool:
        """
        Absorb further events until none arrive for the aggregate timeout,
        or until MAX_AGGREGATE_WAIT has passed since the first change.
        """
        deadline = time.monotonic() + max(
            TimeoutConstants.MAX_AGGREGATE_WAIT, self._config.watch.aggregate_timeout
        )
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("Changes keep arriving, building anyway")
                return True
            try:
                item = self._events.get(
                    timeout=min(self._config.watch.aggregate_timeout, remaining)
                )
            except queue.Empty:
                return True
            if item is _STOP:
                return False

    def _run(self) -> None:
        while not self._stop_requested.is_set():
            try:
                item = self._events.get(timeout=TimeoutConstants.QUEUE_GET_TIMEOUT)
            except queue.Empty:
                continue
            if item is _STOP:
                break
            if item is not _INITIAL_BUILD and not self._wait_until_quiet():
                break
            if self._stop_requested.is_set():
                break
            self._compile()
        logger.debug("Watch worker finished")

    def _compile(self) -> None:
        try:
            result = self._engine.build_once(self._config)
        except EngineFailure as e:
            self._dispatch(e, None)
            return
        except Exception as e:
            # The worker must survive any single build
            logger.error(f"Unexpected error during build: {type(e).__name__}: {e}", exc_info=True)
            self._dispatch(EngineFailure("build failed unexpectedly", details=f"{type(e).__name__}: {e}"), None)
            return
        self._dispatch(None, result)

    def _dispatch(self, error: Optional[EngineFailure], result: Optional[BuildResult]) -> None:
        try:
            self._on_build(error, result)
        except Exception as e:
            logger.error(f"Unhandled error in build callback: {type(e).__name__}: {e}", exc_info=True)

    def close(self) -> None:
        if self._stop_requested.is_set():
            return
        self._stop_requested.set()
        self._events.put(_STOP)
        self._observer.stop()
        self._observer.join(timeout=TimeoutConstants.OBSERVER_JOIN_TIMEOUT)
        if threading.current_thread() is not self._worker and self._worker.is_alive():
            self._worker.join(timeout=TimeoutConstants.WORKER_JOIN_TIMEOUT)
        logger.info("Stopped watching")
