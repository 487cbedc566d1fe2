"""
webpack_live: rebuild on change and restart the built program.

The package drives a bundler's watch mode, reports build statistics, and
re-launches a target process each time a build succeeds, terminating the
previous instance first.

The package is organized into specialized modules:
- config: Configuration loading and resolution
- models: Data structures shared across modules
- validation: Error taxonomy and input validation
- storage: In-memory artifact store
- engine: Build engine contract and the webpack CLI adapter
- reporting: Console sinks and build report formatting
- orchestration: Artifact location, process supervision, the watch loop
- cli: Command-line entry point

Usage:
    From command line:
        webpack-live --config webpack.config.js -- node dist/main.js

    Programmatically:
        from webpack_live import SessionOptions, run
        run(SessionOptions(config_path=Path("webpack.config.js")))
"""

from .cli import main_cli, run
from .config import load_build_configuration, resolve_config
from .models import (
    AssetInfo,
    BuildConfiguration,
    BuildEntry,
    BuildResult,
    ExecuteCommand,
    FileArtifact,
    InlineArtifact,
    SessionOptions,
)
from .orchestration import (
    ArtifactLocator,
    CommandResolver,
    ProcessSupervisor,
    WatchController,
)
from .validation import (
    ArtifactNotFound,
    ConfigLoadFailure,
    EngineFailure,
    LiveServerError,
    StoreReadFailure,
)

__version__ = "1.0.0"

__all__ = [
    # Entry points
    "main_cli",
    "run",
    "load_build_configuration",
    "resolve_config",
    # Models
    "AssetInfo",
    "BuildConfiguration",
    "BuildEntry",
    "BuildResult",
    "ExecuteCommand",
    "FileArtifact",
    "InlineArtifact",
    "SessionOptions",
    # Orchestration
    "ArtifactLocator",
    "CommandResolver",
    "ProcessSupervisor",
    "WatchController",
    # Errors
    "ArtifactNotFound",
    "ConfigLoadFailure",
    "EngineFailure",
    "LiveServerError",
    "StoreReadFailure",
]
