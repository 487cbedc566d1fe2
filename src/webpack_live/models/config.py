"""
Configuration data models.

This module contains the build configuration structures consumed by the watch
loop, plus the two shapes a configuration module can take before it is
resolved: a static value or a factory producing one.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class BuildEntry:
    """
    Output settings of one bundler target.
    """

    # Directory the bundler writes assets to.
    output_path: str
    # Output filename pattern (e.g. "[name].js").
    filename: str = "[name].js"
    # Base directory for resolving relative paths. Empty means the cwd.
    context: str = ""


# Source file types that trigger a rebuild when they change. Files the
# running program writes (logs, databases, uploads) fall outside this set.
DEFAULT_WATCH_EXTENSIONS = (
    ".js", ".mjs", ".cjs", ".jsx", ".ts", ".tsx", ".json", ".wasm",
    ".css", ".scss", ".sass", ".less", ".vue", ".svelte",
)


@dataclass(frozen=True)
class WatchSettings:
    """
    Watch behaviour taken from the first entry's `watchOptions` and
    `resolve.extensions`.
    """

    aggregate_timeout: float = 0.3
    poll: bool = False
    ignored: List[str] = field(default_factory=list)
    extensions: Tuple[str, ...] = DEFAULT_WATCH_EXTENSIONS


@dataclass(frozen=True)
class BuildConfiguration:
    """
    The resolved configuration of one watch session.

    Multiple entries represent a multi-target build; only the first entry's
    output settings are used to locate the artifact to run.
    """

    entries: List[BuildEntry]
    watch: WatchSettings = field(default_factory=WatchSettings)
    # The file the configuration was loaded from, handed to the bundler.
    source_path: Optional[Path] = None
    # Resolved options as plain data, used when the source cannot be handed
    # to the bundler directly.
    raw: Any = None

    @property
    def primary(self) -> BuildEntry:
        return self.entries[0]


@dataclass(frozen=True)
class StaticConfig:
    """A configuration module that exports its options directly."""

    value: Union[Dict[str, Any], List[Dict[str, Any]]]
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class FactoryConfig:
    """A configuration module that exports a function returning its options."""

    factory: Callable[[], Any]
    source_path: Optional[Path] = None


ConfigSource = Union[StaticConfig, FactoryConfig]
