"""
Data models for the webpack_live package.

This module exposes the dataclasses shared between configuration loading,
the build engine, and the watch loop orchestration.
"""

from .build import AssetInfo, BuildResult
from .command import ArtifactRef, ExecuteCommand, FileArtifact, InlineArtifact
from .config import (
    BuildConfiguration,
    BuildEntry,
    DEFAULT_WATCH_EXTENSIONS,
    ConfigSource,
    FactoryConfig,
    StaticConfig,
    WatchSettings,
)
from .runtime import SessionOptions, TimeoutConstants, WatchState

__all__ = [
    # Build results
    "AssetInfo",
    "BuildResult",
    # Commands and artifacts
    "ArtifactRef",
    "ExecuteCommand",
    "FileArtifact",
    "InlineArtifact",
    # Configuration
    "BuildConfiguration",
    "BuildEntry",
    "DEFAULT_WATCH_EXTENSIONS",
    "ConfigSource",
    "FactoryConfig",
    "StaticConfig",
    "WatchSettings",
    # Runtime
    "SessionOptions",
    "TimeoutConstants",
    "WatchState",
]
