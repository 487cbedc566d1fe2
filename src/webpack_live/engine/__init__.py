"""
Build engine adapters for the webpack_live package.
"""

from .base import AbstractBuildEngine, BuildCallback, Watching
from .stats import parse_stats, parse_stats_output
from .webpack import WebpackCliEngine, WebpackWatching

__all__ = [
    "AbstractBuildEngine",
    "BuildCallback",
    "Watching",
    "parse_stats",
    "parse_stats_output",
    "WebpackCliEngine",
    "WebpackWatching",
]
