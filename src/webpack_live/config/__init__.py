"""
Configuration management for the webpack_live package.

Configuration is loaded once at startup into an immutable
BuildConfiguration owned by the watch session.
"""

from pathlib import Path

from ..models import BuildConfiguration
from .loader import (
    load_config_source,
    load_js_config,
    load_json_config,
    load_python_config,
    load_toml_config,
)
from .resolver import build_configuration_from_options, resolve_config

DEFAULT_CONFIG_PATH = "./webpack.config.js"


def load_build_configuration(config_path: Path, node: str = "node") -> BuildConfiguration:
    """Load and resolve a configuration file in one step."""
    return resolve_config(load_config_source(config_path, node=node))


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "load_build_configuration",
    "load_config_source",
    "load_js_config",
    "load_json_config",
    "load_python_config",
    "load_toml_config",
    "build_configuration_from_options",
    "resolve_config",
]
