"""
Configuration file loading utilities.

This module turns a configuration file into a ConfigSource: either a
StaticConfig holding the exported options, or a FactoryConfig wrapping a
function that produces them. The format is chosen by file suffix.
"""

import importlib.util
import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict

from ..models import ConfigSource, FactoryConfig, StaticConfig
from ..system import run_command
from ..validation import ConfigLoadFailure, ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)

JS_SUFFIXES = (".js", ".cjs", ".mjs")

# Evaluated with `node -e`. In "probe" mode a function export is reported as
# a factory without being called; in "call" mode it is called (and awaited).
_NODE_EVAL_SCRIPT = """
const {pathToFileURL} = require('url')
const [file, mode] = process.argv.slice(1)
import(pathToFileURL(file).href).then(async (mod) => {
  const exported = mod.default !== undefined ? mod.default : mod
  if (typeof exported === 'function' && mode === 'probe') {
    process.stdout.write(JSON.stringify({kind: 'factory'}))
    return
  }
  const value = typeof exported === 'function' ? await exported() : exported
  process.stdout.write(JSON.stringify({kind: 'static', value}))
}).catch((error) => {
  process.stderr.write(String((error && error.stack) || error))
  process.exit(1)
})
"""


def _evaluate_js(file_path: Path, mode: str, node: str = "node") -> Dict[str, Any]:
    """Evaluate a JavaScript configuration module with node."""
    return_code, stdout, stderr = run_command(
        [node, "-e", _NODE_EVAL_SCRIPT, str(file_path), mode],
        cwd=file_path.parent,
    )
    if return_code != 0:
        raise ConfigLoadFailure(
            f"failed to evaluate {file_path}: {stderr.strip() or f'exit code {return_code}'}"
        )
    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ConfigLoadFailure(f"node produced unreadable output for {file_path}: {e}") from e


def load_js_config(file_path: Path, node: str = "node") -> ConfigSource:
    """
    Load a JavaScript configuration module.

    A function export becomes a FactoryConfig whose factory calls the
    function in node; anything else becomes a StaticConfig.
    """
    probe = _evaluate_js(file_path, "probe", node=node)
    if probe.get("kind") == "factory":
        def factory() -> Any:
            return _evaluate_js(file_path, "call", node=node).get("value")
        return FactoryConfig(factory=factory, source_path=file_path)
    return StaticConfig(value=probe.get("value"), source_path=file_path)


def load_python_config(file_path: Path) -> ConfigSource:
    """
    Load a Python configuration module.

    The module must define `config` (or `CONFIG`). A callable becomes a
    FactoryConfig, anything else a StaticConfig.
    """
    spec = importlib.util.spec_from_file_location(f"_webpack_live_config_{file_path.stem}", file_path)
    if spec is None or spec.loader is None:
        raise ConfigLoadFailure(f"cannot import configuration module {file_path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigLoadFailure(f"error executing {file_path}: {type(e).__name__}: {e}") from e

    exported = getattr(module, "config", getattr(module, "CONFIG", None))
    if exported is None:
        raise ConfigLoadFailure(f"{file_path} defines neither 'config' nor 'CONFIG'")
    if callable(exported):
        return FactoryConfig(factory=exported, source_path=file_path)
    return StaticConfig(value=exported, source_path=file_path)


def load_json_config(file_path: Path) -> ConfigSource:
    """Load a static JSON configuration file."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return StaticConfig(value=json.load(f), source_path=file_path)
    except json.JSONDecodeError as e:
        raise ConfigLoadFailure(f"malformed JSON in {file_path}: {e}") from e


def load_toml_config(file_path: Path) -> ConfigSource:
    """
    Load a static TOML configuration file.

    An `entries` array of tables describes a multi-target build; otherwise
    the whole document is a single entry.
    """
    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigLoadFailure(f"malformed TOML in {file_path}: {e}") from e
    value = data["entries"] if isinstance(data.get("entries"), list) else data
    return StaticConfig(value=value, source_path=file_path)


_LOADERS: Dict[str, Callable[[Path], ConfigSource]] = {
    ".py": load_python_config,
    ".json": load_json_config,
    ".toml": load_toml_config,
}


def load_config_source(config_path: Path, node: str = "node") -> ConfigSource:
    """
    Load a configuration file into a ConfigSource.

    Args:
        config_path: Path to the configuration file, relative to the cwd or absolute
        node: The node executable used to evaluate JavaScript configurations

    Returns:
        A StaticConfig or FactoryConfig

    Raises:
        ConfigLoadFailure: If the file is missing, of an unknown type, or malformed
    """
    file_path = Path(config_path).resolve()
    logger.info(f"Loading configuration from: {file_path}")

    try:
        if not file_path.is_file():
            raise ConfigLoadFailure(f"configuration file not found: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix in JS_SUFFIXES:
            return load_js_config(file_path, node=node)
        loader = _LOADERS.get(suffix)
        if loader is None:
            raise ConfigLoadFailure(f"unsupported configuration file type '{suffix}': {file_path}")
        return loader(file_path)
    except ConfigLoadFailure as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger,
        )
    except OSError as e:
        raise ConfigLoadFailure(f"cannot read {file_path}: {e}") from e
