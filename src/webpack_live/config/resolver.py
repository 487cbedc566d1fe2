"""
Resolution of a ConfigSource into a BuildConfiguration.

This happens once at startup, before the watch loop runs. The options are
expected in the bundler's own shape: a dict (single target) or a list of
dicts (multi-target), each with `output.path`, `output.filename` and an
optional `context`.
"""

import logging
from typing import Any, Dict, List

from ..models import (
    BuildConfiguration,
    BuildEntry,
    ConfigSource,
    DEFAULT_WATCH_EXTENSIONS,
    FactoryConfig,
    StaticConfig,
    WatchSettings,
)
from ..validation import (
    ConfigLoadFailure,
    ValidationError,
    validate_optional_string,
    validate_positive_float,
    validate_string_list,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "dist"
DEFAULT_FILENAME = "[name].js"
DEFAULT_AGGREGATE_TIMEOUT_MS = 300


def _parse_entry(options: Any, index: int) -> BuildEntry:
    if not isinstance(options, dict):
        raise ValidationError(
            f"configuration entry {index} must be an object, got {type(options).__name__}",
            field_name=f"[{index}]",
            value=options,
        )
    output = options.get("output") or {}
    if not isinstance(output, dict):
        raise ValidationError(
            f"configuration entry {index}: 'output' must be an object",
            field_name=f"[{index}].output",
            value=output,
        )
    return BuildEntry(
        output_path=validate_optional_string(
            output.get("path"), DEFAULT_OUTPUT_PATH, field_name=f"[{index}].output.path"
        ),
        filename=validate_optional_string(
            output.get("filename"), DEFAULT_FILENAME, field_name=f"[{index}].output.filename"
        ),
        context=validate_optional_string(
            options.get("context"), "", field_name=f"[{index}].context"
        ),
    )


def _parse_watch_settings(options: Dict[str, Any]) -> WatchSettings:
    watch_options = options.get("watchOptions") or {}
    if not isinstance(watch_options, dict):
        raise ValidationError("'watchOptions' must be an object", field_name="watchOptions")
    timeout_ms = validate_positive_float(
        watch_options.get("aggregateTimeout", DEFAULT_AGGREGATE_TIMEOUT_MS),
        field_name="watchOptions.aggregateTimeout",
    )
    resolve_options = options.get("resolve") or {}
    if not isinstance(resolve_options, dict):
        raise ValidationError("'resolve' must be an object", field_name="resolve")
    extra_extensions = validate_string_list(
        resolve_options.get("extensions"), field_name="resolve.extensions"
    )
    extensions = DEFAULT_WATCH_EXTENSIONS + tuple(
        ext.lower() for ext in extra_extensions
        if ext.startswith(".") and ext != "..." and ext.lower() not in DEFAULT_WATCH_EXTENSIONS
    )
    return WatchSettings(
        aggregate_timeout=timeout_ms / 1000.0,
        poll=bool(watch_options.get("poll", False)),
        ignored=validate_string_list(watch_options.get("ignored"), field_name="watchOptions.ignored"),
        extensions=extensions,
    )


def build_configuration_from_options(options: Any, source_path=None) -> BuildConfiguration:
    """
    Convert bundler options into a BuildConfiguration.

    Raises:
        ConfigLoadFailure: If the options have an unexpected shape
    """
    entries_data: List[Any] = options if isinstance(options, list) else [options]
    if not entries_data:
        raise ConfigLoadFailure("configuration contains no entries")

    try:
        entries = [_parse_entry(entry, index) for index, entry in enumerate(entries_data)]
        watch = _parse_watch_settings(entries_data[0])
    except ValidationError as e:
        raise ConfigLoadFailure(f"invalid configuration: {e}") from e

    logger.debug(f"Resolved configuration with {len(entries)} entries; primary output {entries[0].output_path}")
    return BuildConfiguration(entries=entries, watch=watch, source_path=source_path, raw=options)


def resolve_config(source: ConfigSource) -> BuildConfiguration:
    """
    Resolve a static or factory configuration into a BuildConfiguration.

    Raises:
        ConfigLoadFailure: If the factory raises or the options are invalid
    """
    if isinstance(source, FactoryConfig):
        try:
            options = source.factory()
        except ConfigLoadFailure:
            raise
        except Exception as e:
            raise ConfigLoadFailure(
                f"configuration factory raised {type(e).__name__}: {e}"
            ) from e
    elif isinstance(source, StaticConfig):
        options = source.value
    else:
        raise TypeError(f"Unknown configuration source: {type(source).__name__}")

    return build_configuration_from_options(options, source_path=source.source_path)
