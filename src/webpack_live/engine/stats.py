"""
Parsing of webpack stats JSON into BuildResult objects.

Both the webpack 4 shape (errors as strings, entrypoint assets as names)
and the webpack 5 shape (errors as objects, entrypoint assets as objects)
are accepted.
"""

import json
import logging
from typing import Any, Dict, List

from ..models import AssetInfo, BuildResult
from ..validation import EngineFailure

logger = logging.getLogger(__name__)


def _format_problem(problem: Any) -> str:
    if isinstance(problem, str):
        return problem
    if isinstance(problem, dict):
        message = problem.get("message", "")
        location = " ".join(
            str(part) for part in (problem.get("moduleName"), problem.get("loc")) if part
        )
        return f"{location}\n{message}" if location else message
    return str(problem)


def _asset_name(asset: Any) -> str:
    return asset.get("name", "") if isinstance(asset, dict) else str(asset)


def _parse_entrypoints(entrypoints: Dict[str, Any]) -> Dict[str, List[str]]:
    parsed = {}
    for name, entrypoint in (entrypoints or {}).items():
        assets = entrypoint.get("assets", []) if isinstance(entrypoint, dict) else []
        parsed[name] = [_asset_name(asset) for asset in assets]
    return parsed


def _parse_assets(assets: List[Any]) -> List[AssetInfo]:
    parsed = []
    for asset in assets or []:
        if not isinstance(asset, dict):
            continue
        parsed.append(
            AssetInfo(
                name=asset.get("name", ""),
                size=int(asset.get("size") or 0),
                emitted=bool(asset.get("emitted", False)),
            )
        )
    return parsed


def parse_stats(data: Dict[str, Any]) -> BuildResult:
    """Convert a stats JSON object into a BuildResult."""
    return BuildResult(
        time=data.get("time"),
        hash=data.get("hash"),
        errors=[_format_problem(e) for e in data.get("errors") or []],
        warnings=[_format_problem(w) for w in data.get("warnings") or []],
        entrypoints=_parse_entrypoints(data.get("entrypoints")),
        assets=_parse_assets(data.get("assets")),
        children=[parse_stats(child) for child in data.get("children") or []],
        output_path=data.get("outputPath"),
    )


def parse_stats_output(output: str) -> BuildResult:
    """
    Parse the stdout of `webpack --json` into a BuildResult.

    Leading noise before the JSON document (e.g. npx notices) is skipped.

    Raises:
        EngineFailure: If no stats object can be decoded
    """
    start = output.find("{")
    if start < 0:
        raise EngineFailure("webpack produced no stats output")
    try:
        data, _ = json.JSONDecoder().raw_decode(output[start:])
    except json.JSONDecodeError as e:
        raise EngineFailure(f"cannot decode webpack stats: {e}") from e
    if not isinstance(data, dict):
        raise EngineFailure(f"unexpected webpack stats type: {type(data).__name__}")
    return parse_stats(data)
