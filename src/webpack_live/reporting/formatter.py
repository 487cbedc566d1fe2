"""
Build report formatting.

Turns a BuildResult into the text shown after every successful build:
elapsed time, content hash, and one tab-separated line per emitted asset.
"""

from typing import Iterable, List

from ..models import AssetInfo, BuildResult


def format_asset(asset: AssetInfo) -> str:
    return f"\t{asset.name}\t{asset.size}"


def format_report(result: BuildResult) -> str:
    """Render one build result. Assets not emitted this cycle are omitted."""
    asset_lines = "\n".join(format_asset(asset) for asset in result.emitted_assets())
    build_time = result.time if result.time is None else f"{result.time}ms"
    return (
        f"\nBuild Time: {build_time}"
        f"\nBuild Hash: {result.hash}"
        f"\nBuild Assets:\n{asset_lines}\n"
    )


def format_report_list(result: BuildResult) -> List[str]:
    """Render each child of a multi-target result, or the result itself."""
    targets = result.children or [result]
    return [format_report(target) for target in targets]


def format_problems(problems: Iterable[str]) -> str:
    """Render a list of errors or warnings, one block per problem."""
    return "\n\n".join(str(problem).rstrip() for problem in problems)
