"""
Build result data models.

A BuildResult is a transient snapshot produced by the build engine once per
detected source change. It is never retained beyond one watch callback.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class AssetInfo:
    """One output file of a build."""

    name: str
    size: int
    emitted: bool = True


@dataclass
class BuildResult:
    """
    Structured summary of one compilation.

    `entrypoints` maps each entry-point name to its emitted asset filenames,
    in the order the bundler reported them. For multi-target builds the
    per-target results are held in `children`.
    """

    time: Optional[int] = None
    hash: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    entrypoints: Dict[str, List[str]] = field(default_factory=dict)
    assets: List[AssetInfo] = field(default_factory=list)
    children: List["BuildResult"] = field(default_factory=list)
    output_path: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        if self.errors:
            return True
        return any(child.has_errors for child in self.children)

    @property
    def has_warnings(self) -> bool:
        if self.warnings:
            return True
        return any(child.has_warnings for child in self.children)

    def all_errors(self) -> List[str]:
        """Errors of this result followed by those of its children."""
        errors = list(self.errors)
        for child in self.children:
            errors.extend(child.all_errors())
        return errors

    def all_warnings(self) -> List[str]:
        """Warnings of this result followed by those of its children."""
        warnings = list(self.warnings)
        for child in self.children:
            warnings.extend(child.all_warnings())
        return warnings

    def primary(self) -> "BuildResult":
        """The result used for artifact and command resolution."""
        return self.children[0] if self.children else self

    def emitted_assets(self) -> List[AssetInfo]:
        return [asset for asset in self.assets if asset.emitted]
