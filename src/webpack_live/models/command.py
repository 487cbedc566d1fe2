"""
Command and artifact data models.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union


@dataclass(frozen=True)
class ExecuteCommand:
    """A program to invoke plus its ordered arguments."""

    command: str
    args: List[str] = field(default_factory=list)

    @classmethod
    def from_argv(cls, argv: Optional[Sequence[str]]) -> Optional["ExecuteCommand"]:
        """Build a command from an argv list, or None if it is empty."""
        if not argv:
            return None
        return cls(command=argv[0], args=list(argv[1:]))

    def argv(self) -> List[str]:
        return [self.command, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv())


@dataclass(frozen=True)
class FileArtifact:
    """An artifact on disk, referenced by its absolute path."""

    path: str


@dataclass(frozen=True)
class InlineArtifact:
    """An artifact read from the in-memory store, held as text."""

    path: str
    content: str


ArtifactRef = Union[FileArtifact, InlineArtifact]
