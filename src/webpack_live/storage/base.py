"""
Abstract base class for artifact store implementations.

An artifact store maps absolute file paths to bytes. It lets the watch loop
run a build output without the bundler writing it to the real filesystem.
"""

from abc import ABC, abstractmethod
from typing import List, Union


class ArtifactStore(ABC):
    """Abstract base class for artifact stores."""

    @abstractmethod
    def write(self, path: str, data: Union[bytes, str]) -> None:
        """
        Store content at the given path, replacing any previous content.

        Args:
            path: Absolute path the content is stored under
            data: Raw bytes, or text which is stored UTF-8 encoded
        """
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        """
        Read the content stored at the given path.

        Raises:
            FileNotFoundError: If nothing is stored at the path
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether content is stored at the given path."""
        pass

    @abstractmethod
    def remove(self, path: str) -> None:
        """Remove the content at the given path if present."""
        pass

    @abstractmethod
    def list_paths(self) -> List[str]:
        """Return all stored paths in sorted order."""
        pass
