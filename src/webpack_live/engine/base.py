"""
Build engine contract.

The bundler is an external collaborator. The watch loop only needs to start
watching and to receive one (error, result) notification per rebuild.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..models import BuildConfiguration, BuildResult
from ..validation import EngineFailure

# Invoked once per rebuild. Exactly one of the arguments is not None.
BuildCallback = Callable[[Optional[EngineFailure], Optional[BuildResult]], None]


class Watching(ABC):
    """A cancellable subscription to build notifications."""

    @abstractmethod
    def close(self) -> None:
        """Stop watching. No callback starts after this returns."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass


class AbstractBuildEngine(ABC):
    """Abstract base class for build engines."""

    @abstractmethod
    def watch(self, config: BuildConfiguration, on_build: BuildCallback) -> Watching:
        """
        Start watching and building.

        Callbacks are invoked one at a time; a callback never overlaps with
        the previous one.

        Args:
            config: The resolved build configuration
            on_build: Called after every build with (error, result)

        Returns:
            The subscription, used to stop watching
        """
        pass
