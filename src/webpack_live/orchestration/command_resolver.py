"""
Resolution of the command to run after a successful build.
"""

import logging
from typing import Optional

from ..models import BuildConfiguration, BuildResult, ExecuteCommand, InlineArtifact
from .artifact_locator import ArtifactLocator

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME = "node"


class CommandResolver:
    """
    Chooses between a user-supplied command and one derived from the build.

    Args:
        locator: Artifact locator used when no override is given
        runtime: Program able to execute the artifact
    """

    def __init__(self, locator: ArtifactLocator, runtime: str = DEFAULT_RUNTIME):
        self.locator = locator
        self.runtime = runtime

    def resolve_command(self, config: BuildConfiguration, build_result: BuildResult,
                        override: Optional[ExecuteCommand] = None,
                        use_in_memory: bool = False) -> ExecuteCommand:
        """
        Return the override unchanged, or run the located artifact.

        A file artifact is passed by path; an in-memory artifact is passed
        inline with `-e`.
        """
        if override is not None:
            return override

        artifact = self.locator.locate(config, build_result, use_in_memory)
        if isinstance(artifact, InlineArtifact):
            return ExecuteCommand(command=self.runtime, args=["-e", artifact.content])
        return ExecuteCommand(command=self.runtime, args=[artifact.path])
