"""
Location of the artifact to run after a successful build.

The artifact is the first asset of the first entry-point, placed in the
first configuration entry's output directory.
"""

import logging
import os
from typing import Optional

from ..models import ArtifactRef, BuildConfiguration, BuildResult, FileArtifact, InlineArtifact
from ..storage import ArtifactStore
from ..validation import ArtifactNotFound, StoreReadFailure

logger = logging.getLogger(__name__)


class ArtifactLocator:
    """
    Finds the primary emitted artifact of a build.

    Args:
        store: Store to read from in in-memory mode
    """

    def __init__(self, store: Optional[ArtifactStore] = None):
        self.store = store

    def artifact_path(self, config: BuildConfiguration, build_result: BuildResult) -> str:
        """
        Compute the absolute path of the artifact.

        Raises:
            ArtifactNotFound: If the build names no entry-point or asset
        """
        entry = config.primary
        target = build_result.primary()
        if not target.entrypoints:
            raise ArtifactNotFound("build result contains no entry-points")

        name, assets = next(iter(target.entrypoints.items()))
        if not assets:
            raise ArtifactNotFound(f"entry-point '{name}' has no assets")

        return os.path.abspath(os.path.join(entry.context, entry.output_path, assets[0]))

    def locate(self, config: BuildConfiguration, build_result: BuildResult,
               use_in_memory: bool = False) -> ArtifactRef:
        """
        Locate the artifact on disk, or read it from the in-memory store.

        Raises:
            ArtifactNotFound: If the build names no entry-point or asset
            StoreReadFailure: If in-memory mode finds no content at the path
        """
        path = self.artifact_path(config, build_result)
        if not use_in_memory:
            logger.debug(f"Located artifact at {path}")
            return FileArtifact(path=path)

        if self.store is None:
            raise StoreReadFailure(path)
        try:
            content = self.store.read(path)
        except FileNotFoundError:
            raise StoreReadFailure(path) from None

        logger.debug(f"Read {len(content)} bytes of artifact {path} from memory")
        return InlineArtifact(path=path, content=content.decode("utf-8", errors="replace"))
