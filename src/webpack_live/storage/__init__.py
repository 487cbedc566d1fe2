"""
Artifact storage for the webpack_live package.
"""

from .base import ArtifactStore
from .memory_store import MemoryStore

__all__ = [
    "ArtifactStore",
    "MemoryStore",
]
