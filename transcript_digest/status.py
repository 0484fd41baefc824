"""
Pipeline stage tracking.

One run moves linearly through these stages; it never moves back.
"""

from __future__ import annotations

from enum import Enum


class PipelineStage(str, Enum):
    """Stage of a single pipeline run."""

    START = "start"
    CHUNKING = "chunking"
    CHUNK_PROCESSING = "chunk_processing"
    AGGREGATING = "aggregating"
    DEDUPLICATING = "deduplicating"
    REDUCING = "reducing"
    DONE = "done"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) stage."""
        return self in (PipelineStage.DONE, PipelineStage.FAILED)
