"""
Long-document summarization for transcripts.

Turns an arbitrarily long transcript into one structured result (summary,
categorized extracted items, content classification) using a text-generation
backend that only accepts bounded-size requests.

Contains:
- config: Environment settings, the per-run PipelineConfig and logging setup
- models: Pydantic models for extracted items and backend answers
- status: Pipeline stage enum
- errors: Error taxonomy surfaced to callers
- summarization: Chunking, chunk processing, deduplication and reduction
"""

from transcript_digest.config import PipelineConfig, PipelineSettings, get_settings
from transcript_digest.errors import (
    ChunkBackendError,
    ConfigurationError,
    PipelineExhaustedError,
    RecursionLimitExceeded,
    SummarizationError,
)
from transcript_digest.models import ContentType, ItemCategory

__all__ = [
    "PipelineConfig",
    "PipelineSettings",
    "get_settings",
    "SummarizationError",
    "ChunkBackendError",
    "PipelineExhaustedError",
    "RecursionLimitExceeded",
    "ConfigurationError",
    "ContentType",
    "ItemCategory",
]
