"""Error taxonomy for the summarization pipeline.

Codes are stable so callers can map them to user-facing messages.
"""
from __future__ import annotations

from typing import Optional


class SummarizationError(Exception):
    """Base for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "UNKNOWN",
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable


class ChunkBackendError(SummarizationError):
    """A single backend call (chunk or reducer request) failed."""

    def __init__(
        self,
        message: str = "Backend call failed",
        *,
        chunk_index: Optional[int] = None,
    ) -> None:
        super().__init__(message, code="BACKEND_ERROR", retryable=True)
        self.chunk_index = chunk_index


class PipelineExhaustedError(SummarizationError):
    """Every chunk failed after exhausting its retries."""

    def __init__(
        self,
        message: str = "All chunks failed to process",
        *,
        failed_chunks: int = 0,
    ) -> None:
        super().__init__(message, code="EXHAUSTED", retryable=False)
        self.failed_chunks = failed_chunks


class RecursionLimitExceeded(SummarizationError):
    """Summary reduction did not fit the context budget within the depth bound."""

    def __init__(
        self,
        message: str = "Summary reduction did not converge",
        *,
        depth: int = 0,
    ) -> None:
        super().__init__(message, code="RECURSION_LIMIT", retryable=False)
        self.depth = depth


class ConfigurationError(SummarizationError):
    """Backend missing or not configured when a run starts."""

    def __init__(self, message: str = "Summarization backend is not configured") -> None:
        super().__init__(message, code="NOT_CONFIGURED", retryable=False)
