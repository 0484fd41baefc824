"""Text-generation backend abstraction for the pipeline."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, TypeVar

from transcript_digest.errors import ChunkBackendError
from transcript_digest.models import ChunkAnalysis, ContentType

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SummarizationBackend(ABC):
    """Base class for text-generation backends.

    Backends handle the model call (text in -> structured result out). The
    pipeline orchestrates chunking, retries, pacing, deduplication and
    reduction around them.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g., 'mistral', 'openai')"""
        pass

    @property
    def is_available(self) -> bool:
        """Whether the backend is configured and may be called."""
        return True

    @abstractmethod
    async def process_chunk(self, text: str) -> ChunkAnalysis:
        """Summarize one chunk, extract its items and classify it.

        Args:
            text: Chunk text

        Returns:
            Structured analysis of the chunk

        Raises:
            ChunkBackendError: If the call failed
        """
        pass

    @abstractmethod
    async def summarize_text(self, text: str, content_type: ContentType) -> str:
        """Summarize text that already fits the context budget.

        Args:
            text: Text to summarize (typically joined partial summaries)
            content_type: Classification guiding the summary style

        Returns:
            Summary text

        Raises:
            ChunkBackendError: If the call failed
        """
        pass


async def invoke_backend(
    operation: str,
    call: Callable[[], Awaitable[Optional[T]]],
    *,
    chunk_index: Optional[int] = None,
) -> T:
    """Await a single backend call, normalizing failures to ChunkBackendError.

    A raised exception or a ``None`` result both count as failure.
    Cancellation is not a failure and propagates unchanged.

    Args:
        operation: Operation name for logs and error messages
        call: Zero-argument coroutine factory performing the call
        chunk_index: Chunk the call belongs to, if any

    Returns:
        The backend's result
    """
    try:
        result = await call()
    except ChunkBackendError as e:
        if e.chunk_index is None:
            e.chunk_index = chunk_index
        raise
    except Exception as e:
        raise ChunkBackendError(
            f"{operation} failed: {e}", chunk_index=chunk_index
        ) from e

    if result is None:
        raise ChunkBackendError(
            f"{operation} returned no result", chunk_index=chunk_index
        )
    return result
