"""Sequential, paced, retried processing of chunks through the backend."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, NamedTuple, Optional, Sequence

from transcript_digest.config import PipelineConfig
from transcript_digest.errors import ChunkBackendError, PipelineExhaustedError
from transcript_digest.models import ChunkAnalysis, ContentType, ExtractedItem, ItemCategory

from .backend import SummarizationBackend, invoke_backend
from .chunker import Chunk
from .pacing import PacingPolicy

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of one attempted chunk."""

    chunk_index: int
    succeeded: bool
    summary: str = ""
    items: dict[ItemCategory, list[ExtractedItem]] = field(default_factory=dict)
    content_type: ContentType = ContentType.GENERAL
    attempts: int = 0
    error: Optional[str] = None

    @classmethod
    def from_analysis(
        cls, chunk_index: int, analysis: ChunkAnalysis, attempts: int
    ) -> "ChunkResult":
        return cls(
            chunk_index=chunk_index,
            succeeded=True,
            summary=analysis.summary,
            items=analysis.items,
            content_type=analysis.content_type,
            attempts=attempts,
        )


class ProcessingReport(NamedTuple):
    """Per-chunk results plus success/failure counts."""

    results: List[ChunkResult]
    success_count: int
    fail_count: int

    @property
    def successful(self) -> List[ChunkResult]:
        return [r for r in self.results if r.succeeded]


class ChunkProcessor:
    """Drives chunks through the backend one at a time, in index order.

    Each chunk gets ``1 + retry_count`` attempts separated by ``retry_delay``.
    A chunk that exhausts its attempts is recorded as failed and processing
    continues. After each successful chunk except the last, the pacing delay
    is awaited before the next call.
    """

    def __init__(
        self,
        pacing: Optional[PacingPolicy] = None,
        sleep: Optional[Sleep] = None,
    ):
        """Initialize processor.

        Args:
            pacing: Pacing policy; resolves the delay between calls
            sleep: Awaitable sleep used for retry and pacing delays
        """
        self.pacing = pacing or PacingPolicy()
        self.sleep = sleep or asyncio.sleep

    async def process(
        self,
        chunks: Sequence[Chunk],
        backend: SummarizationBackend,
        config: PipelineConfig,
    ) -> ProcessingReport:
        """Process chunks sequentially.

        Args:
            chunks: Ordered chunks
            backend: Backend performing the calls
            config: Run configuration snapshot

        Returns:
            Report with one result per chunk, in chunk order

        Raises:
            PipelineExhaustedError: If no chunk succeeded
        """
        pacing_delay = self.pacing.resolve(config)
        ordered = sorted(chunks, key=lambda c: c.index)
        results: List[ChunkResult] = []
        success_count = 0
        fail_count = 0

        for position, chunk in enumerate(ordered):
            result = await self._process_one(chunk, backend, config)
            results.append(result)

            if not result.succeeded:
                fail_count += 1
                continue

            success_count += 1
            if position < len(ordered) - 1 and pacing_delay > 0:
                await self.sleep(pacing_delay)

        if fail_count:
            logger.warning(
                "Chunk processing completed with failures",
                extra={"success_count": success_count, "failure_count": fail_count},
            )

        if success_count == 0:
            logger.error(
                "All chunks failed to process",
                extra={"chunk_count": len(ordered)},
            )
            raise PipelineExhaustedError(
                f"All {len(ordered)} chunks failed to process",
                failed_chunks=fail_count,
            )

        return ProcessingReport(results, success_count, fail_count)

    async def _process_one(
        self,
        chunk: Chunk,
        backend: SummarizationBackend,
        config: PipelineConfig,
    ) -> ChunkResult:
        """Attempt one chunk with bounded retry."""
        max_attempts = 1 + config.retry_count
        last_error: Optional[ChunkBackendError] = None

        for attempt in range(1, max_attempts + 1):
            try:
                analysis = await invoke_backend(
                    "process_chunk",
                    lambda: backend.process_chunk(chunk.text),
                    chunk_index=chunk.index,
                )
            except ChunkBackendError as e:
                last_error = e
                if attempt < max_attempts:
                    logger.warning(
                        f"Chunk {chunk.index + 1} failed, retrying: {e}",
                        extra={
                            "chunk_index": chunk.index,
                            "attempt": attempt,
                            "max_attempts": max_attempts,
                        },
                    )
                    if config.retry_delay > 0:
                        await self.sleep(config.retry_delay)
                continue

            logger.debug(
                "Chunk processed",
                extra={"chunk_index": chunk.index, "attempt": attempt},
            )
            return ChunkResult.from_analysis(chunk.index, analysis, attempt)

        logger.error(
            f"Chunk {chunk.index + 1} failed after {max_attempts} attempts, skipping",
            extra={"chunk_index": chunk.index, "error": str(last_error)},
        )
        return ChunkResult(
            chunk_index=chunk.index,
            succeeded=False,
            attempts=max_attempts,
            error=str(last_error) if last_error else None,
        )
