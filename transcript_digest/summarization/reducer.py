"""Recursive reduction of partial summaries into one that fits the budget."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from transcript_digest.config import PipelineConfig
from transcript_digest.errors import RecursionLimitExceeded
from transcript_digest.models import ContentType

from .backend import SummarizationBackend, invoke_backend
from .chunker import TextChunker
from .pacing import PacingPolicy

logger = logging.getLogger(__name__)

SUMMARY_SEPARATOR = "\n\n"


class SummaryReducer:
    """Collapses partial summaries into a single meta-summary.

    If the joined summaries fit the context budget they are summarized in one
    call. Otherwise they are re-chunked, each chunk is summarized (paced like
    chunk processing), and the chunk summaries are reduced again one level
    deeper. Backend failures propagate; this layer does not retry.
    """

    def __init__(
        self,
        chunker: Optional[TextChunker] = None,
        pacing: Optional[PacingPolicy] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.chunker = chunker or TextChunker()
        self.pacing = pacing or PacingPolicy()
        self.sleep = sleep or asyncio.sleep

    async def reduce(
        self,
        partial_summaries: Sequence[str],
        content_type: ContentType,
        backend: SummarizationBackend,
        config: PipelineConfig,
        depth: int = 0,
    ) -> str:
        """Reduce partial summaries to one summary within the context budget.

        Args:
            partial_summaries: Summaries in document order
            content_type: Classification passed to the backend
            backend: Backend performing the calls
            config: Run configuration snapshot
            depth: Current recursion depth

        Returns:
            Final summary text

        Raises:
            RecursionLimitExceeded: If ``depth`` reaches ``config.max_reduction_depth``
            ChunkBackendError: If any summarization call fails
        """
        if depth >= config.max_reduction_depth:
            logger.error(
                "Summary reduction depth exceeded",
                extra={"depth": depth, "max_depth": config.max_reduction_depth},
            )
            raise RecursionLimitExceeded(
                f"Summary reduction did not fit the context budget within "
                f"{config.max_reduction_depth} passes",
                depth=depth,
            )

        if not partial_summaries:
            return ""

        text = SUMMARY_SEPARATOR.join(partial_summaries)
        budget = config.max_tokens_per_chunk

        if not self.chunker.needs_chunking(text, budget):
            logger.debug(
                "Summarizing reduced text directly",
                extra={"depth": depth, "summary_count": len(partial_summaries)},
            )
            return await invoke_backend(
                "summarize_text",
                lambda: backend.summarize_text(text, content_type),
            )

        chunks = self.chunker.chunk(text, budget)
        pacing_delay = self.pacing.resolve(config)
        logger.info(
            "Reducing oversized summary text",
            extra={"depth": depth, "chunk_count": len(chunks)},
        )

        chunk_summaries: List[str] = []
        for position, chunk in enumerate(chunks):
            summary = await invoke_backend(
                "summarize_text",
                lambda: backend.summarize_text(chunk.text, content_type),
                chunk_index=chunk.index,
            )
            chunk_summaries.append(summary)
            if position < len(chunks) - 1 and pacing_delay > 0:
                await self.sleep(pacing_delay)

        return await self.reduce(
            chunk_summaries, content_type, backend, config, depth=depth + 1
        )
