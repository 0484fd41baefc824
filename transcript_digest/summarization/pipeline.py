"""SummarizationPipeline - Orchestrator for long-transcript summarization."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import Awaitable, Callable, List, Mapping, Optional, Sequence

from transcript_digest.config import PipelineConfig, PipelineSettings, get_settings
from transcript_digest.errors import ConfigurationError
from transcript_digest.models import ContentType, ExtractedItem, ItemCategory
from transcript_digest.status import PipelineStage

from .backend import SummarizationBackend
from .chunker import TextChunker, TokenEstimator
from .dedup import Deduplicator
from .http_backend import ChatCompletionBackend
from .pacing import PacingPolicy
from .processor import ChunkProcessor, ChunkResult
from .reducer import SummaryReducer

logger = logging.getLogger(__name__)

StageCallback = Callable[[PipelineStage], None]


def _empty_items() -> Mapping[ItemCategory, tuple[ExtractedItem, ...]]:
    return {category: () for category in ItemCategory}


@dataclass(frozen=True)
class PipelineOutcome:
    """Final result of one pipeline run. Item lists are read-only."""

    summary: str
    items: Mapping[ItemCategory, tuple[ExtractedItem, ...]] = field(default_factory=_empty_items)
    content_type: ContentType = ContentType.GENERAL
    successful_chunks: int = 0
    failed_chunks: int = 0
    elapsed: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        items = {category: tuple(values) for category, values in self.items.items()}
        object.__setattr__(self, "items", MappingProxyType(items))

    @property
    def tasks(self) -> tuple[ExtractedItem, ...]:
        return self.items.get(ItemCategory.TASK, ())

    @property
    def reminders(self) -> tuple[ExtractedItem, ...]:
        return self.items.get(ItemCategory.REMINDER, ())

    @property
    def titles(self) -> tuple[ExtractedItem, ...]:
        return self.items.get(ItemCategory.TITLE, ())

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": self.summary,
            "content_type": self.content_type.value,
            "items": {
                category.value: [item.model_dump(mode="json") for item in items]
                for category, items in self.items.items()
            },
            "successful_chunks": self.successful_chunks,
            "failed_chunks": self.failed_chunks,
            "elapsed_seconds": self.elapsed.total_seconds(),
        }


class SummarizationPipeline:
    """Pure orchestrator for long-transcript summarization.

    Runs Chunking -> ChunkProcessing -> Aggregating -> Deduplicating ->
    Reducing -> Done. Specialized logic is delegated to the chunker,
    processor, deduplicator and reducer. The pipeline keeps no per-run state,
    so independent runs may execute concurrently.
    """

    def __init__(
        self,
        estimator: Optional[TokenEstimator] = None,
        pacing: Optional[PacingPolicy] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """Initialize summarization pipeline.

        Args:
            estimator: Token estimator shared by chunking and reduction
            pacing: Pacing policy for delays between backend calls
            sleep: Awaitable sleep for retry and pacing delays
        """
        self.chunker = TextChunker(estimator)
        self.pacing = pacing or PacingPolicy()
        sleep = sleep or asyncio.sleep
        self.processor = ChunkProcessor(pacing=self.pacing, sleep=sleep)
        self.reducer = SummaryReducer(chunker=self.chunker, pacing=self.pacing, sleep=sleep)

    async def run(
        self,
        text: str,
        content_type_hint: Optional[ContentType],
        backend: Optional[SummarizationBackend],
        config: PipelineConfig,
        *,
        on_stage: Optional[StageCallback] = None,
    ) -> PipelineOutcome:
        """Summarize text, extract items and classify it.

        Args:
            text: Transcript text of any length
            content_type_hint: Content type reported when there is nothing to process
            backend: Backend performing the calls
            config: Run configuration; snapshotted at call start
            on_stage: Optional callback invoked as the run enters each stage

        Returns:
            Pipeline outcome

        Raises:
            ConfigurationError: If the backend is missing or unavailable
            PipelineExhaustedError: If every chunk failed
            RecursionLimitExceeded: If summary reduction did not converge
            ChunkBackendError: If a reducer call failed
        """
        config = config.model_copy(deep=True)
        started = time.monotonic()

        def enter(stage: PipelineStage) -> None:
            logger.debug("Pipeline stage", extra={"stage": stage.value})
            if on_stage is not None:
                on_stage(stage)

        enter(PipelineStage.START)

        if backend is None or not backend.is_available:
            name = getattr(backend, "name", None)
            logger.error("Summarization backend unavailable", extra={"backend": name})
            enter(PipelineStage.FAILED)
            raise ConfigurationError(
                f"Summarization backend {name!r} is not available"
                if name
                else "No summarization backend configured"
            )

        try:
            enter(PipelineStage.CHUNKING)
            chunks = self.chunker.chunk(text, config.max_tokens_per_chunk)
            if not chunks:
                logger.info("Nothing to summarize: empty input")
                enter(PipelineStage.DONE)
                return PipelineOutcome(
                    summary="",
                    content_type=content_type_hint or ContentType.GENERAL,
                    elapsed=timedelta(seconds=time.monotonic() - started),
                )

            logger.info(
                "Starting summarization run",
                extra={
                    "backend": backend.name,
                    "chunk_count": len(chunks),
                    "max_tokens_per_chunk": config.max_tokens_per_chunk,
                },
            )

            enter(PipelineStage.CHUNK_PROCESSING)
            report = await self.processor.process(chunks, backend, config)

            enter(PipelineStage.AGGREGATING)
            successful = report.successful
            summaries = [r.summary for r in successful]
            merged_items = self._merge_items(successful)
            content_type = successful[0].content_type

            enter(PipelineStage.DEDUPLICATING)
            deduplicator = Deduplicator(config.similarity_threshold)
            unique_items = deduplicator.dedupe_by_category(
                merged_items, config.per_category_cap
            )

            enter(PipelineStage.REDUCING)
            summary = await self.reducer.reduce(summaries, content_type, backend, config)
        except asyncio.CancelledError:
            logger.info("Summarization run cancelled")
            raise
        except Exception:
            enter(PipelineStage.FAILED)
            raise

        elapsed = timedelta(seconds=time.monotonic() - started)
        enter(PipelineStage.DONE)
        logger.info(
            "Completed summarization run",
            extra={
                "successful_chunks": report.success_count,
                "failed_chunks": report.fail_count,
                "summary_length": len(summary),
                "elapsed_seconds": elapsed.total_seconds(),
            },
        )

        return PipelineOutcome(
            summary=summary,
            items={category: tuple(items) for category, items in unique_items.items()},
            content_type=content_type,
            successful_chunks=report.success_count,
            failed_chunks=report.fail_count,
            elapsed=elapsed,
        )

    def _merge_items(
        self, results: Sequence[ChunkResult]
    ) -> dict[ItemCategory, List[ExtractedItem]]:
        """Flatten items per category, in chunk order then within-chunk order."""
        merged: dict[ItemCategory, List[ExtractedItem]] = {c: [] for c in ItemCategory}
        for result in sorted(results, key=lambda r: r.chunk_index):
            for category, items in result.items.items():
                merged.setdefault(category, []).extend(items)
        return merged


def create_backend(settings: Optional[PipelineSettings] = None) -> ChatCompletionBackend:
    """Factory function to create the HTTP backend from settings.

    Args:
        settings: Settings instance, uses cached settings if not provided

    Returns:
        Configured ChatCompletionBackend
    """
    settings = settings or get_settings()
    return ChatCompletionBackend.from_settings(settings.backend)


async def summarize_transcript(
    text: str,
    settings: Optional[PipelineSettings] = None,
    *,
    backend: Optional[SummarizationBackend] = None,
    content_type_hint: Optional[ContentType] = None,
) -> PipelineOutcome:
    """Run the pipeline with configuration taken from settings.

    Args:
        text: Transcript text
        settings: Settings instance, uses cached settings if not provided
        backend: Backend override; defaults to the HTTP backend from settings
        content_type_hint: Content type reported for empty input

    Returns:
        Pipeline outcome
    """
    settings = settings or get_settings()
    pipeline = SummarizationPipeline()
    return await pipeline.run(
        text,
        content_type_hint,
        backend or create_backend(settings),
        settings.to_pipeline_config(),
    )
