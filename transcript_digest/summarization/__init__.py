"""
Summarization module for long transcripts.

Provides token-bounded chunking, sequential paced chunk processing with
retries, item deduplication, recursive summary reduction and the pipeline
that composes them, plus an HTTP backend for chat completion APIs.
"""

from .chunker import Chunk, TextChunker, estimate_tokens
from .pacing import PacingPolicy
from .backend import SummarizationBackend, invoke_backend
from .processor import ChunkProcessor, ChunkResult, ProcessingReport
from .dedup import Deduplicator, dedupe, jaccard_similarity
from .reducer import SummaryReducer
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser
from .http_backend import ChatCompletionBackend
from .pipeline import (
    PipelineOutcome,
    SummarizationPipeline,
    create_backend,
    summarize_transcript,
)

__all__ = [
    "Chunk",
    "TextChunker",
    "estimate_tokens",
    "PacingPolicy",
    "SummarizationBackend",
    "invoke_backend",
    "ChunkProcessor",
    "ChunkResult",
    "ProcessingReport",
    "Deduplicator",
    "dedupe",
    "jaccard_similarity",
    "SummaryReducer",
    "PromptBuilder",
    "ResponseParser",
    "ChatCompletionBackend",
    "PipelineOutcome",
    "SummarizationPipeline",
    "create_backend",
    "summarize_transcript",
]
