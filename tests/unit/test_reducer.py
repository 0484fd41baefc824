"""Unit tests for recursive summary reduction."""
import pytest

from transcript_digest.config import PipelineConfig
from transcript_digest.errors import ChunkBackendError, RecursionLimitExceeded
from transcript_digest.models import ContentType
from transcript_digest.summarization.chunker import TextChunker, estimate_tokens
from transcript_digest.summarization.reducer import SummaryReducer
from tests.fakes import ScriptedBackend
from tests.utils import word_count

FILLER = "This is a sentence of filler text. " * 571  # ~5,000 tokens


@pytest.mark.asyncio
async def test_summaries_within_budget_use_a_single_call(recording_sleep):
    backend = ScriptedBackend()
    reducer = SummaryReducer(sleep=recording_sleep)

    result = await reducer.reduce(
        ["first part", "second part"], ContentType.MEETING, backend, PipelineConfig()
    )

    assert result == "final: first part | second part"
    assert backend.summary_calls == [("first part\n\nsecond part", ContentType.MEETING)]
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_oversized_summaries_are_rechunked_then_reduced(recording_sleep):
    partials = [FILLER] * 10
    assert estimate_tokens("\n\n".join(partials)) > 45_000
    backend = ScriptedBackend(summarize=lambda text, ct: "Condensed section.")
    config = PipelineConfig(max_tokens_per_chunk=20_000)
    reducer = SummaryReducer(sleep=recording_sleep)

    result = await reducer.reduce(partials, ContentType.GENERAL, backend, config)

    # Three chunk summaries, then one final summary of the three
    assert len(backend.summary_calls) == 4
    assert all(estimate_tokens(text) <= 20_000 for text, _ in backend.summary_calls)
    assert backend.summary_calls[-1][0] == "\n\n".join(["Condensed section."] * 3)
    assert result == "Condensed section."
    assert recording_sleep.delays == [0.3, 0.3]


@pytest.mark.asyncio
async def test_non_shrinking_summaries_hit_recursion_limit(recording_sleep):
    backend = ScriptedBackend(summarize=lambda text, ct: text)
    config = PipelineConfig(max_tokens_per_chunk=4, max_reduction_depth=3)
    reducer = SummaryReducer(chunker=TextChunker(word_count), sleep=recording_sleep)

    with pytest.raises(RecursionLimitExceeded) as exc_info:
        await reducer.reduce(["a b c.", "d e f."], ContentType.GENERAL, backend, config)

    assert exc_info.value.depth == 3
    assert exc_info.value.code == "RECURSION_LIMIT"
    assert len(backend.summary_calls) == 6


@pytest.mark.asyncio
async def test_depth_at_limit_fails_before_any_call(recording_sleep):
    backend = ScriptedBackend()
    reducer = SummaryReducer(sleep=recording_sleep)

    with pytest.raises(RecursionLimitExceeded):
        await reducer.reduce(["x"], ContentType.GENERAL, backend, PipelineConfig(), depth=10)

    assert backend.summary_calls == []


@pytest.mark.asyncio
async def test_backend_failure_propagates_without_retry(recording_sleep):
    backend = ScriptedBackend(fail_summaries=True)
    reducer = SummaryReducer(sleep=recording_sleep)

    with pytest.raises(ChunkBackendError) as exc_info:
        await reducer.reduce(["only part"], ContentType.GENERAL, backend, PipelineConfig())

    assert "scripted summary failure" in str(exc_info.value)
    assert len(backend.summary_calls) == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_empty_summary_counts_as_failure(recording_sleep):
    backend = ScriptedBackend(summarize=lambda text, ct: None)
    reducer = SummaryReducer(sleep=recording_sleep)

    with pytest.raises(ChunkBackendError):
        await reducer.reduce(["part"], ContentType.GENERAL, backend, PipelineConfig())


@pytest.mark.asyncio
async def test_no_partial_summaries_yield_empty_text(recording_sleep):
    backend = ScriptedBackend()
    reducer = SummaryReducer(sleep=recording_sleep)

    assert await reducer.reduce([], ContentType.GENERAL, backend, PipelineConfig()) == ""
    assert backend.summary_calls == []
