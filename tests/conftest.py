from __future__ import annotations

import pytest

from transcript_digest.config import PipelineConfig, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "SUMMARIZATION_API_BASE", "SUMMARIZATION_API_KEY", "SUMMARIZATION_MODEL",
        "SUMMARIZATION_TIMEOUT", "SUMMARY_MAX_TOKENS_PER_CHUNK", "SUMMARY_RETRY_COUNT",
        "SUMMARY_RETRY_DELAY", "SUMMARY_PACING_DELAY", "SUMMARY_BACKEND_TIER",
        "SUMMARY_SIMILARITY_THRESHOLD", "SUMMARY_MAX_TASKS", "SUMMARY_MAX_REMINDERS",
        "SUMMARY_MAX_TITLES", "SUMMARY_MAX_REDUCTION_DEPTH", "LOG_LEVEL", "LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def recording_sleep():
    """
    Provide RecordingSleep for tests.

    Example:
        async def test_pacing(recording_sleep):
            processor = ChunkProcessor(sleep=recording_sleep)
            ...
            assert recording_sleep.delays == [0.3, 0.3]
    """
    from tests.fakes import RecordingSleep
    return RecordingSleep()


@pytest.fixture
def word_config():
    """Small-budget config for word-count estimated tests."""
    return PipelineConfig(max_tokens_per_chunk=4, retry_delay=1.0, backend_tier="standard")


@pytest.fixture
def three_chunk_text():
    """Text that splits into three four-word chunks under word_count with budget 4."""
    return "Chunk one text here. Chunk two text here. Chunk three text here."
