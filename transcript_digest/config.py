"""
Configuration for transcript summarization.

Environment-based settings use Pydantic settings. A run never reads them
directly: callers turn settings into an immutable PipelineConfig snapshot
and pass it to the pipeline.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transcript_digest.models import ItemCategory

DEFAULT_CATEGORY_CAPS = {
    ItemCategory.TASK: 15,
    ItemCategory.REMINDER: 15,
    ItemCategory.TITLE: 5,
}


class PipelineConfig(BaseModel):
    """Per-run pipeline configuration.

    Durations are in seconds. When ``pacing_delay`` is None the delay comes
    from the pacing policy for ``backend_tier``.
    """

    model_config = ConfigDict(frozen=True)

    max_tokens_per_chunk: int = Field(default=32_000, ge=1)
    per_category_cap: dict[ItemCategory, int] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_CAPS)
    )
    similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    retry_count: int = Field(default=1, ge=0)
    retry_delay: float = Field(default=1.0, ge=0.0)
    pacing_delay: Optional[float] = Field(default=None, ge=0.0)
    max_reduction_depth: int = Field(default=10, ge=1)
    backend_tier: str = "standard"

    @field_validator("per_category_cap")
    @classmethod
    def check_caps(cls, v: dict[ItemCategory, int]) -> dict[ItemCategory, int]:
        for category, cap in v.items():
            if cap < 0:
                raise ValueError(f"cap for {category.value} must be >= 0")
        return v


class BackendSettings(BaseSettings):
    """Text-generation backend settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    api_base: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUMMARIZATION_API_BASE", "SUMMARIZATION__API_BASE"
        ),
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "SUMMARIZATION_API_KEY", "SUMMARIZATION__API_KEY"
        ),
    )
    model: str = Field(
        default="mistral-medium-2508",
        validation_alias=AliasChoices("SUMMARIZATION_MODEL", "SUMMARIZATION__MODEL"),
    )
    timeout: float = Field(
        default=45.0,
        validation_alias=AliasChoices(
            "SUMMARIZATION_TIMEOUT", "SUMMARIZATION__TIMEOUT"
        ),
    )
    temperature: float = Field(
        default=0.1,
        validation_alias=AliasChoices(
            "SUMMARIZATION_TEMPERATURE", "SUMMARIZATION__TEMPERATURE"
        ),
    )

    def is_configured(self) -> bool:
        """Check if the backend has an endpoint and credentials."""
        return bool(self.api_base and self.api_key.get_secret_value())


class PipelineSettings(BaseSettings):
    """Environment configuration for the summarization pipeline."""

    service_name: str = Field(
        default="transcript-digest",
        validation_alias=AliasChoices("SERVICE_NAME"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: str = Field(
        default="text",
        validation_alias=AliasChoices("LOG_FORMAT"),
        description="Log format: 'json' or 'text'",
    )

    # Chunking and reduction
    max_tokens_per_chunk: int = Field(
        default=32_000,
        validation_alias=AliasChoices(
            "SUMMARY_MAX_TOKENS_PER_CHUNK", "SUMMARY__MAX_TOKENS_PER_CHUNK"
        ),
    )
    max_reduction_depth: int = Field(
        default=10,
        validation_alias=AliasChoices(
            "SUMMARY_MAX_REDUCTION_DEPTH", "SUMMARY__MAX_REDUCTION_DEPTH"
        ),
    )

    # Deduplication
    similarity_threshold: float = Field(
        default=0.8,
        validation_alias=AliasChoices(
            "SUMMARY_SIMILARITY_THRESHOLD", "SUMMARY__SIMILARITY_THRESHOLD"
        ),
    )
    max_tasks: int = Field(
        default=15,
        validation_alias=AliasChoices("SUMMARY_MAX_TASKS", "SUMMARY__MAX_TASKS"),
    )
    max_reminders: int = Field(
        default=15,
        validation_alias=AliasChoices("SUMMARY_MAX_REMINDERS", "SUMMARY__MAX_REMINDERS"),
    )
    max_titles: int = Field(
        default=5,
        validation_alias=AliasChoices("SUMMARY_MAX_TITLES", "SUMMARY__MAX_TITLES"),
    )

    # Retry and pacing
    retry_count: int = Field(
        default=1,
        validation_alias=AliasChoices("SUMMARY_RETRY_COUNT", "SUMMARY__RETRY_COUNT"),
    )
    retry_delay: float = Field(
        default=1.0,
        validation_alias=AliasChoices("SUMMARY_RETRY_DELAY", "SUMMARY__RETRY_DELAY"),
    )
    pacing_delay: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("SUMMARY_PACING_DELAY", "SUMMARY__PACING_DELAY"),
    )
    backend_tier: str = Field(
        default="standard",
        validation_alias=AliasChoices("SUMMARY_BACKEND_TIER", "SUMMARY__BACKEND_TIER"),
    )

    backend: BackendSettings = Field(default_factory=BackendSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    def to_pipeline_config(self) -> PipelineConfig:
        """Build the immutable per-run configuration snapshot."""
        return PipelineConfig(
            max_tokens_per_chunk=self.max_tokens_per_chunk,
            per_category_cap={
                ItemCategory.TASK: self.max_tasks,
                ItemCategory.REMINDER: self.max_reminders,
                ItemCategory.TITLE: self.max_titles,
            },
            similarity_threshold=self.similarity_threshold,
            retry_count=self.retry_count,
            retry_delay=self.retry_delay,
            pacing_delay=self.pacing_delay,
            max_reduction_depth=self.max_reduction_depth,
            backend_tier=self.backend_tier,
        )


@lru_cache
def get_settings() -> PipelineSettings:
    """Get cached settings instance."""
    return PipelineSettings()


def configure_logging(settings: Optional[PipelineSettings] = None) -> None:
    """Configure logging based on settings.

    Args:
        settings: Optional settings instance, uses cached settings if not provided
    """
    import logging
    import sys

    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if settings.log_format == "json":
        import json

        # Attributes every LogRecord carries; anything else came from extra=
        reserved = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

        class JSONFormatter(logging.Formatter):
            def format(self, record):
                log_record = {
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                    "service": settings.service_name,
                }
                for key, value in vars(record).items():
                    if key not in reserved and key not in log_record:
                        log_record[key] = value
                if record.exc_info:
                    log_record["exception"] = self.formatException(record.exc_info)
                return json.dumps(log_record, default=str)

        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)

    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
