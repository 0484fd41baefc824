"""Delays between consecutive backend calls, keyed by backend tier."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from transcript_digest.config import PipelineConfig

DEFAULT_TIER_DELAYS: Mapping[str, float] = MappingProxyType(
    {
        "premium": 0.5,
        "standard": 0.3,
        "economy": 0.2,
    }
)


@dataclass(frozen=True)
class PacingPolicy:
    """Pure lookup from backend tier to pacing delay (seconds).

    Premium backends get the most conservative spacing. Unknown tiers fall
    back to ``default_delay``.
    """

    delays: Mapping[str, float] = field(default_factory=lambda: DEFAULT_TIER_DELAYS)
    default_delay: float = 0.3

    def delay_for(self, tier: str) -> float:
        return self.delays.get((tier or "").strip().lower(), self.default_delay)

    def resolve(self, config: PipelineConfig) -> float:
        """Pacing delay for a run: explicit config value, else the tier delay."""
        if config.pacing_delay is not None:
            return config.pacing_delay
        return self.delay_for(config.backend_tier)
