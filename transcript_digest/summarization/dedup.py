"""
Deduplication of extracted items across chunk results.

The same logical task, reminder or title is often extracted from several
chunks with slightly different wording. Items are deduplicated per category:

- Exact duplicates: normalized text (lowercased, trimmed) already seen
- Near duplicates: Jaccard similarity of whitespace word sets strictly above
  the threshold against any previously accepted item

The first-seen item always wins and surviving items keep their arrival order.
The result is truncated to the category cap.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, TypeVar

from transcript_digest.models import ExtractedItem, ItemCategory

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=ExtractedItem)

DEFAULT_SIMILARITY_THRESHOLD = 0.8


def normalize_text(text: str) -> str:
    """Lowercase and trim item text for comparison."""
    return text.lower().strip()


def jaccard_similarity(first: str, second: str) -> float:
    """Jaccard similarity of the whitespace-separated word sets of two texts."""
    words_a = set(first.split())
    words_b = set(second.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def dedupe(
    items: Sequence[ItemT],
    cap: Optional[int] = None,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[ItemT]:
    """Remove exact and near-duplicate items, keeping first-seen order.

    Args:
        items: Items of a single category in arrival order
        cap: Maximum number of items to return; None for no limit
        threshold: Items more similar than this to an accepted item are dropped

    Returns:
        Accepted items in arrival order, at most ``cap`` long
    """
    accepted: list[ItemT] = []
    seen: set[str] = set()
    accepted_texts: list[str] = []

    for item in items:
        normalized = normalize_text(item.text)
        if normalized in seen:
            continue

        if any(
            jaccard_similarity(normalized, existing) > threshold
            for existing in accepted_texts
        ):
            continue

        accepted.append(item)
        seen.add(normalized)
        accepted_texts.append(normalized)

    if cap is not None:
        accepted = accepted[: max(cap, 0)]
    return accepted


class Deduplicator:
    """Applies ``dedupe`` independently to each category.

    Example:
        deduplicator = Deduplicator(similarity_threshold=0.8)
        unique = deduplicator.dedupe_by_category(items, caps)
        print(unique[ItemCategory.TASK])
    """

    def __init__(self, similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD):
        """
        Initialize the deduplicator.

        Args:
            similarity_threshold: Jaccard similarity above which two items are duplicates
        """
        self.similarity_threshold = similarity_threshold

    def dedupe_by_category(
        self,
        items: Mapping[ItemCategory, Sequence[ExtractedItem]],
        caps: Mapping[ItemCategory, int],
    ) -> dict[ItemCategory, list[ExtractedItem]]:
        """
        Deduplicate each category's items.

        Args:
            items: Flat item lists per category, in chunk then within-chunk order
            caps: Per-category maximum; categories without a cap are not truncated

        Returns:
            Deduplicated item lists per category
        """
        unique: dict[ItemCategory, list[ExtractedItem]] = {}
        for category, category_items in items.items():
            unique[category] = dedupe(
                category_items,
                cap=caps.get(category),
                threshold=self.similarity_threshold,
            )
            logger.debug(
                "Deduplicated items",
                extra={
                    "category": category.value,
                    "input_count": len(category_items),
                    "output_count": len(unique[category]),
                },
            )
        return unique
