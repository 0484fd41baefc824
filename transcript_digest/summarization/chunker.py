"""Transcript chunking for bounded-context summarization."""
from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)

TokenEstimator = Callable[[str], int]

# A sentence is a run of non-delimiters, its closing delimiters (or the end of
# the text) and any trailing whitespace. Matches tile the text exactly.
_SENTENCE = re.compile(r"[^.!?]*(?:[.!?]+|$)\s*")
_WORD = re.compile(r"\s*\S+\s*|\s+")


def estimate_tokens(text: str) -> int:
    """Estimate token count for text.

    Uses rough approximation of 4 characters per token.

    Args:
        text: Text to estimate

    Returns:
        Estimated token count
    """
    return len(text) // 4


@dataclass(frozen=True)
class Chunk:
    """An ordered, token-bounded slice of the input text."""

    index: int
    text: str
    estimated_tokens: int


class TextChunker:
    """Splits text into ordered chunks that fit a token budget.

    Chunks are sentence-aligned: sentences (ending in ``.``, ``!`` or ``?``)
    are accumulated until the next one would exceed the budget. A sentence
    that alone exceeds the budget is hard-split on word boundaries, and a
    single oversized word on character boundaries.

    Concatenating the chunk texts in order reproduces the input exactly.
    """

    def __init__(self, estimator: Optional[TokenEstimator] = None):
        """Initialize chunker.

        Args:
            estimator: Token estimator; defaults to ``estimate_tokens``
        """
        self.estimator = estimator or estimate_tokens

    def chunk(self, text: str, max_tokens: int) -> List[Chunk]:
        """Chunk text into segments of at most ``max_tokens`` estimated tokens.

        Args:
            text: Text to chunk
            max_tokens: Token budget per chunk

        Returns:
            Ordered chunks; empty for empty or whitespace-only input
        """
        if max_tokens < 1:
            raise ValueError("max_tokens must be >= 1")
        if not text or not text.strip():
            return []

        total = self.estimator(text)
        if total <= max_tokens:
            return [Chunk(index=0, text=text, estimated_tokens=total)]

        pieces: List[str] = []
        current = ""
        for unit in self._units(text, max_tokens):
            candidate = current + unit
            if current and self.estimator(candidate) > max_tokens:
                pieces.append(current)
                current = unit
            else:
                current = candidate
        if current:
            pieces.append(current)

        chunks = [
            Chunk(index=i, text=piece, estimated_tokens=self.estimator(piece))
            for i, piece in enumerate(pieces)
        ]
        logger.debug(
            "Segmented text",
            extra={"chunk_count": len(chunks), "max_tokens": max_tokens, "estimated_tokens": total},
        )
        return chunks

    def needs_chunking(self, text: str, max_tokens: int) -> bool:
        """Check whether text exceeds the token budget."""
        return self.estimator(text) > max_tokens

    def _units(self, text: str, max_tokens: int) -> Iterator[str]:
        """Yield sentences, hard-splitting any that exceed the budget."""
        for sentence in _SENTENCE.findall(text):
            if not sentence:
                continue
            if self.estimator(sentence) <= max_tokens:
                yield sentence
            else:
                logger.debug(
                    "Hard-splitting oversized sentence",
                    extra={"sentence_chars": len(sentence)},
                )
                yield from self._hard_split(sentence, max_tokens)

    def _hard_split(self, sentence: str, max_tokens: int) -> Iterator[str]:
        """Split an oversized sentence into budget-sized fragments."""
        current = ""
        for word in _WORD.findall(sentence):
            if self.estimator(word) > max_tokens:
                if current:
                    yield current
                    current = ""
                yield from self._split_chars(word, max_tokens)
                continue
            candidate = current + word
            if current and self.estimator(candidate) > max_tokens:
                yield current
                current = word
            else:
                current = candidate
        if current:
            yield current

    def _split_chars(self, word: str, max_tokens: int) -> Iterator[str]:
        """Split a single oversized word at the longest prefix that fits."""
        rest = word
        while rest:
            if self.estimator(rest) <= max_tokens:
                yield rest
                return
            # Longest prefix whose estimate fits; at least one character
            cut = bisect.bisect_left(
                range(1, len(rest) + 1),
                True,
                key=lambda n: self.estimator(rest[:n]) > max_tokens,
            )
            cut = max(1, cut)
            yield rest[:cut]
            rest = rest[cut:]

