"""Shared helpers for tests."""

from __future__ import annotations

from transcript_digest.models import ReminderItem, TaskItem, TitleItem


def word_count(text: str) -> int:
    """Token estimator for tests: one token per whitespace-separated word."""
    return len(text.split())


def task(text: str, confidence: float = 0.5) -> TaskItem:
    return TaskItem(text=text, confidence=confidence)


def reminder(text: str, urgency: str = "later") -> ReminderItem:
    return ReminderItem(text=text, urgency=urgency)


def title(text: str) -> TitleItem:
    return TitleItem(text=text)
