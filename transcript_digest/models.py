"""
Pydantic models for backend answers and extracted items.

These models define what the backend returns for a single chunk and the
items that flow through deduplication into the final outcome.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ItemCategory(str, Enum):
    """Category of an extracted item."""

    TASK = "task"
    REMINDER = "reminder"
    TITLE = "title"


class ContentType(str, Enum):
    """Classification of the source text."""

    MEETING = "Meeting"
    PERSONAL_JOURNAL = "Personal Journal"
    TECHNICAL = "Technical"
    GENERAL = "General"

    @classmethod
    def parse(cls, value: Any) -> "ContentType":
        """Lenient lookup by value or name; unknown labels map to GENERAL."""
        if isinstance(value, cls):
            return value
        label = str(value or "").strip().lower().replace("_", " ")
        for member in cls:
            if label in (member.value.lower(), member.name.lower().replace("_", " ")):
                return member
        return cls.GENERAL


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReminderUrgency(str, Enum):
    IMMEDIATE = "immediate"
    TODAY = "today"
    THIS_WEEK = "this_week"
    LATER = "later"


def _normalize_label(value: Any, enum_cls: type[Enum], default: Enum) -> Enum:
    """Map a free-form label onto an enum member; unknown labels get the default."""
    if isinstance(value, enum_cls):
        return value
    label = str(value or "").strip().lower().replace(" ", "_")
    try:
        return enum_cls(label)
    except ValueError:
        return default


class ExtractedItem(BaseModel):
    """An item extracted from one chunk (task, reminder or title)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    category: ItemCategory

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        try:
            value = float(v)
        except (TypeError, ValueError):
            return 0.5
        if math.isnan(value):
            return 0.5
        return min(max(value, 0.0), 1.0)


class TaskItem(ExtractedItem):
    category: ItemCategory = ItemCategory.TASK
    priority: TaskPriority = TaskPriority.MEDIUM
    time_reference: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("time_reference", "timeReference"),
    )
    task_category: str = Field(
        default="general",
        validation_alias=AliasChoices("task_category", "taskCategory"),
    )

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return _normalize_label(v, TaskPriority, TaskPriority.MEDIUM)


class ReminderItem(ExtractedItem):
    category: ItemCategory = ItemCategory.REMINDER
    time_reference: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("time_reference", "timeReference"),
    )
    urgency: ReminderUrgency = ReminderUrgency.LATER

    @field_validator("urgency", mode="before")
    @classmethod
    def normalize_urgency(cls, v):
        return _normalize_label(v, ReminderUrgency, ReminderUrgency.LATER)


class TitleItem(ExtractedItem):
    category: ItemCategory = ItemCategory.TITLE


class ChunkAnalysis(BaseModel):
    """Structured answer from the backend for a single chunk."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    tasks: list[TaskItem] = Field(default_factory=list)
    reminders: list[ReminderItem] = Field(default_factory=list)
    titles: list[TitleItem] = Field(default_factory=list)
    content_type: ContentType = Field(
        default=ContentType.GENERAL,
        validation_alias=AliasChoices("content_type", "contentType"),
    )

    @field_validator("content_type", mode="before")
    @classmethod
    def parse_content_type(cls, v):
        return ContentType.parse(v)

    @property
    def items(self) -> dict[ItemCategory, list[ExtractedItem]]:
        """Extracted items keyed by category."""
        return {
            ItemCategory.TASK: list(self.tasks),
            ItemCategory.REMINDER: list(self.reminders),
            ItemCategory.TITLE: list(self.titles),
        }
