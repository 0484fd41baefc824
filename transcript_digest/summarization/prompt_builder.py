"""Prompt building for chunk analysis and summary requests."""
from __future__ import annotations

import logging
from textwrap import dedent
from typing import Optional

from transcript_digest.models import ContentType

logger = logging.getLogger(__name__)

_STYLE_BY_CONTENT_TYPE = {
    ContentType.MEETING: "Lead with decisions and outcomes, then open questions and owners.",
    ContentType.PERSONAL_JOURNAL: "Keep the speaker's perspective and tone; capture themes and feelings.",
    ContentType.TECHNICAL: "Preserve technical terms, steps and constraints precisely.",
    ContentType.GENERAL: "Capture the main points in the order they were discussed.",
}


class PromptBuilder:
    """Builds prompts for chunk analysis and plain summarization.

    The analysis prompt asks for a single JSON object that ``ResponseParser``
    turns into a ``ChunkAnalysis``.
    """

    def __init__(self, instructions: Optional[str] = None):
        """Initialize prompt builder.

        Args:
            instructions: System instructions for the model. If None, uses default.
        """
        self._instructions = instructions or self._build_default_instructions()

    @property
    def system_instructions(self) -> str:
        return self._instructions

    def _build_default_instructions(self) -> str:
        """Build default assistant instructions."""
        return dedent(
            """
            You are an assistant that analyzes spoken transcripts. You write concise, faithful summaries and extract actionable items.

            Hard rules:
            - Do not invent facts. If the transcript lacks details, summarize what is present.
            - Only extract tasks and reminders the speaker actually states or clearly implies.
            - Titles are short (3-8 words) and describe the whole passage.
            """
        ).strip()

    def build_chunk(self, text: str) -> str:
        """Build the analysis prompt for one chunk.

        Args:
            text: Chunk text

        Returns:
            Prompt requesting a JSON analysis
        """
        labels = ", ".join(f'"{c.value}"' for c in ContentType)
        return dedent(
            f"""
            Analyze the transcript below and respond with valid JSON only, no text outside the JSON.

            Strict output shape:
            {{
              "summary": "<markdown summary of the transcript>",
              "contentType": "<one of {labels}>",
              "tasks": [{{"text": "...", "priority": "high|medium|low", "timeReference": "... or null", "confidence": 0.0-1.0}}],
              "reminders": [{{"text": "...", "timeReference": "...", "urgency": "immediate|today|this week|later", "confidence": 0.0-1.0}}],
              "titles": [{{"text": "...", "confidence": 0.0-1.0}}]
            }}
            """
        ).strip() + f"\n\n<transcript>\n{text}\n</transcript>"

    def build_summary(self, text: str, content_type: ContentType) -> str:
        """Build a plain summarization prompt.

        Args:
            text: Text to summarize
            content_type: Classification guiding the summary style

        Returns:
            Prompt requesting a markdown summary
        """
        style = _STYLE_BY_CONTENT_TYPE.get(content_type, _STYLE_BY_CONTENT_TYPE[ContentType.GENERAL])
        logger.debug("Summary prompt", extra={"content_type": content_type.value})
        return (
            f"Summarize the following {content_type.value.lower()} content as a "
            f"concise markdown summary. {style} Respond with the summary only."
            f"\n\n<transcript>\n{text}\n</transcript>"
        )
