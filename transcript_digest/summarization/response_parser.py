"""Response parsing for chunk analysis."""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from transcript_digest.models import ChunkAnalysis, ReminderItem, TaskItem, TitleItem

logger = logging.getLogger(__name__)

_ITEM_MODELS = (
    ("tasks", TaskItem),
    ("reminders", ReminderItem),
    ("titles", TitleItem),
)


class ResponseParser:
    """Parses model responses into structured chunk analyses.

    Handles JSON extraction, validation, and a plain-text fallback for
    responses that carry no usable JSON. Only an object with a top-level
    ``summary`` key is accepted as an analysis; nested item objects never are.
    """

    def parse(self, raw: str, *, label: str = "Response") -> Optional[ChunkAnalysis]:
        """Parse raw model response into a chunk analysis.

        Args:
            raw: Raw text from the model
            label: Description for logging (e.g., "Chunk 1")

        Returns:
            Parsed analysis, or None if the response was empty
        """
        try:
            logger.debug("Model output received", extra={"label": label, "output": raw})
            return ChunkAnalysis.model_validate_json(raw)
        except ValidationError:
            logger.warning(
                "Model output failed schema validation; attempting extraction",
                extra={"label": label},
            )
            parsed = self._extract_from_text(raw)
            if parsed is not None:
                return parsed
            text = (raw or "").strip()
            if not text:
                return None
            return ChunkAnalysis(summary=text)

    def _from_candidate(self, candidate: str) -> Optional[ChunkAnalysis]:
        """Validate one JSON object candidate, salvaging valid items if needed."""
        try:
            data = json.loads(candidate)
        except ValueError:
            return None
        if not isinstance(data, dict) or not isinstance(data.get("summary"), str):
            return None
        try:
            return ChunkAnalysis.model_validate(data)
        except ValidationError:
            return self._salvage(data)

    def _salvage(self, data: dict[str, Any]) -> ChunkAnalysis:
        """Keep the summary and every item that validates on its own."""
        fields: dict[str, Any] = {
            "summary": data["summary"],
            "contentType": data.get("contentType", data.get("content_type")),
        }
        dropped = 0
        for key, model in _ITEM_MODELS:
            raw_items = data.get(key)
            if raw_items is None:
                continue
            if not isinstance(raw_items, list):
                dropped += 1
                continue
            valid = []
            for raw_item in raw_items:
                try:
                    valid.append(model.model_validate(raw_item))
                except ValidationError:
                    dropped += 1
            fields[key] = valid
        logger.warning(
            "Dropped invalid items from model output",
            extra={"dropped_count": dropped},
        )
        return ChunkAnalysis.model_validate(fields)

    def _extract_from_text(self, text: str) -> Optional[ChunkAnalysis]:
        """Extract JSON object from messy output.

        Heuristics:
        - Strip code fences like ```json ... ```
        - Prefer scanning after the closing transcript tag
        - Scan for the first balanced JSON object carrying a summary

        Args:
            text: Raw text that may contain JSON

        Returns:
            Extracted analysis, or None if no usable JSON found
        """
        if not text:
            return None

        if "```" in text:
            parts = text.split("```")
            for i in range(1, len(parts), 2):  # odd indices are inside fences
                block = parts[i]
                if "{" not in block or "}" not in block:
                    continue
                if "\n" in block:
                    _, rest = block.split("\n", 1)
                    block = rest if "{" in rest else block
                parsed = self._from_candidate(block.strip())
                if parsed is not None:
                    return parsed

        start = 0
        idx = text.rfind("</transcript>")
        if idx != -1:
            start = idx + len("</transcript>")

        src = text[start:]
        n = len(src)
        i = 0
        while i < n:
            if src[i] != "{":
                i += 1
                continue
            depth = 0
            in_str = False
            esc = False
            j = i
            while j < n:
                ch = src[j]
                if in_str:
                    if esc:
                        esc = False
                    elif ch == "\\":
                        esc = True
                    elif ch == '"':
                        in_str = False
                elif ch == '"':
                    in_str = True
                elif ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1
                    if depth == 0:
                        parsed = self._from_candidate(src[i : j + 1])
                        if parsed is not None:
                            return parsed
                        break
                j += 1
            i += 1

        return None
