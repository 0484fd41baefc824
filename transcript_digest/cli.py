"""CLI harness: summarize a transcript file."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from transcript_digest.config import PipelineSettings, configure_logging, get_settings
from transcript_digest.errors import SummarizationError
from transcript_digest.summarization.pipeline import (
    PipelineOutcome,
    SummarizationPipeline,
    create_backend,
)

logger = logging.getLogger(__name__)


def _print_outcome(outcome: PipelineOutcome) -> None:
    print(f"content_type={outcome.content_type.value}")
    print(
        f"chunks ok={outcome.successful_chunks}, failed={outcome.failed_chunks}, "
        f"elapsed={outcome.elapsed.total_seconds():.1f}s"
    )
    print("\n" + outcome.summary)
    for category, items in outcome.items.items():
        if not items:
            continue
        print(f"\n{category.value.title()}s:")
        for item in items:
            print(f"  - {item.text} ({item.confidence:.2f})")


def _build_settings(args: argparse.Namespace) -> PipelineSettings:
    settings = get_settings()
    overrides = {}
    if args.tier:
        overrides["backend_tier"] = args.tier
    if args.max_tokens is not None:
        overrides["max_tokens_per_chunk"] = args.max_tokens
    return settings.model_copy(update=overrides) if overrides else settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize a long transcript")
    parser.add_argument("file", help="Path to a UTF-8 transcript file")
    parser.add_argument("--tier", "-t", help="Backend tier for pacing (premium, standard, economy)")
    parser.add_argument("--max-tokens", "-m", type=int, help="Context budget per backend request")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    args = parser.parse_args(argv)

    try:
        settings = _build_settings(args)
        config = settings.to_pipeline_config()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2
    configure_logging(settings)

    file_path = Path(args.file).resolve()
    if not file_path.exists():
        print(f"Error: file not found: {file_path}", file=sys.stderr)
        return 1
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {file_path}: {e}", file=sys.stderr)
        return 1

    pipeline = SummarizationPipeline()
    try:
        outcome = asyncio.run(
            pipeline.run(text, None, create_backend(settings), config)
        )
    except SummarizationError as e:
        logger.error(f"Summarization failed: {e}", extra={"code": e.code})
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_outcome(outcome)
    return 0


if __name__ == "__main__":
    sys.exit(main())
