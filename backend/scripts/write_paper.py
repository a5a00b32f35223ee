#!/usr/bin/env python3
"""Command-line runner for the writing pipeline.

Runs generate -> humanize -> quality check for one topic and prints stage
transitions, the quality report, and (optionally) writes the paper to disk.

Usage:
    python scripts/write_paper.py --topic "Climate Change" \\
        --instructions "APA style, 3 sources" --words 1000

    # Save the humanized paper and its HTML rendering
    python scripts/write_paper.py --topic "..." --instructions "..." --out paper.txt --html paper.html

Credentials come from the environment (or a .env file): GEMINI_API_KEY,
OPENAI_API_KEY, or ANTHROPIC_API_KEY, selected by LLM_PROVIDER.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from academic_writer.api.exceptions import GenerationFailure
from academic_writer.config import Settings
from academic_writer.models import PipelineStage, WritingRequest
from academic_writer.services.export_service import render_for_delivery
from academic_writer.services.writing_service import WritingService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def run(args: argparse.Namespace) -> int:
    settings = Settings.from_env()
    if args.provider:
        settings = settings.model_copy(update={"llm_provider": args.provider})
    settings = settings.model_copy(update={"quality_check_delay_seconds": 0.0})

    try:
        request = WritingRequest(
            topic=args.topic,
            instructions=args.instructions,
            word_count=args.words,
            reference_file_url=args.reference_url,
        )
    except PydanticValidationError as e:
        logger.error(f"Invalid request: {e}")
        return 2

    service = WritingService(settings)

    async def on_stage(stage: PipelineStage) -> None:
        print(f"[{stage.value}]", file=sys.stderr)

    try:
        result = await service.pipeline.run(request, on_stage=on_stage)
    except GenerationFailure as e:
        logger.error(f"Generation failed during {e.stage}: {e.message}")
        return 1

    document = result.document
    print(json.dumps(
        {
            "wordCount": document.word_count,
            "estimatedReadingTime": document.estimated_reading_time,
            "qualityMetrics": result.quality_metrics.model_dump(mode="json", by_alias=True),
        },
        indent=2,
    ))

    if args.out:
        Path(args.out).write_text(document.humanized_content, encoding="utf-8")
        logger.info(f"Paper written to {args.out}")
    if args.html:
        Path(args.html).write_text(
            render_for_delivery(document.humanized_content, request.topic),
            encoding="utf-8",
        )
        logger.info(f"HTML written to {args.html}")

    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Generate, humanize, and quality-check an academic paper.",
    )
    parser.add_argument("--topic", required=True, help="Paper topic")
    parser.add_argument("--instructions", required=True, help="Assignment instructions")
    parser.add_argument("--words", type=int, default=1000, help="Target word count (default: 1000)")
    parser.add_argument("--reference-url", default=None, help="Reference document URL quoted in the prompt")
    parser.add_argument(
        "--provider",
        choices=["gemini", "openai", "anthropic"],
        default=None,
        help="Override LLM_PROVIDER",
    )
    parser.add_argument("--out", default=None, help="Write the humanized paper to this file")
    parser.add_argument("--html", default=None, help="Write the printable HTML to this file")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
