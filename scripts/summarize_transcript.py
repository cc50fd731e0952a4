"""Summarize a transcript file into a markdown report from the command line.

Usage:
    python scripts/summarize_transcript.py meeting.vtt --provider ollama --model llama3.2
    python scripts/summarize_transcript.py notes.txt --template daily_standup -o report.md
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from meeting_summary.config import settings  # noqa: E402
from meeting_summary.errors import SummaryError  # noqa: E402
from meeting_summary.llm.client import resolve_api_key  # noqa: E402
from meeting_summary.log import setup_logging  # noqa: E402
from meeting_summary.pipeline_config import (  # noqa: E402
    LLMProvider,
    ProviderCapability,
    ProviderConfig,
)
from meeting_summary.summarization.pipeline import generate_meeting_summary  # noqa: E402
from meeting_summary.transcripts.parsers import (  # noqa: E402
    format_for_filename,
    load_transcript_text,
)

logger = logging.getLogger("summarize_transcript")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a meeting report from a transcript")
    parser.add_argument("file", help="Transcript file (.vtt, .txt or .json)")
    parser.add_argument(
        "--format",
        choices=["vtt", "text", "json"],
        default=None,
        help="Transcript format (default: from the file extension)",
    )
    parser.add_argument(
        "--provider",
        choices=[p.value for p in LLMProvider],
        default=settings.llm_provider,
    )
    parser.add_argument("--model", default=None, help="Model name (default: LLM_MODEL)")
    parser.add_argument("--endpoint", default=None, help="Override the provider endpoint")
    parser.add_argument(
        "--capability",
        choices=[c.value for c in ProviderCapability],
        default=None,
        help="Override the provider's context-window class",
    )
    parser.add_argument("--template", default=settings.default_template)
    parser.add_argument("--language", default=settings.default_language)
    parser.add_argument("--token-threshold", type=int, default=None)
    parser.add_argument("--context", default="", help="Additional context for the model")
    parser.add_argument("-o", "--output", default=None, help="Write the report here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    path = Path(args.file)
    try:
        content = path.read_text(encoding="utf-8")
        transcript = load_transcript_text(content, args.format or format_for_filename(path.name))
    except (OSError, ValueError) as exc:
        print(f"Error: cannot read transcript {path}: {exc}", file=sys.stderr)
        return 1

    provider = LLMProvider(args.provider)
    config = ProviderConfig(
        provider=provider,
        model=args.model or settings.llm_model,
        api_key=resolve_api_key(provider),
        endpoint=args.endpoint,
        capability=args.capability,
    )

    try:
        result = generate_meeting_summary(
            transcript,
            config,
            custom_prompt=args.context,
            template_id=args.template,
            token_threshold=args.token_threshold,
            language=args.language,
        )
    except (SummaryError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(result.markdown + "\n", encoding="utf-8")
        logger.info("Report written to %s", args.output)
    else:
        print(result.markdown)
    print(f"Strategy: {result.strategy}, chunks processed: {result.chunk_count}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
