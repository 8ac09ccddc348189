from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from thai_anki.common.errors import MissingFilenameError, ThaiAnkiError
from thai_anki.common.logging_config import setup_logging
from thai_anki.config_models import load_config
from thai_anki.extraction import check_file_type
from thai_anki.pipelines.vocabulary import run_vocabulary_pipeline

logger = logging.getLogger("thai_anki.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thai-anki",
        description="Build a frequency-ranked Thai vocabulary Anki deck from a PDF or DOCX document",
    )
    parser.add_argument(
        "filename",
        nargs="?",
        default=None,
        help="Source document (.pdf or .docx); the deck is written to <filename>.apkg",
    )
    parser.add_argument(
        "--config",
        required=False,
        default=None,
        help="Optional YAML config file",
    )
    parser.add_argument(
        "--mode",
        choices=["definitions", "counts-only"],
        default=None,
        help="Back of each card: dictionary definition (default) or occurrence count",
    )
    parser.add_argument(
        "--dictionary",
        default=None,
        help="Thai-English lexicon (.json, .jsonl or .jsonl.gz)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Dictionary lookups in flight at once (default: 1, sequential)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-lookup timeout in seconds",
    )
    parser.add_argument(
        "--export-json",
        action="store_true",
        default=None,
        help="Also write the cards to <filename>.cards.json",
    )
    parser.add_argument(
        "--log-level",
        required=False,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO). Use DEBUG to see every resolved definition.",
    )
    return parser


def run(args: argparse.Namespace) -> Path:
    """Run the pipeline for parsed CLI arguments and return the written package path."""
    if not args.filename:
        raise MissingFilenameError()
    check_file_type(args.filename)

    config = load_config(
        Path(args.config) if args.config else None,
        mode=args.mode,
        dictionary_path=args.dictionary,
        max_concurrent_lookups=args.concurrency,
        lookup_timeout_seconds=args.timeout,
        export_json=args.export_json,
    )
    result = run_vocabulary_pipeline(args.filename, config)
    logger.info(
        "Deck complete",
        extra={
            "cards": result.unique_words,
            "tokens": result.token_count,
            "definitions": result.resolved_definitions if config.mode == "definitions" else None,
        },
    )
    print(f"Package has been generated: {result.output_path}")
    return result.output_path


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        run(args)
    except ThaiAnkiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
