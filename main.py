#!/usr/bin/env python3
"""Main entry point for the metrics textfile writer"""
import sys
from pathlib import Path
from typing import Optional, Sequence
from pydantic import ValidationError
from config import Config
from exposition.accumulator import translate
from exposition.errors import ExpositionError, OutputError
from exposition.options import parse_options
from exposition.writer import create_writer
from logging_config import setup_structured_logging, get_logger, log_translation, log_error


EXIT_OK = 0
EXIT_USAGE = 1
EXIT_ENVIRONMENT = 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Translate command-line sample groups into exposition text.

    Nothing is written unless the whole option stream is valid.
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        options, args = parse_options(argv)
    except ExpositionError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        config = Config()
    except (ValidationError, OSError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_ENVIRONMENT

    setup_structured_logging(config)
    logger = get_logger(__name__)

    try:
        result = translate(options, sort_labels=config.sort_labels)
    except ExpositionError as e:
        logger.debug("Translation failed", error=str(e), error_type=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    log_translation(logger, records=result.records, lines=len(result.lines), headers=result.headers)

    output_file = Path(args.output) if args.output else config.output_file
    try:
        create_writer(output_file).write(result.to_text())
    except OutputError as e:
        log_error(logger, e, {"component": "writer", "output_file": str(output_file)})
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ENVIRONMENT

    return EXIT_OK


def cli() -> None:
    sys.exit(main())


if __name__ == '__main__':
    cli()
