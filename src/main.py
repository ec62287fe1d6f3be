from __future__ import annotations

import argparse
import io
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from config import config
from domain.path_solver import SameVertexPolicy
from domain.rate_engine import RateEngine
from services.rate_processor import RateProcessor

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_UNAVAILABLE = 1
EXIT_READ_FAILURE = 2
EXIT_WRITE_FAILURE = 3


def run(lines: Iterable[str], processor: RateProcessor) -> int:
    """Feed every line to the processor until end of input."""
    processed = 0
    records = iter(lines)
    while True:
        try:
            line = next(records)
        except StopIteration:
            break
        except OSError as err:
            logger.error("Error: failed reading input after %d records: %s", processed, err)
            return EXIT_READ_FAILURE
        try:
            processor.process_line(line)
        except OSError as err:
            logger.error("Error: failed writing output after %d records: %s", processed, err)
            return EXIT_WRITE_FAILURE
        processed += 1
    logger.debug("Processed %d records", processed)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    settings = config()
    parser = argparse.ArgumentParser(description="Answer best exchange rate requests from a rate feed.")
    parser.add_argument("input", nargs="?", type=Path, help="Feed file to read (default: stdin).")
    parser.add_argument("--log-level", default=settings.log_level, help="Diagnostics level on stderr.")
    parser.add_argument(
        "--same-vertex",
        type=SameVertexPolicy,
        choices=list(SameVertexPolicy),
        default=settings.same_vertex_policy,
        help="Answer for requests whose source and destination coincide.",
    )
    parser.add_argument(
        "--debug-dump-dir",
        type=Path,
        default=settings.debug_dump_dir,
        help="Write adjacency and solver tables here after every request.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    engine = RateEngine(same_vertex_policy=args.same_vertex)
    processor = RateProcessor(engine, out=sys.stdout, debug_dump_dir=args.debug_dump_dir)

    if args.input is None:
        if isinstance(sys.stdin, io.TextIOWrapper):
            sys.stdin.reconfigure(errors="replace")
        return run(sys.stdin, processor)

    try:
        handle = args.input.open(encoding="utf-8", errors="replace")
    except OSError as err:
        logger.error("Error: can't open input file %s: %s", args.input, err)
        return EXIT_INPUT_UNAVAILABLE
    with handle:
        return run(handle, processor)


if __name__ == "__main__":
    sys.exit(main())
