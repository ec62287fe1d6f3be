from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from domain.quotes import PathQuery
from domain.rate_engine import BestRateResult, QueryStatus, RateEngine
from importers.rate_feed_decoder import DecodeError, decode_line
from utils.debug_dump import dump_rate_tables_debug
from utils.reporting import render_best_rates

logger = logging.getLogger(__name__)


class RateProcessor:
    """Apply feed lines to a rate engine and answer best-rate requests.

    Record-level problems are logged and dropped; only the response blocks
    go to ``out``.
    """

    def __init__(
        self,
        engine: RateEngine,
        *,
        out: TextIO | None = None,
        debug_dump_dir: Path | None = None,
    ) -> None:
        self.engine = engine
        self.out = out if out is not None else sys.stdout
        self.debug_dump_dir = debug_dump_dir

    def process_line(self, line: str) -> BestRateResult | None:
        """Process one record; return the query result for requests, else None."""
        data = line.rstrip("\r\n")
        record = decode_line(data)
        if isinstance(record, DecodeError):
            logger.warning("Error: %s, data (%s)", record.describe(), data)
            return None
        if isinstance(record, PathQuery):
            return self._answer(record)
        self.engine.apply_update(record)
        return None

    def _answer(self, query: PathQuery) -> BestRateResult:
        result = self.engine.best_rate(query)
        render_best_rates(query, result.vertices, self.out)

        if result.status in (QueryStatus.UNKNOWN_SOURCE, QueryStatus.UNKNOWN_DESTINATION):
            logger.warning("Error: %s, data (%s)", result.detail, " ".join(query.fields()))
        elif result.status == QueryStatus.CYCLIC_ARTIFACT:
            logger.error("Cyclic path: %s, data (%s)", result.detail, " ".join(query.fields()))
        elif result.status == QueryStatus.BROKEN_PATH:
            logger.error("Broken path: %s, data (%s)", result.detail, " ".join(query.fields()))
        elif result.status == QueryStatus.FOUND:
            logger.debug("Best rate %s -> %s: %.10g", query.source.label(), query.destination.label(), result.rate)

        if self.debug_dump_dir is not None:
            self._dump_tables(query, self.debug_dump_dir)
        return result

    def _dump_tables(self, query: PathQuery, root_dir: Path) -> None:
        registry = self.engine.registry
        try:
            paths = dump_rate_tables_debug(
                self.engine,
                source=registry.lookup(query.source_exchange, query.source_currency),
                destination=registry.lookup(query.destination_exchange, query.destination_currency),
                root_dir=root_dir,
            )
        except OSError as err:
            logger.warning("Could not write debug tables to %s: %s", root_dir, err)
            return
        logger.debug("Wrote debug tables to %s", paths["adjacency"].parent)


__all__ = ["RateProcessor"]
