from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from domain.rate_engine import QueryStatus, RateEngine
from services.rate_processor import RateProcessor
from tests.constants import BINANCE, EUR, GBP, JPY, KRAKEN, T0, USD
from tests.helpers.feed_lines import rate_line, request_line


def test_request_after_updates_prints_best_path(processor: RateProcessor, output: io.StringIO) -> None:
    processor.process_line(rate_line(KRAKEN, USD, EUR, "0.9", "1.05", ts=T0))
    processor.process_line(rate_line(BINANCE, EUR, GBP, "0.8", "1.2", ts=T0 + 1))

    result = processor.process_line(request_line(KRAKEN, USD, BINANCE, GBP))

    assert result is not None and result.status == QueryStatus.FOUND
    assert output.getvalue() == (
        "BEST_RATES_BEGIN KRAKEN USD BINANCE GBP\n"
        "KRAKEN, USD\n"
        "KRAKEN, EUR\n"
        "BINANCE, EUR\n"
        "BINANCE, GBP\n"
        "BEST_RATES_END\n"
    )


def test_updates_produce_no_output(processor: RateProcessor, output: io.StringIO) -> None:
    assert processor.process_line(rate_line(KRAKEN, USD, EUR, "0.9", "1.05")) is None
    assert output.getvalue() == ""


def test_malformed_record_is_dropped_with_diagnostic(
    processor: RateProcessor,
    engine: RateEngine,
    output: io.StringIO,
    caplog: pytest.LogCaptureFixture,
) -> None:
    line = rate_line(KRAKEN, USD, EUR, "2.0", "0.6")

    with caplog.at_level(logging.WARNING):
        processor.process_line(line)

    assert len(engine.registry) == 0
    assert len(engine.graph) == 0
    assert output.getvalue() == ""
    assert caplog.messages == [
        f"Error: invalid combination of forward and backward factors, data ({line.rstrip()})",
    ]


def test_blank_line_is_reported(processor: RateProcessor, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        processor.process_line("\n")

    assert caplog.messages == ["Error: could not get first token, data ()"]


def test_unknown_vertex_prints_empty_block_and_warns(
    processor: RateProcessor,
    output: io.StringIO,
    caplog: pytest.LogCaptureFixture,
) -> None:
    processor.process_line(rate_line(KRAKEN, USD, EUR, "0.9", "1.05"))

    with caplog.at_level(logging.WARNING):
        result = processor.process_line(request_line(KRAKEN, USD, KRAKEN, JPY))

    assert result is not None and result.status == QueryStatus.UNKNOWN_DESTINATION
    assert output.getvalue() == "BEST_RATES_BEGIN KRAKEN USD KRAKEN JPY\nBEST_RATES_END\n"
    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING
    assert "destination currency/exchange pair KRAKEN/JPY is unknown" in caplog.messages[0]


def test_unreachable_vertex_prints_empty_block_without_diagnostic(
    processor: RateProcessor,
    output: io.StringIO,
    caplog: pytest.LogCaptureFixture,
) -> None:
    processor.process_line(rate_line(KRAKEN, USD, EUR, "0.9", "1.05"))
    processor.process_line(rate_line(KRAKEN, JPY, GBP, "0.005", "150"))

    with caplog.at_level(logging.INFO):
        result = processor.process_line(request_line(KRAKEN, USD, KRAKEN, GBP))

    assert result is not None and result.status == QueryStatus.NO_PATH
    assert output.getvalue() == "BEST_RATES_BEGIN KRAKEN USD KRAKEN GBP\nBEST_RATES_END\n"
    assert caplog.records == []


def test_cyclic_artifact_prints_empty_block_and_logs_error(
    processor: RateProcessor,
    output: io.StringIO,
    caplog: pytest.LogCaptureFixture,
) -> None:
    for line in (
        rate_line(KRAKEN, USD, EUR, "1.0", "1.0"),
        rate_line(KRAKEN, EUR, GBP, "1.2", "0.5"),
        rate_line(KRAKEN, GBP, USD, "1.0", "0.5"),
        rate_line(KRAKEN, EUR, JPY, "0.5", "0.5"),
    ):
        processor.process_line(line)

    with caplog.at_level(logging.WARNING):
        processor.process_line(request_line(KRAKEN, USD, KRAKEN, JPY))

    assert output.getvalue() == "BEST_RATES_BEGIN KRAKEN USD KRAKEN JPY\nBEST_RATES_END\n"
    assert [record.levelno for record in caplog.records] == [logging.ERROR]
    assert "endless loop over cycle detected" in caplog.messages[0]


def test_debug_dump_written_per_request(engine: RateEngine, output: io.StringIO, tmp_path: Path) -> None:
    processor = RateProcessor(engine, out=output, debug_dump_dir=tmp_path)
    processor.process_line(rate_line(KRAKEN, USD, EUR, "0.9", "1.05"))

    processor.process_line(request_line(KRAKEN, USD, KRAKEN, EUR))

    dumps = list(tmp_path.iterdir())
    assert len(dumps) == 1
    assert sorted(path.name for path in dumps[0].iterdir()) == ["adjacency.csv", "next.csv", "query.txt", "rate.csv"]


def test_failed_debug_dump_does_not_drop_the_feed(
    engine: RateEngine,
    output: io.StringIO,
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    not_a_dir = tmp_path / "not_a_dir"
    not_a_dir.write_text("occupied\n")
    processor = RateProcessor(engine, out=output, debug_dump_dir=not_a_dir)
    processor.process_line(rate_line(KRAKEN, USD, EUR, "0.9", "1.05"))

    with caplog.at_level(logging.WARNING):
        first = processor.process_line(request_line(KRAKEN, USD, KRAKEN, EUR))
        processor.process_line(rate_line(KRAKEN, EUR, GBP, "0.8", "1.2"))
        second = processor.process_line(request_line(KRAKEN, USD, KRAKEN, GBP))

    assert first is not None and first.status == QueryStatus.FOUND
    assert second is not None and second.status == QueryStatus.FOUND
    assert output.getvalue().count("BEST_RATES_BEGIN") == 2
    assert [record.levelno for record in caplog.records] == [logging.WARNING, logging.WARNING]
    assert all("Could not write debug tables" in message for message in caplog.messages)
