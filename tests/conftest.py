import io

import pytest

from domain.rate_engine import RateEngine
from services.rate_processor import RateProcessor
from tests.constants import FIXED_CLOCK_TIME


@pytest.fixture(scope="function")
def engine() -> RateEngine:
    return RateEngine(clock=lambda: FIXED_CLOCK_TIME)


@pytest.fixture(scope="function")
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture(scope="function")
def processor(engine: RateEngine, output: io.StringIO) -> RateProcessor:
    return RateProcessor(engine, out=output)
