from __future__ import annotations

from datetime import datetime, timezone

from domain.quotes import PathQuery, RateUpdate
from tests.constants import T0


def iso(epoch_seconds: int) -> str:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S+00:00")


def rate_line(
    exchange: str,
    source: str,
    destination: str,
    forward: str,
    backward: str,
    *,
    ts: int = T0,
) -> str:
    return f"{iso(ts)} {exchange} {source} {destination} {forward} {backward}\n"


def request_line(source_exchange: str, source: str, destination_exchange: str, destination: str) -> str:
    return f"EXCHANGE_RATE_REQUEST {source_exchange} {source} {destination_exchange} {destination}\n"


def make_update(
    exchange: str,
    source: str,
    destination: str,
    forward: float,
    backward: float,
    *,
    ts: int = T0,
) -> RateUpdate:
    return RateUpdate(
        timestamp=ts,
        exchange=exchange,
        source_currency=source,
        destination_currency=destination,
        forward_factor=forward,
        backward_factor=backward,
    )


def make_query(source_exchange: str, source: str, destination_exchange: str, destination: str) -> PathQuery:
    return PathQuery(
        source_exchange=source_exchange,
        source_currency=source,
        destination_exchange=destination_exchange,
        destination_currency=destination,
    )
