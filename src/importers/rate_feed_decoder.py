from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Generic, TypeVar

from domain.quotes import CurrencyId, ExchangeId, PathQuery, RateUpdate, factor_violation

T = TypeVar("T")

EXCHANGE_RATE_REQUEST = "EXCHANGE_RATE_REQUEST"

_TOKEN_DELIMITERS = re.compile(r"[ \t\v\r\n]+")
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_UTC_OFFSET = re.compile(r"([0-9]{2}):([0-9]{2})")

TIMESTAMP_LENGTH = 25
_TZ_SIGN_OFFSET = 19
_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
_EPOCH = datetime(1970, 1, 1)


class DecodeErrorKind(StrEnum):
    BLANK = "BLANK"
    MISSING = "MISSING"
    EMPTY = "EMPTY"
    INVALID = "INVALID"
    ARBITRAGE = "ARBITRAGE"


@dataclass(frozen=True)
class DecodeError:
    kind: DecodeErrorKind
    field: str | None = None
    detail: str | None = None

    def describe(self) -> str:
        if self.kind == DecodeErrorKind.BLANK:
            return "could not get first token"
        if self.kind == DecodeErrorKind.MISSING:
            return f"missing {self.field}"
        if self.kind == DecodeErrorKind.EMPTY:
            return f"empty {self.field}"
        if self.kind == DecodeErrorKind.ARBITRAGE:
            return self.detail or "invalid combination of forward and backward factors"
        if self.detail:
            return f"invalid {self.field}: {self.detail}"
        return f"invalid {self.field}"


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T


ParseResult = Parsed[T] | DecodeError
DecodedRecord = RateUpdate | PathQuery | DecodeError


def tokenize(line: str) -> list[str]:
    return [token for token in _TOKEN_DELIMITERS.split(line) if token]


def parse_timestamp(value: str, field: str) -> ParseResult[int]:
    """Parse ``YYYY-MM-DDTHH:MM:SS+HH:MM`` into epoch seconds."""
    if len(value) != TIMESTAMP_LENGTH:
        return DecodeError(DecodeErrorKind.INVALID, field, "invalid length of time field")

    sign = value[_TZ_SIGN_OFFSET]
    if sign not in "+-":
        return DecodeError(DecodeErrorKind.INVALID, field, "invalid time zone sign")

    try:
        local = datetime.strptime(value[:_TZ_SIGN_OFFSET], _DATETIME_FORMAT)
    except ValueError:
        return DecodeError(DecodeErrorKind.INVALID, field, "invalid date or time")

    zone = _UTC_OFFSET.fullmatch(value[_TZ_SIGN_OFFSET + 1 :])
    if zone is None:
        return DecodeError(DecodeErrorKind.INVALID, field, "invalid time zone")
    hours, minutes = int(zone.group(1)), int(zone.group(2))
    if hours > 23 or minutes > 59:
        return DecodeError(DecodeErrorKind.INVALID, field, "invalid time zone")

    offset = timedelta(hours=hours, minutes=minutes)
    if sign == "-":
        offset = -offset
    try:
        utc = local - offset
    except OverflowError:
        return DecodeError(DecodeErrorKind.INVALID, field, "date out of range")
    return Parsed(int((utc - _EPOCH).total_seconds()))


def parse_factor(value: str, field: str) -> ParseResult[float]:
    if not _DECIMAL_LITERAL.fullmatch(value):
        return DecodeError(DecodeErrorKind.INVALID, field, "invalid floating-point number")
    number = float(value)
    if not math.isfinite(number):
        return DecodeError(DecodeErrorKind.INVALID, field, "out of range")
    if number <= 0.0:
        return DecodeError(DecodeErrorKind.INVALID, field, "must be positive")
    return Parsed(number)


class FieldReader:
    """Sequential reader over the tokens of one record."""

    def __init__(self, tokens: list[str], *, start: int = 0) -> None:
        self._tokens = tokens
        self._position = start

    def next_string(self, field: str) -> ParseResult[str]:
        if self._position >= len(self._tokens):
            return DecodeError(DecodeErrorKind.MISSING, field)
        value = self._tokens[self._position]
        self._position += 1
        if not value:
            return DecodeError(DecodeErrorKind.EMPTY, field)
        return Parsed(value)

    def next_timestamp(self, field: str) -> ParseResult[int]:
        raw = self.next_string(field)
        if isinstance(raw, DecodeError):
            return raw
        return parse_timestamp(raw.value, field)

    def next_factor(self, field: str) -> ParseResult[float]:
        raw = self.next_string(field)
        if isinstance(raw, DecodeError):
            return raw
        return parse_factor(raw.value, field)


def decode_rate_update(reader: FieldReader) -> RateUpdate | DecodeError:
    timestamp = reader.next_timestamp("timestamp")
    if isinstance(timestamp, DecodeError):
        return timestamp
    exchange = reader.next_string("exchange")
    if isinstance(exchange, DecodeError):
        return exchange
    source_currency = reader.next_string("source_currency")
    if isinstance(source_currency, DecodeError):
        return source_currency
    destination_currency = reader.next_string("destination_currency")
    if isinstance(destination_currency, DecodeError):
        return destination_currency
    forward_factor = reader.next_factor("forward_factor")
    if isinstance(forward_factor, DecodeError):
        return forward_factor
    backward_factor = reader.next_factor("backward_factor")
    if isinstance(backward_factor, DecodeError):
        return backward_factor

    violation = factor_violation(forward_factor.value, backward_factor.value)
    if violation is not None:
        return DecodeError(DecodeErrorKind.ARBITRAGE, "backward_factor", violation)

    return RateUpdate(
        timestamp=timestamp.value,
        exchange=ExchangeId(exchange.value),
        source_currency=CurrencyId(source_currency.value),
        destination_currency=CurrencyId(destination_currency.value),
        forward_factor=forward_factor.value,
        backward_factor=backward_factor.value,
    )


def decode_path_query(reader: FieldReader) -> PathQuery | DecodeError:
    values: list[str] = []
    for field in ("source_exchange", "source_currency", "destination_exchange", "destination_currency"):
        result = reader.next_string(field)
        if isinstance(result, DecodeError):
            return result
        values.append(result.value)
    source_exchange, source_currency, destination_exchange, destination_currency = values
    return PathQuery(
        source_exchange=ExchangeId(source_exchange),
        source_currency=CurrencyId(source_currency),
        destination_exchange=ExchangeId(destination_exchange),
        destination_currency=CurrencyId(destination_currency),
    )


def decode_line(line: str) -> DecodedRecord:
    tokens = tokenize(line)
    if not tokens:
        return DecodeError(DecodeErrorKind.BLANK)
    if tokens[0] == EXCHANGE_RATE_REQUEST:
        return decode_path_query(FieldReader(tokens, start=1))
    # Anything else is a rate update whose first field is the token just read.
    return decode_rate_update(FieldReader(tokens))


__all__ = [
    "EXCHANGE_RATE_REQUEST",
    "DecodeError",
    "DecodeErrorKind",
    "DecodedRecord",
    "FieldReader",
    "Parsed",
    "decode_line",
    "decode_path_query",
    "decode_rate_update",
    "parse_factor",
    "parse_timestamp",
    "tokenize",
]
