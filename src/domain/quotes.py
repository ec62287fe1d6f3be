from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NewType

from pydantic import BaseModel, ConfigDict, model_validator

ExchangeId = NewType("ExchangeId", str)
CurrencyId = NewType("CurrencyId", str)
VertexIndex = NewType("VertexIndex", int)

# Highest combined forward * backward factor accepted for a single quoted pair.
MAX_ROUND_TRIP_FACTOR = 1.0


@dataclass(frozen=True)
class Vertex:
    exchange: ExchangeId
    currency: CurrencyId

    def label(self) -> str:
        return f"{self.exchange}/{self.currency}"


def factor_violation(forward_factor: float, backward_factor: float) -> str | None:
    """Return the rejection reason for a factor pair, or None when it is acceptable."""
    if not math.isfinite(forward_factor) or forward_factor <= 0.0:
        return "invalid forward factor"
    if not math.isfinite(backward_factor) or backward_factor <= 0.0:
        return "invalid backward factor"
    if forward_factor * backward_factor > MAX_ROUND_TRIP_FACTOR:
        return "invalid combination of forward and backward factors"
    return None


class RateUpdate(BaseModel):
    """A single quote from one exchange for a currency pair.

    The forward factor converts source into destination, the backward factor
    converts destination back into source. ``timestamp`` is in epoch seconds.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int
    exchange: ExchangeId
    source_currency: CurrencyId
    destination_currency: CurrencyId
    forward_factor: float
    backward_factor: float

    @model_validator(mode="after")
    def _validate_fields(self) -> RateUpdate:
        if not self.exchange:
            raise ValueError("exchange must be non-empty")
        if not self.source_currency or not self.destination_currency:
            raise ValueError("currencies must be non-empty")
        reason = factor_violation(self.forward_factor, self.backward_factor)
        if reason is not None:
            raise ValueError(reason)
        return self

    @property
    def source(self) -> Vertex:
        return Vertex(self.exchange, self.source_currency)

    @property
    def destination(self) -> Vertex:
        return Vertex(self.exchange, self.destination_currency)


class PathQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_exchange: ExchangeId
    source_currency: CurrencyId
    destination_exchange: ExchangeId
    destination_currency: CurrencyId

    @model_validator(mode="after")
    def _validate_fields(self) -> PathQuery:
        if not all(
            (self.source_exchange, self.source_currency, self.destination_exchange, self.destination_currency)
        ):
            raise ValueError("PathQuery fields must be non-empty")
        return self

    @property
    def source(self) -> Vertex:
        return Vertex(self.source_exchange, self.source_currency)

    @property
    def destination(self) -> Vertex:
        return Vertex(self.destination_exchange, self.destination_currency)

    def fields(self) -> tuple[str, str, str, str]:
        return (self.source_exchange, self.source_currency, self.destination_exchange, self.destination_currency)
