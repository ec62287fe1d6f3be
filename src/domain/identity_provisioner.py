from __future__ import annotations

import logging
import time
from itertools import combinations
from typing import Callable

from .quotes import CurrencyId, ExchangeId, VertexIndex
from .rate_graph import RateGraph
from .vertex_registry import VertexRegistration, VertexRegistry

logger = logging.getLogger(__name__)

IDENTITY_FACTOR = 1.0

Clock = Callable[[], int]


def wall_clock() -> int:
    return int(time.time())


class IdentityEdgeProvisioner:
    """Link the same currency across exchanges with free 1.0 conversions.

    Identity edges are stamped with wall-clock time, so they are written only
    once per newly seen currency or (exchange, currency) and are superseded
    by any later direct quote for the same ordered pair.
    """

    def __init__(self, registry: VertexRegistry, graph: RateGraph, *, clock: Clock = wall_clock) -> None:
        self._registry = registry
        self._graph = graph
        self._clock = clock

    def provision(self, exchange: ExchangeId, currency: CurrencyId, registration: VertexRegistration) -> int:
        """Provision identity edges for one quoted currency; return the number of cells written.

        ``registration`` carries the newly-seen flags captured when the quote
        was first registered. A vertex created for an already known exchange
        and currency is linked like one on a new exchange.
        """
        if registration.currency_is_new:
            return self.provision_new_currency(currency)
        if registration.exchange_is_new or registration.created:
            return self.provision_currency_for_exchange(currency, exchange)
        return 0

    def provision_new_currency(self, currency: CurrencyId) -> int:
        exchanges = self._registry.exchanges()
        indices = [self._registry.ensure(exchange, currency).index for exchange in exchanges]
        timestamp = self._clock()
        written = 0
        for first, second in combinations(indices, 2):
            written += self._connect(first, second, timestamp)
        if written:
            logger.debug("Provisioned %s on %d exchanges (%d identity cells)", currency, len(exchanges), written)
        return written

    def provision_currency_for_exchange(self, currency: CurrencyId, exchange: ExchangeId) -> int:
        index = self._registry.ensure(exchange, currency).index
        timestamp = self._clock()
        written = 0
        for other_exchange in self._registry.exchanges():
            if other_exchange == exchange:
                continue
            other_index = self._registry.lookup(other_exchange, currency)
            if other_index is None:
                continue
            written += self._connect(index, other_index, timestamp)
        if written:
            logger.debug("Linked %s/%s to other exchanges (%d identity cells)", exchange, currency, written)
        return written

    def _connect(self, first: VertexIndex, second: VertexIndex, timestamp: int) -> int:
        written = 0
        if self._graph.set_if_newer(first, second, timestamp, IDENTITY_FACTOR):
            written += 1
        if self._graph.set_if_newer(second, first, timestamp, IDENTITY_FACTOR):
            written += 1
        return written


__all__ = ["IDENTITY_FACTOR", "IdentityEdgeProvisioner", "wall_clock"]
