from __future__ import annotations

from dataclasses import dataclass

from .quotes import CurrencyId, ExchangeId, Vertex, VertexIndex
from .rate_graph import RateGraph


class UnknownVertexError(Exception):
    def __init__(self, *, role: str, vertex: Vertex) -> None:
        self.role = role
        self.vertex = vertex
        super().__init__(f"{role} currency/exchange pair {vertex.label()} is unknown")


@dataclass(frozen=True)
class VertexRegistration:
    index: VertexIndex
    created: bool
    exchange_is_new: bool
    currency_is_new: bool


class VertexRegistry:
    """Bijective mapping between (exchange, currency) vertices and dense graph indices.

    Every vertex created here grows the attached graph by one row and one
    column, so the graph dimension always matches ``len(registry)``.
    """

    def __init__(self, graph: RateGraph) -> None:
        self._graph = graph
        # dicts keep first-seen order
        self._exchanges: dict[ExchangeId, None] = {}
        self._currencies: dict[CurrencyId, None] = {}
        self._index_by_vertex: dict[Vertex, VertexIndex] = {}
        self._vertices: list[Vertex] = []

    def __len__(self) -> int:
        return len(self._vertices)

    def ensure(self, exchange: ExchangeId, currency: CurrencyId) -> VertexRegistration:
        exchange_is_new = self._add_exchange(exchange)
        currency_is_new = self._add_currency(currency)

        vertex = Vertex(exchange, currency)
        existing = self._index_by_vertex.get(vertex)
        if existing is not None:
            return VertexRegistration(
                index=existing,
                created=False,
                exchange_is_new=exchange_is_new,
                currency_is_new=currency_is_new,
            )

        index = VertexIndex(len(self._vertices))
        self._vertices.append(vertex)
        self._index_by_vertex[vertex] = index
        self._graph.grow()
        return VertexRegistration(
            index=index,
            created=True,
            exchange_is_new=exchange_is_new,
            currency_is_new=currency_is_new,
        )

    def lookup(self, exchange: ExchangeId, currency: CurrencyId) -> VertexIndex | None:
        return self._index_by_vertex.get(Vertex(exchange, currency))

    def require(self, vertex: Vertex, *, role: str) -> VertexIndex:
        index = self._index_by_vertex.get(vertex)
        if index is None:
            raise UnknownVertexError(role=role, vertex=vertex)
        return index

    def vertex(self, index: int) -> Vertex:
        return self._vertices[index]

    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._vertices)

    def exchanges(self) -> tuple[ExchangeId, ...]:
        return tuple(self._exchanges)

    def currencies(self) -> tuple[CurrencyId, ...]:
        return tuple(self._currencies)

    def _add_exchange(self, exchange: ExchangeId) -> bool:
        if exchange in self._exchanges:
            return False
        self._exchanges[exchange] = None
        return True

    def _add_currency(self, currency: CurrencyId) -> bool:
        if currency in self._currencies:
            return False
        self._currencies[currency] = None
        return True


__all__ = ["UnknownVertexError", "VertexRegistration", "VertexRegistry"]
