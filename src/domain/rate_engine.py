from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum

from .identity_provisioner import Clock, IdentityEdgeProvisioner, wall_clock
from .path_solver import CyclicPathError, MissingHopError, PathSolver, SameVertexPolicy
from .quotes import PathQuery, RateUpdate, Vertex
from .rate_graph import RateGraph
from .vertex_registry import UnknownVertexError, VertexRegistry

logger = logging.getLogger(__name__)


class QueryStatus(StrEnum):
    FOUND = "FOUND"
    NO_PATH = "NO_PATH"
    UNKNOWN_SOURCE = "UNKNOWN_SOURCE"
    UNKNOWN_DESTINATION = "UNKNOWN_DESTINATION"
    CYCLIC_ARTIFACT = "CYCLIC_ARTIFACT"
    BROKEN_PATH = "BROKEN_PATH"


@dataclass(frozen=True)
class BestRateResult:
    query: PathQuery
    status: QueryStatus
    vertices: list[Vertex] = field(default_factory=list)
    rate: float | None = None
    detail: str | None = None


class RateEngine:
    """Owns the vertex registry, rate graph and identity provisioning for one feed."""

    def __init__(
        self,
        *,
        clock: Clock = wall_clock,
        same_vertex_policy: SameVertexPolicy = SameVertexPolicy.TRIVIAL,
    ) -> None:
        self.graph = RateGraph()
        self.registry = VertexRegistry(self.graph)
        self.provisioner = IdentityEdgeProvisioner(self.registry, self.graph, clock=clock)
        self.solver = PathSolver(self.graph, same_vertex_policy=same_vertex_policy)

    def apply_update(self, update: RateUpdate) -> None:
        source = self.registry.ensure(update.exchange, update.source_currency)
        destination = self.registry.ensure(update.exchange, update.destination_currency)

        # The exchange flag comes from the first registration only.
        self.provisioner.provision(update.exchange, update.source_currency, source)
        self.provisioner.provision(
            update.exchange,
            update.destination_currency,
            replace(destination, exchange_is_new=source.exchange_is_new),
        )

        self.graph.set_if_newer(source.index, destination.index, update.timestamp, update.forward_factor)
        self.graph.set_if_newer(destination.index, source.index, update.timestamp, update.backward_factor)

    def best_rate(self, query: PathQuery) -> BestRateResult:
        try:
            source = self.registry.require(query.source, role="source")
            destination = self.registry.require(query.destination, role="destination")
        except UnknownVertexError as err:
            status = QueryStatus.UNKNOWN_SOURCE if err.role == "source" else QueryStatus.UNKNOWN_DESTINATION
            return BestRateResult(query=query, status=status, detail=str(err))

        try:
            best = self.solver.solve(source, destination)
        except CyclicPathError as err:
            labels = " -> ".join(f"{index} ({self.registry.vertex(index).label()})" for index in err.path)
            detail = (
                f"endless loop over cycle detected: starting with {err.vertex} "
                f"({self.registry.vertex(err.vertex).label()}), path: {labels}"
            )
            return BestRateResult(query=query, status=QueryStatus.CYCLIC_ARTIFACT, detail=detail)
        except MissingHopError as err:
            detail = (
                f"no next hop from {err.vertex} ({self.registry.vertex(err.vertex).label()}) "
                f"towards {err.destination} ({self.registry.vertex(err.destination).label()})"
            )
            return BestRateResult(query=query, status=QueryStatus.BROKEN_PATH, detail=detail)

        if not best.found:
            logger.debug("No path from %s to %s", query.source.label(), query.destination.label())
            return BestRateResult(query=query, status=QueryStatus.NO_PATH)

        return BestRateResult(
            query=query,
            status=QueryStatus.FOUND,
            vertices=[self.registry.vertex(index) for index in best.vertices],
            rate=best.rate,
        )


__all__ = ["BestRateResult", "QueryStatus", "RateEngine"]
