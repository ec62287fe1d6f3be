from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .quotes import VertexIndex
from .rate_graph import RateGraph


class SameVertexPolicy(StrEnum):
    """How a query whose source and destination coincide is answered."""

    TRIVIAL = "trivial"
    SELF_EDGE = "self_edge"


class PathReconstructionError(Exception):
    """The first-hop walk could not reach the destination."""

    def __init__(self, message: str, *, vertex: int, path: list[int]) -> None:
        self.vertex = vertex
        self.path = path
        super().__init__(message)


class CyclicPathError(PathReconstructionError):
    def __init__(self, *, vertex: int, path: list[int]) -> None:
        hops = " -> ".join(str(index) for index in path)
        message = f"endless loop over cycle detected starting with {vertex}, path: {hops}"
        super().__init__(message, vertex=vertex, path=path)


class MissingHopError(PathReconstructionError):
    def __init__(self, *, vertex: int, destination: int, path: list[int]) -> None:
        self.destination = destination
        hops = " -> ".join(str(index) for index in path)
        super().__init__(f"no next hop from {vertex} towards {destination}, path: {hops}", vertex=vertex, path=path)


@dataclass
class SolverTables:
    """Best cumulative factor and first hop for every ordered vertex pair.

    ``rate[i][j] == 0.0`` and ``next_hop[i][j] is None`` both mean no path.
    """

    rate: list[list[float]]
    next_hop: list[list[int | None]]


@dataclass(frozen=True)
class BestPath:
    vertices: list[int] = field(default_factory=list)
    rate: float | None = None

    @property
    def found(self) -> bool:
        return bool(self.vertices)


class PathSolver:
    """Maximum-product path search over a snapshot of the rate graph.

    Tables are rebuilt from scratch for every call since the graph can change
    between queries.
    """

    def __init__(self, graph: RateGraph, *, same_vertex_policy: SameVertexPolicy = SameVertexPolicy.TRIVIAL) -> None:
        self._graph = graph
        self.same_vertex_policy = same_vertex_policy

    def compute_tables(self) -> SolverTables:
        graph = self._graph
        n = len(graph)
        rate = [[graph.factor(i, j) for j in range(n)] for i in range(n)]
        next_hop: list[list[int | None]] = [[j if graph.is_edge(i, j) else None for j in range(n)] for i in range(n)]

        for k in range(n):
            rate_k = rate[k]
            for i in range(n):
                rate_i = rate[i]
                rate_ik = rate_i[k]
                if rate_ik == 0.0:
                    continue
                next_i = next_hop[i]
                first_hop = next_i[k]
                for j in range(n):
                    candidate = rate_ik * rate_k[j]
                    if candidate > rate_i[j]:
                        rate_i[j] = candidate
                        next_i[j] = first_hop

        return SolverTables(rate=rate, next_hop=next_hop)

    @staticmethod
    def reconstruct(tables: SolverTables, source: int, destination: int) -> list[int]:
        """Walk first hops from source to destination.

        Raises CyclicPathError instead of looping when a vertex repeats, and
        MissingHopError when the table has no hop partway through the walk.
        """
        if tables.next_hop[source][destination] is None:
            return []

        path = [source]
        visited = {source}
        current = source
        while current != destination:
            hop = tables.next_hop[current][destination]
            if hop is None:
                raise MissingHopError(vertex=current, destination=destination, path=path)
            if hop in visited:
                raise CyclicPathError(vertex=hop, path=path)
            path.append(hop)
            visited.add(hop)
            current = hop
        return path

    def solve(self, source: VertexIndex, destination: VertexIndex) -> BestPath:
        if source == destination:
            return self._solve_same_vertex(source)

        tables = self.compute_tables()
        vertices = self.reconstruct(tables, source, destination)
        if not vertices:
            return BestPath()
        return BestPath(vertices=vertices, rate=tables.rate[source][destination])

    def _solve_same_vertex(self, vertex: VertexIndex) -> BestPath:
        if self.same_vertex_policy == SameVertexPolicy.TRIVIAL:
            return BestPath(vertices=[vertex], rate=1.0)
        if self._graph.is_edge(vertex, vertex):
            return BestPath(vertices=[vertex], rate=self._graph.factor(vertex, vertex))
        return BestPath()


__all__ = [
    "BestPath",
    "CyclicPathError",
    "MissingHopError",
    "PathReconstructionError",
    "PathSolver",
    "SameVertexPolicy",
    "SolverTables",
]
