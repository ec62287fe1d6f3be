from __future__ import annotations

import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from domain.rate_engine import RateEngine


def _write_table(path: Path, labels: Sequence[str], rows: Sequence[Sequence[object]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as fp:
        writer = csv.writer(fp)
        writer.writerow(["vertex", *labels])
        for label, row in zip(labels, rows):
            writer.writerow([label, *("" if value is None else value for value in row)])


def dump_rate_tables_debug(
    engine: RateEngine,
    *,
    source: int | None = None,
    destination: int | None = None,
    root_dir: Path = Path(".tmp/debug_dumps"),
) -> dict[str, Path]:
    """Persist the adjacency table and freshly computed solver tables for debugging."""

    root_dir.mkdir(parents=True, exist_ok=True)
    dump_dir = root_dir / datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    dump_dir.mkdir(parents=True, exist_ok=False)

    labels = [vertex.label() for vertex in engine.registry.vertices()]
    size = len(labels)
    tables = engine.solver.compute_tables()

    adjacency_path = dump_dir / "adjacency.csv"
    rate_path = dump_dir / "rate.csv"
    next_path = dump_dir / "next.csv"

    graph = engine.graph
    adjacency = [[graph.factor(i, j) if graph.is_edge(i, j) else None for j in range(size)] for i in range(size)]
    _write_table(adjacency_path, labels, adjacency)
    _write_table(rate_path, labels, tables.rate)
    _write_table(next_path, labels, tables.next_hop)

    paths = {
        "adjacency": adjacency_path,
        "rate": rate_path,
        "next": next_path,
    }
    if source is not None and destination is not None:
        query_path = dump_dir / "query.txt"
        query_path.write_text(f"{labels[source]} -> {labels[destination]}\n", encoding="utf-8")
        paths["query"] = query_path
    return paths
