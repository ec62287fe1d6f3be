from __future__ import annotations

import sys
from typing import Iterable, TextIO

from domain.quotes import PathQuery, Vertex

BEST_RATES_BEGIN = "BEST_RATES_BEGIN"
BEST_RATES_END = "BEST_RATES_END"


def format_best_rates(query: PathQuery, vertices: Iterable[Vertex]) -> str:
    lines = [" ".join((BEST_RATES_BEGIN, *query.fields()))]
    lines.extend(f"{vertex.exchange}, {vertex.currency}" for vertex in vertices)
    lines.append(BEST_RATES_END)
    return "\n".join(lines) + "\n"


def render_best_rates(query: PathQuery, vertices: Iterable[Vertex], out: TextIO | None = None) -> None:
    stream = out if out is not None else sys.stdout
    stream.write(format_best_rates(query, vertices))
    stream.flush()
