from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RateCell:
    """Directed edge cell. A ``None`` timestamp means there is no edge."""

    timestamp: int | None
    factor: float

    @property
    def is_edge(self) -> bool:
        return self.timestamp is not None


class RateGraph:
    """Square adjacency matrix of rate cells stored in one flat row-major buffer.

    The matrix dimension always equals the number of registered vertices.
    """

    def __init__(self) -> None:
        self._size = 0
        self._timestamps: list[int | None] = []
        self._factors: list[float] = []

    def __len__(self) -> int:
        return self._size

    def grow(self) -> int:
        """Append one absent row and one absent column; return the new dimension."""
        old_size = self._size
        new_size = old_size + 1
        timestamps: list[int | None] = [None] * (new_size * new_size)
        factors = [0.0] * (new_size * new_size)
        for row in range(old_size):
            old_start = row * old_size
            new_start = row * new_size
            timestamps[new_start : new_start + old_size] = self._timestamps[old_start : old_start + old_size]
            factors[new_start : new_start + old_size] = self._factors[old_start : old_start + old_size]
        self._timestamps = timestamps
        self._factors = factors
        self._size = new_size
        return new_size

    def set_if_newer(self, source: int, destination: int, timestamp: int, factor: float) -> bool:
        offset = self._offset(source, destination)
        stored = self._timestamps[offset]
        if stored is not None and timestamp <= stored:
            return False
        self._timestamps[offset] = timestamp
        self._factors[offset] = factor
        return True

    def is_edge(self, source: int, destination: int) -> bool:
        return self._timestamps[self._offset(source, destination)] is not None

    def cell(self, source: int, destination: int) -> RateCell:
        offset = self._offset(source, destination)
        return RateCell(timestamp=self._timestamps[offset], factor=self._factors[offset])

    def factor(self, source: int, destination: int) -> float:
        """Edge factor, or 0.0 when the cell holds no edge."""
        offset = self._offset(source, destination)
        if self._timestamps[offset] is None:
            return 0.0
        return self._factors[offset]

    def _offset(self, source: int, destination: int) -> int:
        if not (0 <= source < self._size and 0 <= destination < self._size):
            raise IndexError(f"cell ({source}, {destination}) outside {self._size}x{self._size} graph")
        return source * self._size + destination


__all__ = ["RateCell", "RateGraph"]
