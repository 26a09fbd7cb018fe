from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

from .assignment import Assignment, AssignmentEnumerator, assignment_indices
from .exceptions import DomainError


class WeightedSet:
    """
    Weights over every assignment of ``n`` boolean variables.

    The same structure serves as a tally (direct and rejection sampling), an
    accumulated likelihood weight, and a probability table (CPTs). The domain is
    materialised eagerly at construction and never grows or shrinks; lookups
    with an assignment of the wrong arity raise :class:`DomainError`.
    """

    def __init__(self, n: int):
        if n < 0:
            raise ValueError("WeightedSet arity must be non-negative")
        self.n = int(n)
        self._events: Tuple[Assignment, ...] = tuple(AssignmentEnumerator(self.n))
        self._weights = np.zeros(len(self._events), dtype=np.float64)

    @classmethod
    def from_weights(cls, n: int, weights: Sequence[float]) -> "WeightedSet":
        result = cls(n)
        values = np.asarray(weights, dtype=np.float64)
        if values.shape != result._weights.shape:
            raise DomainError(
                f"Expected {len(result._weights)} weights for arity {n}, got shape {values.shape}"
            )
        result._weights[:] = values
        return result

    # ------------------------------------------------------------------ lookups
    def _slot(self, event: Assignment) -> int:
        if not isinstance(event, Assignment):
            raise DomainError(f"Expected an Assignment, got {type(event).__name__}")
        if event.arity != self.n:
            raise DomainError(
                f"Assignment {event} has arity {event.arity}; this set has arity {self.n}"
            )
        return event.index

    def add_event(self, event: Assignment, weight: float) -> None:
        self._weights[self._slot(event)] = float(weight)

    def increment(self, event: Assignment, amount: float) -> None:
        self._weights[self._slot(event)] += float(amount)

    def get_weight(self, event: Assignment) -> float:
        return float(self._weights[self._slot(event)])

    def __getitem__(self, event: Assignment) -> float:
        return self.get_weight(event)

    def __contains__(self, event: object) -> bool:
        return isinstance(event, Assignment) and event.arity == self.n

    # --------------------------------------------------------------- reductions
    def tally(self, bits, amounts: Optional[Sequence[float]] = None) -> None:
        """Add one event per row of a ``(rows, n)`` boolean matrix."""
        matrix = np.asarray(bits, dtype=bool)
        if matrix.ndim != 2 or matrix.shape[1] != self.n:
            raise DomainError(
                f"Cannot tally rows of shape {matrix.shape} into a set of arity {self.n}"
            )
        indices = assignment_indices(matrix)
        if amounts is None:
            weights = np.ones(len(indices), dtype=np.float64)
        else:
            weights = np.asarray(amounts, dtype=np.float64)
            if weights.shape != indices.shape:
                raise ValueError(f"Got {weights.size} amounts for {len(indices)} rows")
        self._weights += np.bincount(indices, weights=weights, minlength=len(self._weights))

    def combine(self, other: "WeightedSet") -> "WeightedSet":
        if not isinstance(other, WeightedSet) or other.n != self.n:
            raise DomainError("Only weighted sets of the same arity can be combined")
        self._weights += other._weights
        return self

    def total(self) -> float:
        return float(self._weights.sum())

    def normalize(self) -> "WeightedSet":
        """Rescale weights to sum to one; an all-zero set is left unchanged."""
        total = self._weights.sum()
        if total > 0.0:
            self._weights /= total
        return self

    # -------------------------------------------------------------- enumeration
    def events(self) -> Tuple[Assignment, ...]:
        return self._events

    def items(self) -> Iterator[Tuple[Assignment, float]]:
        for event, weight in zip(self._events, self._weights):
            yield event, float(weight)

    def __iter__(self) -> Iterator[Assignment]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def to_array(self) -> np.ndarray:
        return self._weights.copy()

    def as_dict(self) -> Dict[str, float]:
        return {str(event): weight for event, weight in self.items()}

    def copy(self) -> "WeightedSet":
        return WeightedSet.from_weights(self.n, self._weights)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightedSet):
            return NotImplemented
        return self.n == other.n and bool(np.array_equal(self._weights, other._weights))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"WeightedSet(n={self.n}, total={self.total():g})"

    def __str__(self) -> str:
        return "\n".join(f"{event} --> {weight}" for event, weight in self.items())
