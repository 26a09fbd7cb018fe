from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np

from .assignment import Assignment, AssignmentEnumerator, assignment_indices
from .exceptions import CPTError, DomainError
from .weighted_set import WeightedSet


def make_cpt(spec: Any, num_parents: int, *, name: str = "node") -> WeightedSet:
    """
    Build a CPT of arity ``num_parents`` holding P(node = true | parents).

    ``spec`` may be a :class:`WeightedSet` of that arity, a bare probability
    (roots only), a mapping keyed by parent configurations, or a flat sequence
    in canonical enumeration order. Mapping keys can be :class:`Assignment`
    objects, tuples of booleans, ``"TF"`` strings, or a single boolean when the
    node has one parent.
    """

    if isinstance(spec, WeightedSet):
        if spec.n != num_parents:
            raise CPTError(
                f"CPT for '{name}' has arity {spec.n}; expected {num_parents} "
                f"(one bit per parent)"
            )
        cpt = spec.copy()
    elif isinstance(spec, Mapping):
        cpt = WeightedSet(num_parents)
        seen = set()
        for key, value in spec.items():
            event = _coerce_key(key, num_parents, name)
            if event in seen:
                raise CPTError(f"CPT for '{name}' lists parent configuration {event} twice")
            seen.add(event)
            cpt.add_event(event, _check_probability(value, name, event))
        missing = [str(event) for event in cpt.events() if event not in seen]
        if missing:
            raise CPTError(
                f"CPT for '{name}' is missing parent configurations: {', '.join(missing)}"
            )
        return cpt
    elif isinstance(spec, (int, float)) and not isinstance(spec, bool):
        if num_parents != 0:
            raise CPTError(
                f"A single probability only describes a root node; '{name}' has "
                f"{num_parents} parent(s)"
            )
        cpt = WeightedSet.from_weights(0, [float(spec)])
    elif isinstance(spec, (Sequence, np.ndarray)) and not isinstance(spec, str):
        values = np.asarray(spec, dtype=np.float64).reshape(-1)
        if values.shape[0] != 1 << num_parents:
            raise CPTError(
                f"CPT for '{name}' needs {1 << num_parents} entries, got {values.shape[0]}"
            )
        cpt = WeightedSet.from_weights(num_parents, values)
    else:
        raise CPTError(f"Unsupported CPT specification for '{name}': {type(spec).__name__}")

    for event, value in cpt.items():
        _check_probability(value, name, event)
    return cpt


def _coerce_key(key: Any, num_parents: int, name: str) -> Assignment:
    if isinstance(key, Assignment):
        event = key
    elif isinstance(key, str):
        try:
            event = Assignment.from_string(key)
        except ValueError as exc:
            raise CPTError(f"CPT for '{name}': {exc}") from exc
    elif isinstance(key, bool):
        event = Assignment((key,))
    elif isinstance(key, (tuple, list)):
        event = Assignment(tuple(key))
    else:
        raise CPTError(f"CPT for '{name}' has an unsupported key {key!r}")
    if event.arity != num_parents:
        raise CPTError(
            f"CPT for '{name}' key {key!r} has {event.arity} bit(s); expected {num_parents}"
        )
    return event


def _check_probability(value: Any, name: str, event: Assignment) -> float:
    prob = float(value)
    if not math.isfinite(prob) or prob < 0.0 or prob > 1.0:
        raise CPTError(
            f"CPT for '{name}' at parents [{event}] must be a probability in [0, 1], got {value!r}"
        )
    return prob


class Node:
    """
    A boolean random variable in a Bayesian network.

    The CPT stores P(node = true | parent configuration) with one bit per
    parent, in parent order. A root node carries a single entry, its prior.
    ``value`` starts out ``False`` and is only touched by :meth:`sample` and
    :meth:`set_value`; the network's samplers keep per-trial values elsewhere.
    """

    def __init__(self, name: str, cpt: Any, parents: Sequence["Node"] = ()):
        if not isinstance(name, str) or not name:
            raise ValueError("Node name must be a non-empty string")
        self.name = name
        self.parents: Tuple[Node, ...] = tuple(parents)
        for parent in self.parents:
            if not isinstance(parent, Node):
                raise TypeError(f"Parent of '{name}' must be a Node, got {type(parent).__name__}")
        self.cpt = make_cpt(cpt, len(self.parents), name=name)
        self.value = False

    @classmethod
    def from_full_table(
        cls,
        name: str,
        table: WeightedSet,
        parents: Sequence["Node"] = (),
    ) -> "Node":
        """
        Build a node from a table over ``len(parents) + 1`` bits.

        The final bit is the node's own value. Rows where it is true give the
        CPT; each complementary false row must be left at ``0`` or equal
        ``1 - P(true)``.
        """

        k = len(parents)
        if not isinstance(table, WeightedSet) or table.n != k + 1:
            raise CPTError(
                f"Full table for '{name}' must be a WeightedSet of arity {k + 1}"
            )
        probabilities = []
        for event in AssignmentEnumerator(k):
            p_true = table.get_weight(Assignment(event.bits + (True,)))
            p_false = table.get_weight(Assignment(event.bits + (False,)))
            if p_false != 0.0 and not math.isclose(p_false, 1.0 - p_true, abs_tol=1e-9):
                raise CPTError(
                    f"Full table for '{name}' at parents [{event}] is inconsistent: "
                    f"P(true)={p_true}, P(false)={p_false}"
                )
            probabilities.append(p_true)
        return cls(name, probabilities, parents)

    @property
    def parent_names(self) -> Tuple[str, ...]:
        return tuple(parent.name for parent in self.parents)

    @property
    def is_root(self) -> bool:
        return not self.parents

    def probability(self, parent_values: Optional[Sequence[bool]] = None) -> float:
        """Return P(node = true | parent values), defaulting to the parents' current values."""
        if parent_values is None:
            parent_values = [parent.value for parent in self.parents]
        event = Assignment(tuple(parent_values))
        if event.arity != len(self.parents):
            raise DomainError(
                f"'{self.name}' has {len(self.parents)} parent(s); got {event.arity} value(s)"
            )
        return self.cpt.get_weight(event)

    def probabilities(self, parent_matrix) -> np.ndarray:
        """P(node = true) for each row of a ``(trials, len(parents))`` boolean matrix."""
        matrix = np.asarray(parent_matrix, dtype=bool)
        if matrix.ndim != 2 or matrix.shape[1] != len(self.parents):
            raise DomainError(
                f"'{self.name}' expects parent rows of width {len(self.parents)}, "
                f"got shape {matrix.shape}"
            )
        return self.cpt.to_array()[assignment_indices(matrix)]

    def draw(self, rng: np.random.Generator, parent_matrix) -> np.ndarray:
        """Sample one value per trial without touching :attr:`value`."""
        probs = self.probabilities(parent_matrix)
        return rng.random(probs.shape[0]) <= probs

    def sample(self, rng: np.random.Generator) -> bool:
        # Parents must already hold this pass's values.
        self.value = bool(rng.random() <= self.probability())
        return self.value

    def set_value(self, value: bool) -> None:
        self.value = bool(value)

    def __repr__(self) -> str:
        parents = ", ".join(self.parent_names)
        return f"Node({self.name!r}, parents=[{parents}], value={self.value})"

    def __str__(self) -> str:
        return f"{self.name}\nValue: {self.value}\ncpt:\n{self.cpt}"
