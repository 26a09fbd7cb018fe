"""
Bayesian networks of boolean variables and their sampling estimators.

Trials are simulated in batches: a batch is a boolean matrix with one row
per trial and one column per node, filled column by column in topological
order. No node object is mutated while sampling, so every trial sees only its
own values, and each batch is reduced into the result with
:meth:`WeightedSet.tally`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np

from .assignment import Assignment
from .config import DEFAULT_BATCH_SIZE, SamplingConfig
from .exceptions import QueryError, TopologyError
from .node import Node
from .query import Query
from .weighted_set import WeightedSet

logger = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


def _resolve_rng(rng: RandomSource) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is None:
        return np.random.default_rng()
    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        return np.random.default_rng(int(rng))
    raise TypeError(
        f"Expected a numpy Generator, an integer seed or None, got {type(rng).__name__}"
    )


def _topological_order(
    names: Sequence[str],
    parents_of: Callable[[int], Sequence[str]],
) -> List[int]:
    # Kahn's algorithm, always taking the earliest ready item so that input
    # order is kept wherever the dependencies allow it.
    positions: Dict[str, int] = {}
    for position, name in enumerate(names):
        if name in positions:
            raise TopologyError(f"Duplicate node '{name}'")
        positions[name] = position
    for position, name in enumerate(names):
        for parent in parents_of(position):
            if parent not in positions:
                raise TopologyError(f"Node '{name}' references unknown parent '{parent}'")

    placed: set = set()
    order: List[int] = []
    while len(order) < len(names):
        for position, name in enumerate(names):
            if name in placed:
                continue
            if all(parent in placed for parent in parents_of(position)):
                placed.add(name)
                order.append(position)
                break
        else:
            stuck = [name for name in names if name not in placed]
            raise TopologyError(f"Network contains a cycle among: {', '.join(stuck)}")
    return order


@dataclass(frozen=True)
class NodeSpec:
    """Descriptor for one node: its name, parent names and CPT weights."""

    name: str
    parents: Tuple[str, ...]
    cpt: Any

    def __post_init__(self):
        parents = self.parents
        if isinstance(parents, str):
            parents = (parents,)
        object.__setattr__(self, "parents", tuple(parents))


@dataclass(frozen=True)
class _Plan:
    query_columns: np.ndarray
    evidence: Dict[int, bool]


class BayesianNetwork:
    """
    An ordered collection of boolean nodes.

    Every node's parents must appear strictly earlier in ``nodes``; the
    constructor checks this and raises :class:`TopologyError` rather than
    letting a child be sampled from a stale parent value. Use
    :meth:`BayesianNetwork.sorted` when the nodes arrive in arbitrary order.
    """

    def __init__(self, nodes: Iterable[Node]):
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._index: Dict[str, int] = {}
        for position, node in enumerate(self._nodes):
            if not isinstance(node, Node):
                raise TypeError(f"Expected Node instances, got {type(node).__name__}")
            if node.name in self._index:
                raise TopologyError(f"Duplicate node '{node.name}'")
            for parent in node.parents:
                earlier = self._index.get(parent.name)
                if earlier is not None and self._nodes[earlier] is parent:
                    continue
                if any(other is parent for other in self._nodes):
                    raise TopologyError(
                        f"Parent '{parent.name}' of '{node.name}' must appear before it "
                        f"(nodes are not in topological order)"
                    )
                raise TopologyError(
                    f"Parent '{parent.name}' of '{node.name}' is not part of this network"
                )
            self._index[node.name] = position
        self._parent_columns: Tuple[np.ndarray, ...] = tuple(
            np.array([self._index[parent.name] for parent in node.parents], dtype=np.intp)
            for node in self._nodes
        )

    @classmethod
    def sorted(cls, nodes: Iterable[Node]) -> "BayesianNetwork":
        items = list(nodes)
        order = _topological_order(
            [node.name for node in items],
            lambda position: items[position].parent_names,
        )
        return cls(items[position] for position in order)

    # ---------------------------------------------------------------- accessors
    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(node.name for node in self._nodes)

    def node(self, name: str) -> Node:
        try:
            return self._nodes[self._index[name]]
        except KeyError:
            raise KeyError(f"Unknown node '{name}'") from None

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"BayesianNetwork([{', '.join(self.names)}])"

    # ------------------------------------------------------------------ queries
    def _plan(self, query: Query) -> _Plan:
        if not isinstance(query, Query):
            raise TypeError(f"Expected a Query, got {type(query).__name__}")
        unknown = [
            name
            for name in (*query.query_variables, *query.evidence_variables)
            if name not in self._index
        ]
        if unknown:
            raise QueryError(
                f"Unknown variable(s) {', '.join(unknown)}; network has {', '.join(self.names)}"
            )
        columns = sorted(self._index[name] for name in query.query_variables)
        evidence = {self._index[name]: value for name, value in query.evidence.items()}
        return _Plan(query_columns=np.array(columns, dtype=np.intp), evidence=evidence)

    def result_variables(self, query: Query) -> Tuple[str, ...]:
        """Names behind each bit of a result: network order restricted to the query."""
        plan = self._plan(query)
        return tuple(self._nodes[column].name for column in plan.query_columns)

    def _simulate(
        self,
        plan: _Plan,
        size: int,
        rng: np.random.Generator,
        *,
        force_evidence: bool,
    ) -> Tuple[np.ndarray, np.ndarray]:
        values = np.zeros((size, len(self._nodes)), dtype=bool)
        weights = np.ones(size, dtype=np.float64)
        for position, node in enumerate(self._nodes):
            parents = values[:, self._parent_columns[position]]
            forced = plan.evidence.get(position) if force_evidence else None
            if forced is None:
                values[:, position] = node.draw(rng, parents)
                continue
            probs = node.probabilities(parents)
            weights *= probs if forced else 1.0 - probs
            values[:, position] = forced
        return values, weights

    @staticmethod
    def _consistent(values: np.ndarray, plan: _Plan) -> np.ndarray:
        keep = np.ones(values.shape[0], dtype=bool)
        for position, required in plan.evidence.items():
            keep &= values[:, position] == required
        return keep

    def _run(
        self,
        method: str,
        query: Query,
        num_samples: int,
        rng: RandomSource,
        batch_size: Optional[int],
    ) -> WeightedSet:
        plan = self._plan(query)
        generator = _resolve_rng(rng)
        result = WeightedSet(len(plan.query_columns))
        if batch_size is not None and int(batch_size) <= 0:
            raise ValueError("batch_size must be positive when provided")
        remaining = max(int(num_samples), 0)
        batch = remaining if batch_size is None else int(batch_size)
        if method == "prior" and plan.evidence:
            logger.warning("Prior sampling ignores the evidence in %s", query)

        accepted = 0
        mass = 0.0
        while remaining > 0:
            size = min(batch, remaining)
            values, weights = self._simulate(
                plan, size, generator, force_evidence=method == "likelihood"
            )
            if method == "rejection":
                keep = self._consistent(values, plan)
                values, weights = values[keep], weights[keep]
            result.tally(values[:, plan.query_columns], weights)
            accepted += values.shape[0]
            mass += float(weights.sum())
            remaining -= size

        logger.debug(
            "%s sampling %s: %d trials, %d accepted, weight mass %.6g",
            method,
            query,
            max(int(num_samples), 0),
            accepted,
            mass,
        )
        return result.normalize()

    def prior_sample(
        self,
        query: Query,
        num_samples: int,
        rng: RandomSource = None,
        *,
        batch_size: Optional[int] = DEFAULT_BATCH_SIZE,
    ) -> WeightedSet:
        """
        Estimate the marginal over the query variables by direct sampling.

        Every node is sampled in topological order and each trial adds one to
        the tally of its query assignment. Evidence plays no part.
        """

        return self._run("prior", query, num_samples, rng, batch_size)

    def rejection_sample(
        self,
        query: Query,
        num_samples: int,
        rng: RandomSource = None,
        *,
        batch_size: Optional[int] = DEFAULT_BATCH_SIZE,
    ) -> WeightedSet:
        """
        Estimate the posterior by discarding trials that contradict the evidence.

        When no trial is accepted the all-zero set is returned unnormalised.
        """

        return self._run("rejection", query, num_samples, rng, batch_size)

    def likelihood_weighting(
        self,
        query: Query,
        num_samples: int,
        rng: RandomSource = None,
        *,
        batch_size: Optional[int] = DEFAULT_BATCH_SIZE,
    ) -> WeightedSet:
        """
        Estimate the posterior by fixing evidence nodes and weighting trials.

        Evidence nodes are never sampled. Each one multiplies the trial weight by
        the CPT probability of its forced value given the parents already
        resolved in that trial, and the trial adds its final weight to the
        tally.
        """

        return self._run("likelihood", query, num_samples, rng, batch_size)

    def likelihood_trial(
        self,
        query: Query,
        rng: RandomSource = None,
    ) -> Tuple[Assignment, float]:
        """Run a single likelihood-weighting trial and return its assignment and weight."""
        plan = self._plan(query)
        values, weights = self._simulate(plan, 1, _resolve_rng(rng), force_evidence=True)
        return Assignment(tuple(values[0, plan.query_columns])), float(weights[0])

    def query(
        self,
        query: Query,
        config: Optional[SamplingConfig] = None,
        *,
        rng: RandomSource = None,
    ) -> WeightedSet:
        """Run the estimator selected by ``config``; an explicit ``rng`` overrides its seed."""
        cfg = (config or SamplingConfig()).normalized()
        generator = _resolve_rng(rng) if rng is not None else cfg.make_rng()
        return self._run(cfg.method, query, cfg.num_samples, generator, cfg.batch_size)


def build_network(specs: Iterable[NodeSpec], *, sort: bool = False) -> BayesianNetwork:
    """
    Build a network from node descriptors.

    Specs are expected in topological order; pass ``sort=True`` to accept them
    in any order.
    """

    items = list(specs)
    names = [spec.name for spec in items]
    if sort:
        order = _topological_order(names, lambda position: items[position].parents)
        items = [items[position] for position in order]
    built: Dict[str, Node] = {}
    for spec in items:
        if spec.name in built:
            raise TopologyError(f"Duplicate node '{spec.name}'")
        parents = []
        for parent in spec.parents:
            if parent not in built:
                where = "appears after it" if parent in names else "is not defined"
                raise TopologyError(f"Parent '{parent}' of '{spec.name}' {where}")
            parents.append(built[parent])
        built[spec.name] = Node(spec.name, spec.cpt, parents)
    return BayesianNetwork(built.values())
