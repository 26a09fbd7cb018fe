from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np

from .exceptions import QueryError


@dataclass(frozen=True)
class Query:
    """
    A posterior query ``P(query_variables | evidence)``.

    The sampling procedures only read from a query. Text such as
    ``p(Rain | !Storm)`` is turned into one by :func:`bayesnet.query.parse_query`.
    """

    query_variables: Tuple[str, ...]
    evidence: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self):
        variables = self.query_variables
        if isinstance(variables, str):
            variables = (variables,)
        variables = tuple(variables)
        if not variables:
            raise QueryError("A query needs at least one query variable")
        if len(set(variables)) != len(variables):
            raise QueryError(f"Duplicate query variable in {variables}")
        evidence: Dict[str, bool] = {}
        for name, value in dict(self.evidence).items():
            if not isinstance(value, (bool, np.bool_)):
                raise QueryError(
                    f"Evidence for '{name}' must be a boolean, got {type(value).__name__}"
                )
            evidence[str(name)] = bool(value)
        overlap = [name for name in variables if name in evidence]
        if overlap:
            raise QueryError(
                f"Variable(s) {', '.join(overlap)} cannot be both queried and observed"
            )
        object.__setattr__(self, "query_variables", variables)
        object.__setattr__(self, "evidence", MappingProxyType(evidence))

    @classmethod
    def of(
        cls,
        query_variables: Iterable[str],
        evidence: Optional[Mapping[str, bool]] = None,
    ) -> "Query":
        if isinstance(query_variables, str):
            query_variables = (query_variables,)
        return cls(tuple(query_variables), dict(evidence or {}))

    @property
    def evidence_variables(self) -> Tuple[str, ...]:
        return tuple(self.evidence)

    @property
    def evidence_values(self) -> Dict[str, bool]:
        return dict(self.evidence)

    def __hash__(self) -> int:
        return hash((self.query_variables, tuple(sorted(self.evidence.items()))))

    def __str__(self) -> str:
        head = ", ".join(self.query_variables)
        if not self.evidence:
            return f"p({head})"
        literals = ", ".join(name if value else f"!{name}" for name, value in self.evidence.items())
        return f"p({head} | {literals})"
