from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from . import networks, query
from .core.assignment import Assignment, AssignmentEnumerator, assignment_indices
from .core.config import SamplingConfig
from .core.exceptions import (
    BayesNetError,
    CPTError,
    DomainError,
    QueryError,
    QueryParseError,
    TopologyError,
)
from .core.network import BayesianNetwork, NodeSpec, build_network
from .core.node import Node, make_cpt
from .core.query import Query
from .core.weighted_set import WeightedSet
from .query.parser import parse_query

try:
    __version__ = _load_version("bayesnet-sampling")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Assignment",
    "AssignmentEnumerator",
    "assignment_indices",
    "WeightedSet",
    "Node",
    "make_cpt",
    "Query",
    "parse_query",
    "SamplingConfig",
    "BayesianNetwork",
    "NodeSpec",
    "build_network",
    "BayesNetError",
    "DomainError",
    "CPTError",
    "TopologyError",
    "QueryError",
    "QueryParseError",
    "networks",
    "query",
    "__version__",
]
