"""
Query mini-language front end.

Turns text such as ``p(Rain | !Storm)`` into the :class:`~bayesnet.core.query.Query`
objects consumed by the sampling procedures.
"""

from ..core.query import Query
from .parser import GRAMMAR_PATH, parse_query

__all__ = ["Query", "parse_query", "GRAMMAR_PATH"]
