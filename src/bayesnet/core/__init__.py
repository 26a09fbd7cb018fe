"""Core sampling engine for bayesnet."""

__all__ = [
    "assignment",
    "config",
    "exceptions",
    "network",
    "node",
    "query",
    "weighted_set",
]
