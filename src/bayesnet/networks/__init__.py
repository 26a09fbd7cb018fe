"""
Ready-made Bayesian networks.

The builders return fresh :class:`~bayesnet.core.network.BayesianNetwork`
instances, so callers can pin node values or sample without affecting other
users of the same template.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from ..core.network import BayesianNetwork, NodeSpec, build_network

__all__ = [
    "storm_rain",
    "burglary_alarm",
    "sprinkler",
    "get_network",
    "NETWORKS",
    "STORM_RAIN_SPECS",
    "BURGLARY_ALARM_SPECS",
    "SPRINKLER_SPECS",
]

STORM_RAIN_SPECS: Tuple[NodeSpec, ...] = (
    NodeSpec("Storm", (), 0.7),
    NodeSpec("Rain", ("Storm",), {(True,): 0.7, (False,): 0.3}),
)

# Russell & Norvig's burglary alarm network.
BURGLARY_ALARM_SPECS: Tuple[NodeSpec, ...] = (
    NodeSpec("Burglary", (), 0.001),
    NodeSpec("Earthquake", (), 0.002),
    NodeSpec(
        "Alarm",
        ("Burglary", "Earthquake"),
        {"TT": 0.95, "TF": 0.94, "FT": 0.29, "FF": 0.001},
    ),
    NodeSpec("JohnCalls", ("Alarm",), {"T": 0.90, "F": 0.05}),
    NodeSpec("MaryCalls", ("Alarm",), {"T": 0.70, "F": 0.01}),
)

SPRINKLER_SPECS: Tuple[NodeSpec, ...] = (
    NodeSpec("Cloudy", (), 0.5),
    NodeSpec("Sprinkler", ("Cloudy",), {"T": 0.1, "F": 0.5}),
    NodeSpec("Rain", ("Cloudy",), {"T": 0.8, "F": 0.2}),
    NodeSpec(
        "WetGrass",
        ("Sprinkler", "Rain"),
        {"TT": 0.99, "TF": 0.90, "FT": 0.90, "FF": 0.0},
    ),
)


def storm_rain() -> BayesianNetwork:
    """
    Two-node network: ``Storm`` (prior 0.7) and ``Rain`` conditioned on it.

    P(Rain | Storm) is 0.7 and P(Rain | !Storm) is 0.3.
    """

    return build_network(STORM_RAIN_SPECS)


def burglary_alarm() -> BayesianNetwork:
    return build_network(BURGLARY_ALARM_SPECS)


def sprinkler() -> BayesianNetwork:
    """Cloudy / Sprinkler / Rain / WetGrass, with WetGrass depending on both middle nodes."""
    return build_network(SPRINKLER_SPECS)


NETWORKS: Dict[str, Callable[[], BayesianNetwork]] = {
    "storm_rain": storm_rain,
    "burglary_alarm": burglary_alarm,
    "sprinkler": sprinkler,
}


def get_network(name: str) -> BayesianNetwork:
    try:
        builder = NETWORKS[name]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise KeyError(f"Unknown network '{name}'; choose one of: {known}") from None
    return builder()
