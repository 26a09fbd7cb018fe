from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from .core.config import SamplingConfig
from .core.exceptions import BayesNetError
from .networks import NETWORKS, get_network
from .query.parser import parse_query


def _run_query(
    text: str,
    *,
    network_name: str,
    method: str,
    samples: int,
    seed: Optional[int],
    as_json: bool,
) -> None:
    network = get_network(network_name)
    query = parse_query(text)
    config = SamplingConfig(method=method, num_samples=samples, seed=seed)
    result = network.query(query, config)
    variables = network.result_variables(query)
    if as_json:
        payload = {
            "query": str(query),
            "network": network_name,
            "method": config.normalized().method,
            "samples": samples,
            "variables": list(variables),
            "distribution": result.as_dict(),
        }
        print(json.dumps(payload, indent=2))
        return
    print(f"# {', '.join(variables)}")
    for event, weight in result.items():
        print(f"{event} {weight:.6f}")


def _list_networks() -> None:
    for name in sorted(NETWORKS):
        network = NETWORKS[name]()
        print(f"{name}: {', '.join(network.names)}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Approximate inference on boolean Bayesian networks"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="cmd")

    query_parser = subparsers.add_parser("query", help="Estimate a posterior by sampling")
    query_parser.add_argument("text", help="Query such as 'p(Rain | !Storm)'")
    query_parser.add_argument(
        "--network",
        default="storm_rain",
        choices=sorted(NETWORKS),
        help="Bundled network to query (default: storm_rain)",
    )
    query_parser.add_argument(
        "--method",
        default="likelihood",
        choices=["prior", "rejection", "likelihood"],
        help="Sampling method (default: likelihood)",
    )
    query_parser.add_argument(
        "--samples",
        type=int,
        default=10000,
        help="Number of trials (default: 10000)",
    )
    query_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    query_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    subparsers.add_parser("networks", help="List bundled networks")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "query":
        try:
            _run_query(
                args.text,
                network_name=args.network,
                method=args.method,
                samples=args.samples,
                seed=args.seed,
                as_json=args.json,
            )
        except BayesNetError as exc:
            raise SystemExit(f"error: {exc}") from exc
        return
    if args.cmd == "networks":
        _list_networks()
        return

    parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
