"""Build a network from descriptors and compare the conditioned estimators."""

import numpy as np

from bayesnet import NodeSpec, Query, build_network

specs = [
    NodeSpec("WetGrass", ("Sprinkler", "Rain"), {"TT": 0.99, "TF": 0.9, "FT": 0.9, "FF": 0.0}),
    NodeSpec("Rain", ("Cloudy",), {"T": 0.8, "F": 0.2}),
    NodeSpec("Sprinkler", ("Cloudy",), {"T": 0.1, "F": 0.5}),
    NodeSpec("Cloudy", (), 0.5),
]
network = build_network(specs, sort=True)
print("Sampling order:", ", ".join(network.names))

query = Query.of(["Sprinkler", "Rain"], {"WetGrass": True})
print("Result bits:", ", ".join(network.result_variables(query)))
rng = np.random.default_rng(7)
for label, sampler in (
    ("rejection", network.rejection_sample),
    ("likelihood", network.likelihood_weighting),
):
    result = sampler(query, 20000, rng)
    print(f"# {label}")
    for event, weight in result.items():
        print(f"{event} {weight:.4f}")
