"""Estimate the storm/rain queries with all three samplers."""

import numpy as np

from bayesnet import parse_query
from bayesnet.networks import storm_rain

network = storm_rain()
rng = np.random.default_rng(2019)

marginal = network.prior_sample(parse_query("p(Storm)"), 10000, rng)
print("p(Storm) by prior sampling")
print(marginal)

conditioned = parse_query("p(Rain | !Storm)")
print("p(Rain | !Storm) by rejection sampling")
print(network.rejection_sample(conditioned, 10000, rng))
print("p(Rain | !Storm) by likelihood weighting")
print(network.likelihood_weighting(conditioned, 10000, rng))
