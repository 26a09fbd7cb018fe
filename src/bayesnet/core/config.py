from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

_METHOD_ALIASES = {
    "prior": "prior",
    "direct": "prior",
    "rejection": "rejection",
    "likelihood": "likelihood",
    "likelihood_weighting": "likelihood",
    "lw": "likelihood",
}

DEFAULT_BATCH_SIZE = 4096


@dataclass
class SamplingConfig:
    """
    Switches shared by the sampling procedures of :class:`BayesianNetwork`.

    * ``method`` picks the estimator used by :meth:`BayesianNetwork.query`.
    * ``seed`` seeds a fresh ``numpy.random.Generator``; ``None`` draws entropy
      from the OS, so runs are only reproducible with an explicit seed.
    * ``batch_size`` caps how many trials are held in memory at once.
    """

    method: str = "likelihood"  # "prior" | "rejection" | "likelihood"
    num_samples: int = 10000
    seed: Optional[int] = None
    batch_size: Optional[int] = DEFAULT_BATCH_SIZE

    def normalized(self) -> "SamplingConfig":
        method = _METHOD_ALIASES.get(str(self.method).lower().replace("-", "_"))
        if method is None:
            raise ValueError(f"Unsupported sampling method: {self.method}")
        num_samples = max(int(self.num_samples), 0)
        seed = self.seed
        if seed is not None:
            seed = int(seed)
        batch_size = self.batch_size
        if batch_size is not None:
            batch_size = int(batch_size)
            if batch_size <= 0:
                raise ValueError("batch_size must be positive when provided")
        return replace(
            self,
            method=method,
            num_samples=num_samples,
            seed=seed,
            batch_size=batch_size,
        )

    def make_rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)
