import numpy as np


class RandomSource:
    """Uniform and gaussian samples drawn from one seeded numpy generator."""

    def __init__(self, seed: int | None = None, generator: np.random.Generator | None = None) -> None:
        self.generator = generator if generator is not None else np.random.default_rng(seed)

    def uniform(self, low: float = 0.0, high: float = 1.0, size: int | None = None) -> float | np.ndarray:
        return self.generator.uniform(low, high, size=size)

    def gaussian(self, mean: float, stdev: float, size: int | None = None) -> float | np.ndarray:
        if stdev == 0.0:
            return mean if size is None else np.full(size, mean, dtype=np.float64)
        return self.generator.normal(mean, stdev, size=size)

    def integer(self, high: int) -> int:
        """Uniform integer in [0, high)"""
        return int(self.generator.integers(0, high))
