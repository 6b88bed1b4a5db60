from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .particle import Particle
    from .random_source import RandomSource


class MotionModel:
    def __init__(self, rng: RandomSource, sigma: float = 0.1, **kwargs: dict[str, any]) -> None:
        if sigma < 0.0:
            raise ValueError(f"Motion noise sigma must be non-negative, got {sigma}")
        self.rng = rng
        self.sigma = float(sigma)

    def __call__(self, particles: list[Particle], dx: float, dy: float, **kwargs) -> None:
        """
        Args:
            particles: list of Particle objects to be updated in-place
            dx, dy: dead-reckoning displacement since the last tick
        """
        n = len(particles)
        if n == 0:
            return

        # independent odometry noise per particle and axis
        step_x = self.rng.gaussian(dx, self.sigma, size=n)
        step_y = self.rng.gaussian(dy, self.sigma, size=n)
        for p, sx, sy in zip(particles, step_x, step_y):
            p.x += float(sx)
            p.y += float(sy)
