from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from .particle import Particle

if TYPE_CHECKING:
    from .arena import Arena
    from .random_source import RandomSource

logger = logging.getLogger(__name__)


class WheelResampler:
    """Resampling wheel with a fraction of uniformly injected particles.

    The sampled part walks the wheel in steps of up to twice the largest weight,
    so heavy particles are re-selected proportionally more often. The injected
    part is spread uniformly over the arena to fight particle deprivation.
    """

    def __init__(
        self,
        arena: Arena,
        rng: RandomSource,
        n_particles: int,
        random_fraction: float = 0.2,
        **kwargs,
    ) -> None:
        if int(n_particles) < 1:
            raise ValueError(f"n_particles must be at least 1, got {n_particles}")
        self.arena = arena
        self.rng = rng
        self.n_particles = int(n_particles)
        self.random_fraction = float(np.clip(random_fraction, 0.0, 1.0))
        self.last_degenerate = False

    @property
    def n_random(self) -> int:
        return math.floor(self.n_particles * self.random_fraction)

    @property
    def n_sampled(self) -> int:
        return self.n_particles - self.n_random

    def random_particles(self, n: int, weight: float = 1.0) -> list[Particle]:
        xs = self.rng.uniform(0.0, self.arena.side, size=n)
        ys = self.rng.uniform(0.0, self.arena.side, size=n)
        return [Particle(x=float(x), y=float(y), weight=weight) for x, y in zip(xs, ys)]

    def __call__(self, particles: list[Particle]) -> list[Particle]:
        weights = [p.weight for p in particles]
        max_w = max(weights, default=0.0)
        degenerate = (
            not particles or not all(math.isfinite(w) and w >= 0.0 for w in weights) or max_w <= 0.0
        )
        self.last_degenerate = degenerate

        if not particles:
            logger.warning("Resampling an empty particle set, drawing all %d particles at random", self.n_particles)
            return self.random_particles(self.n_particles)

        if degenerate:
            logger.warning("Degenerate particle weights (max=%s), falling back to uniform resampling", max_w)
            new_particles = self._uniform_draw(particles)
        else:
            new_particles = self._wheel_draw(particles, weights, max_w)

        new_particles.extend(self.random_particles(self.n_random))
        return new_particles

    def _wheel_draw(self, particles: list[Particle], weights: list[float], max_w: float) -> list[Particle]:
        M = len(particles)
        index = self.rng.integer(M)
        # walk in units of the largest weight so huge weights cannot overflow beta
        weights = [w / max_w for w in weights]
        beta = 0.0
        new_particles = []
        for step in self.rng.uniform(size=self.n_sampled):
            beta += float(step) * 2.0
            while beta > weights[index]:
                beta -= weights[index]
                index = (index + 1) % M
            ancestor = particles[index]
            new_particles.append(Particle(x=ancestor.x, y=ancestor.y))
        return new_particles

    def _uniform_draw(self, particles: list[Particle]) -> list[Particle]:
        new_particles = []
        for _ in range(self.n_sampled):
            ancestor = particles[self.rng.integer(len(particles))]
            new_particles.append(Particle(x=ancestor.x, y=ancestor.y))
        return new_particles
