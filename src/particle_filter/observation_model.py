from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .arena import Arena
    from .particle import Particle
    from .sensor_model import Observation, SensorModel

SQRT_2PI = math.sqrt(2.0 * math.pi)


def normal_pdf(value: float, mu: float, sd: float, epsilon: float = 1e-13) -> float:
    """Gaussian density at `value`, floored at `epsilon` so no weight is exactly zero."""
    z = (value - mu) / sd
    # z**2 overflows past this bound
    if abs(z) > 1e150:
        return epsilon
    density = math.exp(-0.5 * z**2) / (sd * SQRT_2PI)
    if not math.isfinite(density):
        return epsilon
    return max(density, epsilon)


class ObservationModel:
    """Scores particles against range readings of the arena walls.

    Each reading is reflected back through its ray geometry to the position the
    robot must occupy if the ray ended on the vertical (x) or horizontal (y)
    wall it points towards. A particle is scored per ray by the better of the
    two axis likelihoods; rays are combined by product.
    """

    def __init__(self, arena: Arena, sensor_model: SensorModel, epsilon: float = 1e-13, **kwargs: dict[str, any]) -> None:
        if epsilon <= 0.0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")
        self.arena = arena
        self.sensor_model = sensor_model
        self.epsilon = epsilon

    def predict_impact(self, observation: Observation) -> tuple[float, float] | None:
        if observation.distance is None:
            return None

        side = self.arena.side
        d = observation.distance
        cos_a, sin_a = math.cos(observation.angle), math.sin(observation.angle)
        px = side - d * cos_a if cos_a > 0 else -d * cos_a
        py = side - d * sin_a if sin_a > 0 else -d * sin_a
        return px, py

    def _ray_terms(self, observations: Sequence[Observation]) -> list[tuple[float, float, float]]:
        terms = []
        for obs in observations:
            impact = self.predict_impact(obs)
            # no-hit rays are neutral
            if impact is None:
                continue
            terms.append((impact[0], impact[1], self.sensor_model.sensor_sd(obs.distance)))
        return terms

    def _score_terms(self, particle: Particle, terms: list[tuple[float, float, float]]) -> float:
        weight = 1.0
        for px, py, sd in terms:
            weight *= max(
                normal_pdf(particle.x, px, sd, self.epsilon),
                normal_pdf(particle.y, py, sd, self.epsilon),
            )
        return weight

    def score(self, particle: Particle, observations: Sequence[Observation]) -> float:
        return self._score_terms(particle, self._ray_terms(observations))

    def __call__(self, particles: list[Particle], observations: Sequence[Observation], **kwargs) -> None:
        """Assign an importance weight to every particle in-place."""
        terms = self._ray_terms(observations)
        for p in particles:
            p.weight = self._score_terms(p, terms)
