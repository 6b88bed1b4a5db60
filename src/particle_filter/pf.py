from __future__ import annotations

import enum
import functools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from particle_filter.estimator import weighted_centroid
from particle_filter.observation_model import normal_pdf
from particle_filter.particle import Particle, PoseEstimate

if TYPE_CHECKING:
    from particle_filter import MotionModel, ObservationModel, WheelResampler
    from particle_filter.sensor_model import Observation


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class Stage(enum.Enum):
    MOTION = "motion"
    RESAMPLE = "resample"
    WEIGHT = "weight"
    ESTIMATE = "estimate"


NEXT_STAGE = {
    Stage.MOTION: Stage.RESAMPLE,
    Stage.RESAMPLE: Stage.WEIGHT,
    Stage.WEIGHT: Stage.ESTIMATE,
    Stage.ESTIMATE: Stage.MOTION,
}


@dataclass
class StepResult:
    particles: list[Particle]
    estimate: PoseEstimate
    degenerate: bool


def stage(expected: Stage) -> callable:
    """Run a filter stage only in its turn, then hand over to the next one."""

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            if not self.is_initialized:
                raise RuntimeError("Particle filter is not initialized")
            if self.next_stage is not expected:
                raise RuntimeError(f"Cannot run {expected.value} stage, expected {self.next_stage.value} stage")
            self._pose_valid = False
            result = fn(self, *args, **kwargs)
            self.next_stage = NEXT_STAGE[expected]
            return result

        return wrapper

    return decorator


class ParticleFilter:
    def __init__(
        self,
        motion_model: MotionModel,
        observation_model: ObservationModel,
        resampler: WheelResampler,
        sort_particles: bool = True,
        **kwargs,
    ):
        self.motion_model = motion_model
        self.observation_model = observation_model
        self.resampler = resampler
        self.particles: list[Particle] = []

        self.n_particles = resampler.n_particles
        self.sort_particles = sort_particles
        self.next_stage = Stage.MOTION

        self._pose = PoseEstimate.invalid()
        self._pose_valid = False

    @property
    def pose(self) -> PoseEstimate:
        """Weighted centroid of the current belief, cached until the particles change"""
        if self._pose_valid:
            return self._pose

        if not self.particles:
            logger.error("Particles are not initialized")
            return PoseEstimate.invalid()

        self._pose = weighted_centroid(self.particles)
        self._pose_valid = True
        return self._pose

    @property
    def is_initialized(self) -> bool:
        return len(self.particles) > 0

    def reset(self) -> None:
        self.particles = []
        self.next_stage = Stage.MOTION
        self._pose_valid = False

    def initialize(self, init_xy: tuple[float, float] | None = None, init_sigma: float = 0.5) -> None:
        """Spread particles over the arena.

        With a start position, particles are weighted by their distance to it and
        the first particle is placed exactly on it.
        """
        self.particles = self.resampler.random_particles(self.n_particles, weight=1 / self.n_particles)
        if init_xy is not None:
            x0, y0 = init_xy
            self.particles[0].x, self.particles[0].y = float(x0), float(y0)
            for p in self.particles:
                p.weight = normal_pdf(p.x, x0, init_sigma) * normal_pdf(p.y, y0, init_sigma)

        self.next_stage = Stage.MOTION
        self._pose_valid = False

    @stage(Stage.MOTION)
    def predict(self, dx: float, dy: float) -> None:
        self.motion_model(self.particles, dx, dy)

    @stage(Stage.RESAMPLE)
    def resample(self) -> bool:
        """Draw the next population from the current weights.

        Returns True when the weights were degenerate and a uniform draw was used.
        """
        self.particles = self.resampler(self.particles)
        return self.resampler.last_degenerate

    @stage(Stage.WEIGHT)
    def update(self, observations: Sequence[Observation]) -> None:
        self.observation_model(self.particles, observations)

    @stage(Stage.ESTIMATE)
    def estimate(self) -> PoseEstimate:
        if self.sort_particles:
            self.particles.sort(key=lambda p: p.weight, reverse=True)
        self._pose = weighted_centroid(self.particles)
        self._pose_valid = True
        return self._pose

    def step(self, dx: float, dy: float, observations: Sequence[Observation]) -> StepResult:
        """One full tick: motion, resample, weight, estimate."""
        self.predict(dx, dy)
        degenerate = self.resample()
        self.update(observations)
        estimate = self.estimate()
        return StepResult(particles=self.particles, estimate=estimate, degenerate=degenerate)
