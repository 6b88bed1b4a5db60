from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .arena import Arena, Pose
    from .random_source import RandomSource


@dataclass(frozen=True, slots=True)
class Observation:
    """One range reading. `distance` is None when the ray reported no hit."""

    offset: float
    angle: float
    distance: float | None

    @classmethod
    def from_reading(cls, offset: float, angle: float, distance: float | None) -> Observation:
        """Build an observation from a raw reading, mapping non-finite distances to no hit."""
        if distance is not None and not math.isfinite(distance):
            distance = None
        return cls(offset=offset, angle=angle, distance=distance)

    @property
    def is_hit(self) -> bool:
        return self.distance is not None


class SensorModel:
    def __init__(
        self,
        arena: Arena,
        rng: RandomSource,
        ray_offsets_deg: tuple[float, ...] = (0.0, 90.0, -90.0, 180.0),
        proportional: float = 0.05,
        floor: float = 0.590551,
        divisor: float = 3.0,
        noise_scale: float = 1.0,
        **kwargs,
    ) -> None:
        if len(ray_offsets_deg) == 0:
            raise ValueError("At least one sensor ray is required")
        if proportional < 0.0 or floor <= 0.0 or divisor <= 0.0:
            raise ValueError(
                f"Invalid sensor noise parameters (proportional={proportional}, floor={floor}, divisor={divisor})"
            )
        if noise_scale < 0.0:
            raise ValueError(f"noise_scale must be non-negative, got {noise_scale}")

        self.arena = arena
        self.rng = rng
        self.ray_offsets = tuple(np.deg2rad(float(o)) for o in ray_offsets_deg)
        self.proportional = proportional
        self.floor = floor
        self.divisor = divisor
        self.noise_scale = noise_scale

    def sensor_sd(self, distance: float) -> float:
        """Standard deviation of a reading at `distance` (practical max error / divisor)."""
        return max(distance * self.proportional, self.floor) / self.divisor

    def cast_ray(self, pose: Pose, theta_offset: float) -> float | None:
        """Distance from `pose` to the arena boundary along `pose.theta + theta_offset`.

        Edges are tried in the order left, right, bottom, top and the first valid
        hit is returned, which is not necessarily the nearest one.
        """
        side = self.arena.side
        angle = pose.theta + theta_offset
        cos_a, sin_a = math.cos(angle), math.sin(angle)

        # (edge coordinate, direction along edge normal, origin along normal, direction along edge, origin along edge)
        edges = (
            (0.0, cos_a, pose.x, sin_a, pose.y),
            (side, cos_a, pose.x, sin_a, pose.y),
            (0.0, sin_a, pose.y, cos_a, pose.x),
            (side, sin_a, pose.y, cos_a, pose.x),
        )
        for edge, normal_dir, normal_origin, along_dir, along_origin in edges:
            if normal_dir == 0.0:
                continue
            t = (edge - normal_origin) / normal_dir
            hit = along_origin + t * along_dir
            if t > 0.0 and 0.0 <= hit <= side:
                return math.hypot(edge - normal_origin, hit - along_origin)
        return None

    def observe(self, pose: Pose, theta_offset: float) -> Observation:
        """Noise-corrupted reading of the ray cast from the true pose."""
        distance = self.cast_ray(pose, theta_offset)
        if distance is not None:
            distance = float(self.rng.gaussian(distance, self.sensor_sd(distance) * self.noise_scale))
        return Observation.from_reading(theta_offset, pose.theta + theta_offset, distance)

    def observe_all(self, pose: Pose) -> list[Observation]:
        return [self.observe(pose, offset) for offset in self.ray_offsets]
