from __future__ import annotations

import math
from typing import TYPE_CHECKING

from particle_filter.arena import Pose

if TYPE_CHECKING:
    from particle_filter import RandomSource, SensorModel
    from particle_filter.sensor_model import Observation


class SimulatedAgent:
    """Robot driving a looping path, with dead-reckoning odometry and range sensors.

    Per tick the robot moves by (sin(t / 10), cos(t / 10)) and faces pi/2 - t/10.
    Odometry integrates the same deltas corrupted by gaussian noise.
    """

    def __init__(
        self,
        sensor_model: SensorModel,
        rng: RandomSource,
        start_x: float = 36.0,
        start_y: float = 48.0,
        start_theta_deg: float = 75.0,
        odom_sigma: float = 0.05,
        **kwargs,
    ) -> None:
        if odom_sigma < 0.0:
            raise ValueError(f"Odometry sigma must be non-negative, got {odom_sigma}")
        self.sensor_model = sensor_model
        self.rng = rng
        self.odom_sigma = odom_sigma

        self.pose = Pose(float(start_x), float(start_y), math.radians(start_theta_deg))
        self.odom_x, self.odom_y = self.pose.x, self.pose.y
        self.last_x, self.last_y = self.pose.x, self.pose.y
        self.tick = 0

    def displacement(self) -> tuple[float, float]:
        """True displacement since the previous tick"""
        return self.pose.x - self.last_x, self.pose.y - self.last_y

    def sense(self) -> list[Observation]:
        return self.sensor_model.observe_all(self.pose)

    def advance(self) -> None:
        self.last_x, self.last_y = self.pose.x, self.pose.y

        dx = math.sin(self.tick / 10)
        dy = math.cos(self.tick / 10)
        self.pose.x += dx
        self.pose.y += dy
        self.pose.theta = math.pi / 2 - self.tick / 10

        self.odom_x += float(self.rng.gaussian(dx, self.odom_sigma))
        self.odom_y += float(self.rng.gaussian(dy, self.odom_sigma))
        self.tick += 1
