import math

import pytest

from particle_filter import Arena, ObservationModel, Pose, RandomSource, SensorModel


@pytest.fixture
def arena():
    return Arena(side=144.0)


@pytest.fixture
def rng():
    return RandomSource(seed=0)


@pytest.fixture
def sensor_model(arena, rng):
    return SensorModel(arena, rng)


@pytest.fixture
def exact_sensor_model(arena, rng):
    """Sensor model producing noise-free readings"""
    return SensorModel(arena, rng, noise_scale=0.0)


@pytest.fixture
def observation_model(arena, sensor_model):
    return ObservationModel(arena, sensor_model)


@pytest.fixture
def start_pose():
    return Pose(36.0, 48.0, math.radians(75.0))
