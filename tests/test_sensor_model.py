import math

import numpy as np
import pytest

from particle_filter import Observation, Pose, SensorModel


def test_sensor_sd_floor_and_monotonic(sensor_model):
    distances = np.linspace(0.0, 300.0, 601)
    sds = [sensor_model.sensor_sd(d) for d in distances]

    assert min(sds) >= 0.590551 / 3
    assert sensor_model.sensor_sd(0.0) == pytest.approx(0.590551 / 3)
    assert all(b >= a for a, b in zip(sds, sds[1:]))
    assert sensor_model.sensor_sd(100.0) == pytest.approx(100.0 * 0.05 / 3)


def test_front_ray_hits_top_wall(sensor_model, start_pose):
    # heading 75 deg from (36, 48): left/bottom are behind, the right wall line is hit above y=144
    distance = sensor_model.cast_ray(start_pose, 0.0)

    expected = 96.0 / math.sin(math.radians(75.0))
    assert distance == pytest.approx(expected)
    assert distance == pytest.approx(99.3865, abs=1e-4)


def test_side_rays(sensor_model, start_pose):
    # left ray at 165 deg ends on the left wall, right ray at -15 deg on the right wall
    assert sensor_model.cast_ray(start_pose, math.pi / 2) == pytest.approx(36.0 / math.cos(math.radians(15.0)))
    assert sensor_model.cast_ray(start_pose, -math.pi / 2) == pytest.approx(108.0 / math.cos(math.radians(15.0)))
    # back ray at 255 deg ends on the bottom wall
    assert sensor_model.cast_ray(start_pose, math.pi) == pytest.approx(48.0 / math.sin(math.radians(75.0)))


def test_first_valid_edge_wins_over_nearest(sensor_model):
    # from outside the arena, facing -x: the right wall is 56 away but the left wall is tried first
    pose = Pose(200.0, 72.0, math.pi)
    assert sensor_model.cast_ray(pose, 0.0) == pytest.approx(200.0)


def test_axis_aligned_ray_skips_parallel_edges(sensor_model):
    pose = Pose(36.0, 48.0, 0.0)
    assert sensor_model.cast_ray(pose, 0.0) == pytest.approx(108.0)


def test_no_hit_outside_arena(sensor_model):
    pose = Pose(200.0, 200.0, 0.0)
    assert sensor_model.cast_ray(pose, 0.0) is None

    obs = sensor_model.observe(pose, 0.0)
    assert obs.distance is None
    assert not obs.is_hit


def test_noise_free_observation_matches_ray(exact_sensor_model, start_pose):
    obs = exact_sensor_model.observe(start_pose, 0.0)
    assert obs.distance == exact_sensor_model.cast_ray(start_pose, 0.0)
    assert obs.angle == pytest.approx(start_pose.theta)


def test_noisy_observation_spread(sensor_model, start_pose):
    true_distance = sensor_model.cast_ray(start_pose, 0.0)
    readings = np.array([sensor_model.observe(start_pose, 0.0).distance for _ in range(4000)])

    assert readings.mean() == pytest.approx(true_distance, abs=0.15)
    assert readings.std() == pytest.approx(sensor_model.sensor_sd(true_distance), rel=0.1)


def test_observe_all_uses_configured_rays(arena, rng, start_pose):
    four = SensorModel(arena, rng)
    three = SensorModel(arena, rng, ray_offsets_deg=(0.0, 90.0, -90.0))

    assert len(four.observe_all(start_pose)) == 4
    observations = three.observe_all(start_pose)
    assert [o.offset for o in observations] == pytest.approx([0.0, math.pi / 2, -math.pi / 2])


def test_non_finite_reading_is_no_hit():
    assert Observation.from_reading(0.0, 0.0, float("nan")).distance is None
    assert Observation.from_reading(0.0, 0.0, float("inf")).distance is None
    assert Observation.from_reading(0.0, 0.0, 12.5).distance == 12.5


@pytest.mark.parametrize(
    "kwargs",
    [{"ray_offsets_deg": ()}, {"floor": 0.0}, {"divisor": -1.0}, {"noise_scale": -0.5}],
)
def test_invalid_configuration(arena, rng, kwargs):
    with pytest.raises(ValueError):
        SensorModel(arena, rng, **kwargs)
