from omegaconf import DictConfig

from particle_filter import (
    Arena,
    MotionModel,
    ObservationModel,
    ParticleFilter,
    RandomSource,
    SensorModel,
    WheelResampler,
)


def seed_everything(seed: int = 42) -> RandomSource:
    """Random source shared by the filter and the simulation, seeded for reproducible runs."""
    return RandomSource(seed)


def build_filter(cfg: DictConfig, rng: RandomSource) -> tuple[ParticleFilter, SensorModel]:
    """Assemble the particle filter and the sensor model it scores against."""
    arena = Arena(side=float(cfg.arena.side))

    sensor_cfg = dict(cfg.sensor)
    sensor_cfg["ray_offsets_deg"] = tuple(sensor_cfg["ray_offsets_deg"])
    sensor_model = SensorModel(arena, rng, **sensor_cfg)

    motion_model = MotionModel(rng, **cfg.motion)
    observation_model = ObservationModel(arena, sensor_model, **cfg.sensor)
    resampler = WheelResampler(arena, rng, **cfg.filter)
    pf = ParticleFilter(motion_model, observation_model, resampler, **cfg.filter)
    return pf, sensor_model
