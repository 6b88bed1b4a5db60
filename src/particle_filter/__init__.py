from .arena import Arena, Pose
from .estimator import weighted_centroid
from .motion_model import MotionModel
from .observation_model import ObservationModel
from .particle import Particle, PoseEstimate
from .pf import ParticleFilter, Stage, StepResult
from .random_source import RandomSource
from .resampler import WheelResampler
from .sensor_model import Observation, SensorModel

__all__ = [
    "Arena",
    "MotionModel",
    "Observation",
    "ObservationModel",
    "ParticleFilter",
    "Particle",
    "Pose",
    "PoseEstimate",
    "RandomSource",
    "SensorModel",
    "Stage",
    "StepResult",
    "WheelResampler",
    "weighted_centroid",
]
