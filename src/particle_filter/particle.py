import math
from dataclasses import dataclass


@dataclass(slots=True)
class Particle:
    x: float
    y: float
    weight: float = math.nan

    @property
    def is_weighted(self) -> bool:
        return math.isfinite(self.weight)


@dataclass(frozen=True, slots=True)
class PoseEstimate:
    x: float
    y: float

    @classmethod
    def invalid(cls) -> "PoseEstimate":
        return cls(math.nan, math.nan)

    @property
    def valid(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)
