from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Arena:
    """Axis-aligned square arena with walls at x in {0, side} and y in {0, side}."""

    side: float = 144.0

    def __post_init__(self) -> None:
        if not self.side > 0.0:
            raise ValueError(f"Arena side must be positive, got {self.side}")

    def contains(self, x: float, y: float) -> bool:
        return 0.0 <= x <= self.side and 0.0 <= y <= self.side


@dataclass(slots=True)
class Pose:
    x: float
    y: float
    theta: float
