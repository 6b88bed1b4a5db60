import logging
import math

from .particle import Particle, PoseEstimate

logger = logging.getLogger(__name__)


def weighted_centroid(particles: list[Particle]) -> PoseEstimate:
    """Weighted mean position of the particle set.

    Returns an invalid (NaN) estimate when the total weight is zero or not finite.
    """
    total_weight = math.fsum(p.weight for p in particles)
    if not particles or not math.isfinite(total_weight) or total_weight <= 0.0:
        logger.warning("Cannot estimate pose, total particle weight is %s", total_weight)
        return PoseEstimate.invalid()

    x = math.fsum(p.x * p.weight for p in particles) / total_weight
    y = math.fsum(p.y * p.weight for p in particles) / total_weight
    return PoseEstimate(x, y)
