from .agent import SimulatedAgent

__all__ = ["SimulatedAgent"]
