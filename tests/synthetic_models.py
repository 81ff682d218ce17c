"""
Synthetic propulsion models with hand-computable behaviour
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LinearThrustModel:
    """Thrust k·s, power loss c·s², constant optimal slip"""

    k: float = 100.0  # N per m/s of slip
    slip: float = 2.0  # m/s
    loss_coefficient: float = 0.0  # W per (m/s)²

    def thrust_force(self, slip: float, velocity: float) -> float:
        return self.k * slip

    def power_loss(self, slip: float, velocity: float) -> float:
        return self.loss_coefficient * slip**2

    def optimal_slip(self, velocity: float) -> float:
        return self.slip


@dataclass(frozen=True)
class ConstantThrustModel:
    """Thrust independent of slip"""

    force: float = 0.0
    slip: float = 0.0

    def thrust_force(self, slip: float, velocity: float) -> float:
        return self.force

    def power_loss(self, slip: float, velocity: float) -> float:
        return 0.0

    def optimal_slip(self, velocity: float) -> float:
        return self.slip
