"""
Simulation state representation
"""

import math
from dataclasses import dataclass, fields
from enum import Enum


class Phase(Enum):
    """Propulsion regime applied to a step"""

    ACCELERATING = 1
    DECELERATING = 2
    ROTOR_SPEED_LIMITED = 3  # Rotor pinned at its maximum angular velocity


@dataclass(frozen=True)
class StateRecord:
    """State of the pod at one time index"""

    velocity: float = 0.0  # m/s
    acceleration: float = 0.0  # m/s²
    distance: float = 0.0  # m
    theta: float = 0.0  # Rotor angle (rad)
    omega: float = 0.0  # Rotor angular velocity (rad/s)
    torque: float = 0.0  # Net torque on the rotor (N·m)
    torque_lat: float = 0.0  # Torque from lateral forces (N·m)
    torque_motor: float = 0.0  # Torque supplied by the motor (N·m)
    power: float = 0.0  # Output power (W)
    power_loss: float = 0.0  # Dissipated power, all wheels (W)
    power_input: float = 0.0  # W
    efficiency: float = 0.0  # Output / input power
    slip: float = 0.0  # Rotor surface speed minus pod speed (m/s)
    f_thrust_wheel: float = 0.0  # Thrust from a single wheel pair (N)
    f_lat_wheel: float = 0.0  # Lateral force from a single wheel pair (N)
    f_x_pod: float = 0.0  # Net longitudinal force on the pod (N)
    f_y_pod: float = 0.0  # Net lateral force on the pod (N)

    @property
    def rpm(self) -> float:
        """Rotor speed in revolutions per minute"""
        return omega_to_rpm(self.omega)


STATE_FIELDS = tuple(f.name for f in fields(StateRecord))


def omega_to_rpm(omega: float) -> float:
    """Convert angular velocity (rad/s) to RPM"""
    return omega * 60 / (2 * math.pi)
