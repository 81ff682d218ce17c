"""
Run summary
"""

from typing import TYPE_CHECKING, Any, Dict

import numpy as np

from pod.state import Phase

if TYPE_CHECKING:
    from pod.trajectory import TrajectoryResult


class TrajectoryAnalyzer:
    """Extracts the headline figures of a finished run"""

    def __init__(self, n_wheel: int) -> None:
        """
        Initialize trajectory analyzer

        Args:
            n_wheel: Number of propulsion wheel pairs (one motor each)
        """
        self.n_wheel = n_wheel

    def analyze(self, result: "TrajectoryResult") -> Dict[str, Any]:
        """
        Summarise a run

        Args:
            result: Finished trajectory

        Returns:
            Dictionary with run duration, distance, peak speed, RPM,
            forces, torques and power, and steps spent in each phase
        """
        velocity = result.column("velocity")
        f_x_pod = result.column("f_x_pod")

        v_max = float(np.max(velocity))
        # First time the peak speed is reached
        v_max_time = float(np.argmax(velocity) * result.dt)

        phases = result.phases[1:]
        phase_steps = {phase.name: sum(1 for p in phases if p is phase) for phase in Phase}

        return {
            "duration": result.duration,
            "distance": float(result.records[-1].distance),
            "termination_reason": result.termination_reason,
            "max_velocity": v_max,
            "max_velocity_time": v_max_time,
            "max_rpm": float(np.max(result.rpm)),
            "max_thrust_per_wheel": float(np.max(f_x_pod)) / self.n_wheel,
            "min_pod_force": float(np.min(f_x_pod)),
            "max_lateral_force_per_wheel": float(np.max(result.column("f_y_pod"))) / self.n_wheel,
            "max_torque": float(np.max(result.column("torque"))),
            "max_motor_torque": float(np.max(result.column("torque_motor"))),
            "max_lateral_torque": float(np.max(result.column("torque_lat"))),
            "power_per_motor": float(np.max(result.column("power_input"))) / self.n_wheel,
            "stripes_detected": len(result.stripes),
            "phase_steps": phase_steps,
        }
