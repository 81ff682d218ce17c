"""
Phase transitions between acceleration, braking and the rotor speed limit
"""

import logging
from typing import TYPE_CHECKING

from pod.params import BrakingTrigger
from pod.state import Phase, StateRecord

if TYPE_CHECKING:
    from pod.dynamics import StepIntegrator
    from pod.params import BrakingConfig, RunConfig, VehicleParams
    from pod.trajectory import Trajectory

logger = logging.getLogger(__name__)

RPM_TOLERANCE = 1e-9


class PhaseController:
    """Decides which propulsion phase governs each step"""

    def __init__(
        self,
        params: "VehicleParams",
        braking: "BrakingConfig",
        run: "RunConfig",
        integrator: "StepIntegrator",
    ) -> None:
        """
        Initialize phase controller

        Args:
            params: Pod physical parameters
            braking: Brake setup
            run: Run setup (wheel count and braking trigger)
            integrator: Step integrator used to recompute the last state
                when the rotor speed limit is found exceeded
        """
        self.params = params
        self.braking = braking
        self.run = run
        self.integrator = integrator

    def kinetic_energy(self, state: StateRecord) -> float:
        """Translational plus rotational kinetic energy of the pod (J)"""
        translational = 0.5 * self.params.mass * state.velocity**2
        rotational = self.run.n_wheel * 0.5 * self.params.moment_of_inertia * state.omega**2
        return translational + rotational

    def braking_distance(self, state: StateRecord) -> float:
        """
        Worst-case braking distance from the given state (m)

        Assumes all energy stored in the wheels ends up as translational
        kinetic energy of the pod.
        """
        deceleration = self.braking.deceleration(self.params.mass)
        return (self.kinetic_energy(state) / self.params.mass) / deceleration

    def should_brake(self, state: StateRecord) -> bool:
        """Whether braking has to start after the given state"""
        if self.run.braking_trigger is BrakingTrigger.FIXED_DISTANCE:
            return state.distance >= self.run.max_acc_distance
        return state.distance >= self.params.track_length - self.braking_distance(state)

    def exceeds_max_rpm(self, state: StateRecord) -> bool:
        # Tolerance absorbs rounding in the rad/s to RPM conversion
        return state.rpm > self.params.max_rpm + RPM_TOLERANCE

    def next_phase(self, current: Phase, trajectory: "Trajectory") -> Phase:
        """
        Phase for the step following the last state of the trajectory

        If the last state overshoots the maximum RPM it is recomputed in
        place under the rotor speed limit before the braking check.
        Acceleration is only ever left, never re-entered, and the rotor
        speed check no longer applies once braking has started.

        Args:
            current: Phase of the step that produced the last state
            trajectory: States computed so far

        Returns:
            Phase for the next step

        Raises:
            SolverError: The recomputed state could not be solved
        """
        phase = current
        last = trajectory.last

        if phase is not Phase.DECELERATING and len(trajectory) > 1 and self.exceeds_max_rpm(last):
            if phase is not Phase.ROTOR_SPEED_LIMITED:
                logger.info(
                    "Max RPM exceeded at step %d (%.0f RPM), recomputing under rotor speed limit",
                    len(trajectory) - 1,
                    last.rpm,
                )
            phase = Phase.ROTOR_SPEED_LIMITED
            last = self.integrator.step(trajectory[-2], phase)
            trajectory.amend_last(last, phase)

        if phase is not Phase.DECELERATING and self.should_brake(last):
            logger.info(
                "Braking after step %d at %.2f m, %.2f m/s",
                len(trajectory) - 1,
                last.distance,
                last.velocity,
            )
            phase = Phase.DECELERATING

        return phase
