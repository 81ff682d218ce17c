"""
Pod step dynamics

Computes the state at the next time index from the previous state for
each of the three propulsion phases, then applies the motor torque cap
and integrates the pod kinematics.
"""

import logging
import math
from typing import TYPE_CHECKING

from pod.solver import BrakingSlipResidual, TorqueLimitResidual, solve_root
from pod.state import Phase, StateRecord

if TYPE_CHECKING:
    from pod.models import PropulsionModel
    from pod.params import BrakingConfig, VehicleParams

logger = logging.getLogger(__name__)


class StepIntegrator:
    """Per-step physics update of the pod and its propulsion wheels"""

    def __init__(
        self,
        params: "VehicleParams",
        braking: "BrakingConfig",
        model: "PropulsionModel",
        dt: float,
        n_wheel: int,
    ) -> None:
        """
        Initialize step integrator

        Args:
            params: Pod physical parameters
            braking: Brake setup
            model: Thrust / power loss / optimal slip model of one wheel pair
            dt: Time step (s)
            n_wheel: Number of propulsion wheel pairs
        """
        self.params = params
        self.braking = braking
        self.model = model
        self.dt = dt
        self.n_wheel = n_wheel

    def step(self, prev: StateRecord, phase: Phase, f_lat_wheel: float = 0.0) -> StateRecord:
        """
        Compute the next state

        Args:
            prev: State at the previous time index
            phase: Propulsion phase governing this step
            f_lat_wheel: Lateral force on a single wheel pair (N), not modelled

        Returns:
            State at the next time index

        Raises:
            SolverError: An implicit equation of the step could not be solved
        """
        if phase is Phase.ACCELERATING:
            values = self._accelerate(prev)
        elif phase is Phase.DECELERATING:
            values = self._decelerate(prev)
        elif phase is Phase.ROTOR_SPEED_LIMITED:
            values = self._max_rpm(prev)
        else:
            raise ValueError(f"unknown phase {phase!r}")

        if values["torque_motor"] > self.params.max_torque:
            values.update(self._cap_torque(prev, values["slip"]))

        return self._integrate(prev, phase, values, f_lat_wheel)

    def _accelerate(self, prev: StateRecord) -> dict:
        """Drive at the optimal slip for the current speed"""
        ro = self.params.wheel_radius
        slip = self.model.optimal_slip(prev.velocity)
        thrust = self.model.thrust_force(slip, prev.velocity)
        omega = (slip + prev.velocity) / ro
        alpha = (omega - prev.omega) / self.dt
        torque = alpha * self.params.moment_of_inertia
        return {
            "slip": slip,
            "f_thrust_wheel": thrust,
            "omega": omega,
            "theta": prev.theta + omega * self.dt,
            "torque": torque,
            "power_loss": self.n_wheel * self.model.power_loss(slip, prev.velocity),
            "torque_motor": torque + thrust * ro,
        }

    def _decelerate(self, prev: StateRecord) -> dict:
        """Brake with the motors free-wheeling; slip follows from the equations of motion"""
        ro = self.params.wheel_radius
        inertia = self.params.moment_of_inertia
        residual = BrakingSlipResidual(
            model=self.model,
            velocity=prev.velocity,
            omega=prev.omega,
            dt=self.dt,
            mass=self.params.mass,
            wheel_radius=ro,
            moment_of_inertia=inertia,
            n_wheel=self.n_wheel,
            braking_force=self.braking.total_force,
        )
        slip = solve_root(residual, prev.slip - 1, prev.slip + 1)
        thrust = self.model.thrust_force(slip, prev.velocity)
        omega = prev.omega - thrust * ro / inertia * self.dt
        alpha = (omega - prev.omega) / self.dt
        return {
            "slip": slip,
            "f_thrust_wheel": thrust,
            "omega": omega,
            "theta": prev.theta + omega * self.dt,
            "torque": alpha * inertia,
            "power_loss": self.n_wheel * self.model.power_loss(slip, prev.velocity),
            "torque_motor": 0.0,
        }

    def _max_rpm(self, prev: StateRecord) -> dict:
        """Hold the rotor at its maximum angular velocity"""
        ro = self.params.wheel_radius
        omega = self.params.max_omega
        slip = omega * ro - prev.velocity
        thrust = self.model.thrust_force(slip, prev.velocity)
        alpha = (omega - prev.omega) / self.dt
        torque = alpha * self.params.moment_of_inertia
        return {
            "slip": slip,
            "f_thrust_wheel": thrust,
            "omega": omega,
            "theta": prev.theta + omega * self.dt,
            "torque": torque,
            "power_loss": self.n_wheel * self.model.power_loss(slip, prev.velocity),
            "torque_motor": torque + thrust * ro,
        }

    def _cap_torque(self, prev: StateRecord, slip: float) -> dict:
        """
        Find the largest slip the motor can sustain at its torque limit

        The uncapped slip is the upper end of the bracket. The rotor angle
        keeps the value of the uncapped update.
        """
        ro = self.params.wheel_radius
        max_torque = self.params.max_torque
        residual = TorqueLimitResidual(
            model=self.model,
            velocity=prev.velocity,
            omega=prev.omega,
            dt=self.dt,
            wheel_radius=ro,
            moment_of_inertia=self.params.moment_of_inertia,
            max_torque=max_torque,
        )
        capped_slip = solve_root(residual, prev.slip - 1, slip)
        thrust = self.model.thrust_force(capped_slip, prev.velocity)
        logger.debug("Motor torque capped at %.2f N·m, slip %.4f -> %.4f", max_torque, slip, capped_slip)
        return {
            "slip": capped_slip,
            "f_thrust_wheel": thrust,
            "omega": (capped_slip + prev.velocity) / ro,
            "torque": max_torque - ro * thrust,
            "power_loss": self.n_wheel * self.model.power_loss(capped_slip, prev.velocity),
            "torque_motor": max_torque,
        }

    def _integrate(
        self, prev: StateRecord, phase: Phase, values: dict, f_lat_wheel: float
    ) -> StateRecord:
        """Pod forces, kinematics and power bookkeeping"""
        f_x_pod = values["f_thrust_wheel"] * self.n_wheel
        if phase is Phase.DECELERATING:
            f_x_pod -= self.braking.total_force

        acceleration = f_x_pod / self.params.mass
        velocity = prev.velocity + self.dt * acceleration
        distance = prev.distance + self.dt * velocity

        power = f_x_pod * velocity
        power_input = power + values["power_loss"]  # Rotor inertia ignored
        efficiency = power / power_input if power_input != 0 else math.nan

        return StateRecord(
            velocity=velocity,
            acceleration=acceleration,
            distance=distance,
            theta=values["theta"],
            omega=values["omega"],
            torque=values["torque"],
            torque_lat=self.params.wheel_radius * self.params.track_width * f_lat_wheel,
            torque_motor=values["torque_motor"],
            power=power,
            power_loss=values["power_loss"],
            power_input=power_input,
            efficiency=efficiency,
            slip=values["slip"],
            f_thrust_wheel=values["f_thrust_wheel"],
            f_lat_wheel=f_lat_wheel,
            f_x_pod=f_x_pod,
            f_y_pod=f_lat_wheel * self.n_wheel,
        )
