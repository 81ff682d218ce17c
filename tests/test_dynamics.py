"""
Unit tests for the per-step physics update.

Uses a linear thrust model (100 N per m/s of slip, optimal slip 2 m/s)
so every quantity can be checked by hand.
"""

import math

import pytest

from pod import BrakingConfig, NoRootBracketed, Phase, StateRecord, VehicleParams
from pod.dynamics import StepIntegrator
from tests.synthetic_models import ConstantThrustModel, LinearThrustModel

DT = 0.01
REST = StateRecord()


def make_integrator(model=None, n_wheel: int = 2, **params) -> StepIntegrator:
    return StepIntegrator(
        VehicleParams(**params),
        BrakingConfig(brake_force=1000.0, n_brake=2),
        model if model is not None else LinearThrustModel(),
        dt=DT,
        n_wheel=n_wheel,
    )


class TestAccelerating:
    """Test suite for the acceleration update"""

    def test_uncapped_step_from_rest(self) -> None:
        """Test the acceleration update against the hand-computed values"""
        integrator = make_integrator(max_torque=1e6)

        state = integrator.step(REST, Phase.ACCELERATING)

        assert state.slip == 2.0
        assert state.f_thrust_wheel == pytest.approx(200.0)
        assert state.omega == pytest.approx(16.0)  # (2 + 0) / 0.125
        assert state.theta == pytest.approx(0.16)
        assert state.torque == pytest.approx(100.0)  # 16 / 0.01 * 0.0625
        assert state.torque_motor == pytest.approx(125.0)  # 100 + 200 * 0.125
        assert state.f_x_pod == pytest.approx(400.0)
        assert state.acceleration == pytest.approx(1.6)
        assert state.velocity == pytest.approx(0.016)
        assert state.distance == pytest.approx(0.00016)

    def test_power_bookkeeping(self) -> None:
        integrator = make_integrator(model=LinearThrustModel(loss_coefficient=10.0), max_torque=1e6)

        state = integrator.step(REST, Phase.ACCELERATING)

        assert state.power_loss == pytest.approx(2 * 10.0 * 4.0)
        assert state.power == pytest.approx(400.0 * 0.016)
        assert state.power_input == pytest.approx(state.power + 80.0)
        assert state.efficiency == pytest.approx(6.4 / 86.4)

    def test_zero_input_power_gives_nan_efficiency(self) -> None:
        """Test that efficiency is NaN instead of a division error at rest"""
        integrator = make_integrator(model=ConstantThrustModel(force=0.0, slip=0.0))

        state = integrator.step(REST, Phase.ACCELERATING)

        assert state.power_input == 0.0
        assert math.isnan(state.efficiency)

    def test_lateral_force_passed_through(self) -> None:
        integrator = make_integrator(max_torque=1e6, track_width=0.04)

        state = integrator.step(REST, Phase.ACCELERATING, f_lat_wheel=10.0)

        assert state.f_lat_wheel == 10.0
        assert state.f_y_pod == pytest.approx(20.0)
        assert state.torque_lat == pytest.approx(0.125 * 0.04 * 10.0)

    def test_no_lateral_force_by_default(self) -> None:
        state = make_integrator().step(REST, Phase.ACCELERATING)

        assert state.torque_lat == 0.0
        assert state.f_y_pod == 0.0


class TestTorqueCap:
    """Test suite for the motor torque limit"""

    def test_cap_applied_from_rest(self) -> None:
        """
        Uncapped motor torque is 125 N·m; at 40 N·m the consistent slip is
        40 / (I/(ro·dt) + k·ro) = 40 / 62.5 = 0.64 m/s
        """
        integrator = make_integrator(max_torque=40.0)

        state = integrator.step(REST, Phase.ACCELERATING)

        assert state.torque_motor == 40.0
        assert state.slip == pytest.approx(0.64, abs=1e-9)
        assert state.slip != LinearThrustModel().optimal_slip(0.0)
        assert state.f_thrust_wheel == pytest.approx(64.0)
        assert state.omega == pytest.approx(5.12)
        assert state.torque == pytest.approx(40.0 - 0.125 * 64.0)
        assert state.velocity == pytest.approx(0.01 * 2 * 64.0 / 250.0)

    def test_rotor_angle_keeps_uncapped_value(self) -> None:
        integrator = make_integrator(max_torque=40.0)

        state = integrator.step(REST, Phase.ACCELERATING)

        assert state.theta == pytest.approx(16.0 * DT)

    def test_cap_not_applied_below_limit(self) -> None:
        integrator = make_integrator(max_torque=125.5)

        state = integrator.step(REST, Phase.ACCELERATING)

        assert state.torque_motor == pytest.approx(125.0)
        assert state.slip == 2.0

    def test_cap_applies_in_rotor_speed_limited_phase(self) -> None:
        integrator = make_integrator(max_torque=40.0, max_rpm=1000.0)

        state = integrator.step(REST, Phase.ROTOR_SPEED_LIMITED)

        assert state.torque_motor == 40.0
        assert state.omega < integrator.params.max_omega


class TestDecelerating:
    """Test suite for the braking update"""

    def test_slip_satisfies_equations_of_motion(self) -> None:
        """Test that the braking slip keeps pod and rotor consistent"""
        integrator = make_integrator()
        prev = StateRecord(velocity=10.0, omega=100.0, slip=2.5, distance=50.0)

        state = integrator.step(prev, Phase.DECELERATING)

        # Rotor surface speed after the step matches pod speed plus slip
        assert state.omega == pytest.approx((state.slip + state.velocity) / 0.125, abs=1e-6)
        expected_slip = (100.0 - 80.0 + 2000.0 * DT / (250.0 * 0.125)) / 10.064
        assert state.slip == pytest.approx(expected_slip, abs=1e-9)

    def test_brake_force_in_pod_force(self) -> None:
        integrator = make_integrator()
        prev = StateRecord(velocity=10.0, omega=100.0, slip=2.5)

        state = integrator.step(prev, Phase.DECELERATING)

        assert state.f_x_pod == pytest.approx(2 * 100.0 * state.slip - 2000.0)
        assert state.velocity < prev.velocity
        assert state.torque_motor == 0.0

    def test_rotor_slowed_by_thrust_reaction(self) -> None:
        integrator = make_integrator()
        prev = StateRecord(velocity=10.0, omega=100.0, slip=2.5)

        state = integrator.step(prev, Phase.DECELERATING)

        expected_omega = 100.0 - 100.0 * state.slip * 0.125 / 0.0625 * DT
        assert state.omega == pytest.approx(expected_omega)
        assert state.torque == pytest.approx((state.omega - 100.0) / DT * 0.0625)

    def test_unsolvable_braking_raises(self) -> None:
        """Test that a residual without a root in the bracket is reported"""
        integrator = make_integrator(model=ConstantThrustModel(force=1e6))

        with pytest.raises(NoRootBracketed):
            integrator.step(REST, Phase.DECELERATING)


class TestRotorSpeedLimited:
    """Test suite for the max RPM update"""

    def test_rotor_pinned_at_max_omega(self) -> None:
        integrator = make_integrator(max_torque=1e6, max_rpm=1000.0)
        max_omega = 1000.0 * 2 * math.pi / 60
        prev = StateRecord(velocity=5.0, omega=max_omega, theta=1.0)

        state = integrator.step(prev, Phase.ROTOR_SPEED_LIMITED)

        assert state.omega == pytest.approx(max_omega)
        assert state.slip == pytest.approx(max_omega * 0.125 - 5.0)
        assert state.theta == pytest.approx(1.0 + max_omega * DT)
        assert state.torque == pytest.approx(0.0, abs=1e-9)
        assert state.torque_motor == pytest.approx(state.f_thrust_wheel * 0.125)


class TestKinematics:
    """Test suite for the shared kinematic integration"""

    @pytest.mark.parametrize("phase", list(Phase))
    def test_semi_implicit_euler(self, phase: Phase) -> None:
        integrator = make_integrator(max_torque=1e6, max_rpm=1000.0)
        prev = StateRecord(velocity=3.0, omega=40.0, slip=2.0, distance=12.0)

        state = integrator.step(prev, phase)

        assert state.acceleration == pytest.approx(state.f_x_pod / 250.0)
        assert state.velocity == prev.velocity + DT * state.acceleration
        assert state.distance == prev.distance + DT * state.velocity
