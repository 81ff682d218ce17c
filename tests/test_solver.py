"""
Unit tests for scalar root finding and the step residuals.
"""

import math

import pytest

from pod.errors import MaxIterationsExceeded, NoRootBracketed, SolverError
from pod.solver import BrakingSlipResidual, TorqueLimitResidual, solve_root
from tests.synthetic_models import LinearThrustModel


class TestSolveRoot:
    """Test suite for solve_root"""

    def test_finds_root(self) -> None:
        root = solve_root(lambda x: x**2 - 2, 0.0, 2.0)

        assert abs(root - math.sqrt(2)) < 1e-10

    def test_reversed_bracket(self) -> None:
        """Test that a bracket given high-to-low is accepted"""
        root = solve_root(lambda x: x - 0.3, 1.0, -1.0)

        assert abs(root - 0.3) < 1e-12

    def test_endpoint_root_returned(self) -> None:
        assert solve_root(lambda x: x - 1.0, 1.0, 3.0) == 1.0
        assert solve_root(lambda x: x - 3.0, 1.0, 3.0) == 3.0

    def test_no_sign_change(self) -> None:
        """Test that a bracket without a sign change is reported"""
        with pytest.raises(NoRootBracketed) as excinfo:
            solve_root(lambda x: x**2 + 1, -1.0, 1.0)

        assert excinfo.value.bracket == (-1.0, 1.0)

    def test_degenerate_bracket(self) -> None:
        with pytest.raises(NoRootBracketed):
            solve_root(lambda x: x - 5.0, 1.0, 1.0)

    def test_non_finite_bracket(self) -> None:
        with pytest.raises(NoRootBracketed):
            solve_root(lambda x: x, -math.inf, 1.0)

    def test_iteration_budget(self) -> None:
        """Test that failing to converge is reported"""
        with pytest.raises(MaxIterationsExceeded):
            solve_root(lambda x: x**3 - 2, 0.0, 2.0, maxiter=1)

    def test_errors_share_base_class(self) -> None:
        with pytest.raises(SolverError):
            solve_root(lambda x: 1.0, 0.0, 1.0)


class TestResiduals:
    """Test suite for the implicit step equations"""

    def test_torque_limit_residual_root(self) -> None:
        """
        From rest: I·s/(ro·dt) + k·s·ro = T_max
        0.0625·s/0.00125 + 12.5·s = 40  =>  s = 0.64
        """
        residual = TorqueLimitResidual(
            model=LinearThrustModel(k=100.0),
            velocity=0.0,
            omega=0.0,
            dt=0.01,
            wheel_radius=0.125,
            moment_of_inertia=0.0625,
            max_torque=40.0,
        )

        assert residual(0.64) == pytest.approx(0.0, abs=1e-9)
        assert residual(0.0) == pytest.approx(-40.0)
        assert solve_root(residual, -1.0, 2.0) == pytest.approx(0.64, abs=1e-9)

    def test_braking_slip_residual(self) -> None:
        """
        Linear thrust makes the residual linear in slip:
        s·(1/ro + n·k·dt/(M·ro) + k·ro·dt/I) = ω − v/ro + F_brake·dt/(M·ro)
        """
        residual = BrakingSlipResidual(
            model=LinearThrustModel(k=100.0),
            velocity=10.0,
            omega=100.0,
            dt=0.01,
            mass=250.0,
            wheel_radius=0.125,
            moment_of_inertia=0.0625,
            n_wheel=2,
            braking_force=2500.0,
        )
        coefficient = 8.0 + 2 * 100.0 * 0.01 / (250.0 * 0.125) + 100.0 * 0.125 * 0.01 / 0.0625
        expected = (100.0 - 80.0 + 2500.0 * 0.01 / (250.0 * 0.125)) / coefficient

        assert residual(expected) == pytest.approx(0.0, abs=1e-9)
        assert solve_root(residual, expected - 1, expected + 1) == pytest.approx(expected, abs=1e-9)
