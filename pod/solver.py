"""
Scalar root finding for the implicit step equations
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

import numpy as np
from scipy.optimize import brentq

from pod.errors import MaxIterationsExceeded, NoRootBracketed

if TYPE_CHECKING:
    from pod.models import PropulsionModel


DEFAULT_XTOL = 1e-12
DEFAULT_RTOL = 4 * np.finfo(float).eps
DEFAULT_MAXITER = 100


def solve_root(
    f: Callable[[float], float],
    lo: float,
    hi: float,
    xtol: float = DEFAULT_XTOL,
    rtol: float = DEFAULT_RTOL,
    maxiter: int = DEFAULT_MAXITER,
) -> float:
    """
    Find a zero of a continuous scalar function inside [lo, hi]

    Uses Brent's method. The caller is responsible for choosing a bracket
    across which ``f`` changes sign.

    Args:
        f: Continuous scalar function
        lo: Lower end of the bracket
        hi: Upper end of the bracket
        xtol: Absolute tolerance on the root
        rtol: Relative tolerance on the root
        maxiter: Iteration budget

    Returns:
        Root of f

    Raises:
        NoRootBracketed: f has the same sign at both ends of the bracket
        MaxIterationsExceeded: no convergence within maxiter iterations
    """
    bracket = (lo, hi)
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise NoRootBracketed(f"bracket [{lo}, {hi}] is not finite", bracket)

    f_lo = f(lo)
    if f_lo == 0.0:
        return lo
    f_hi = f(hi)
    if f_hi == 0.0:
        return hi
    if lo == hi or not np.sign(f_lo) * np.sign(f_hi) < 0:
        raise NoRootBracketed(
            f"f({lo:.6g}) = {f_lo:.6g} and f({hi:.6g}) = {f_hi:.6g} do not differ in sign",
            bracket,
        )

    # brentq requires lo < hi
    a, b = (lo, hi) if lo < hi else (hi, lo)
    root, info = brentq(
        f, a, b, xtol=xtol, rtol=rtol, maxiter=maxiter, full_output=True, disp=False
    )
    if not info.converged:
        raise MaxIterationsExceeded(
            f"no convergence in [{lo:.6g}, {hi:.6g}] after {info.iterations} iterations "
            f"({info.flag})",
            bracket,
        )
    return float(root)


@dataclass(frozen=True)
class BrakingSlipResidual:
    """
    Slip consistency while braking with no motor torque.

    The pod velocity after the step, expressed as rotor surface speed,
    must match the rotor speed left after the thrust reaction has slowed
    the wheel down.
    """

    model: "PropulsionModel"
    velocity: float  # Pod velocity at the previous step (m/s)
    omega: float  # Rotor angular velocity at the previous step (rad/s)
    dt: float
    mass: float
    wheel_radius: float
    moment_of_inertia: float
    n_wheel: int
    braking_force: float  # Total force from all brakes (N)

    def __call__(self, slip: float) -> float:
        thrust = self.model.thrust_force(slip, self.velocity)
        pod_force = self.n_wheel * thrust - self.braking_force
        return (
            (slip + self.velocity + pod_force / self.mass * self.dt) / self.wheel_radius
            - self.omega
            + thrust * self.wheel_radius / self.moment_of_inertia * self.dt
        )


@dataclass(frozen=True)
class TorqueLimitResidual:
    """Slip at which the motor delivers exactly its maximum torque"""

    model: "PropulsionModel"
    velocity: float  # Pod velocity at the previous step (m/s)
    omega: float  # Rotor angular velocity at the previous step (rad/s)
    dt: float
    wheel_radius: float
    moment_of_inertia: float
    max_torque: float

    def __call__(self, slip: float) -> float:
        alpha = ((self.velocity + slip) / self.wheel_radius - self.omega) / self.dt
        return (
            self.moment_of_inertia * alpha
            + self.model.thrust_force(slip, self.velocity) * self.wheel_radius
            - self.max_torque
        )
