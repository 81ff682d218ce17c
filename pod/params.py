"""
Pod, brake and run parameters
"""

import json
import math
import numbers
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from pod.errors import ConfigurationError


class BrakingTrigger(Enum):
    """How the switch from propulsion to braking is decided"""

    ENERGY = "energy"  # Worst-case braking distance from kinetic energy
    FIXED_DISTANCE = "fixed_distance"  # Brake once a configured distance is reached


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def _require_numbers(config: Any) -> None:
    """Reject non-numeric values in the numeric fields of a parameter dataclass"""
    for f in fields(config):
        if f.type not in (int, float):
            continue
        value = getattr(config, f.name)
        _require(
            isinstance(value, numbers.Real) and not isinstance(value, bool),
            f"{f.name} must be a number, got {value!r}",
        )


@dataclass
class VehicleParams:
    """Physical parameters of the pod and its propulsion wheels"""

    mass: float = 250.0  # kg
    wheel_radius: float = 0.125  # m (outer radius of the Halbach wheel)
    moment_of_inertia: float = 0.0625  # kg·m² (wheel + motor rotor)
    track_width: float = 0.04  # m (width of the wheel track)
    track_length: float = 1250.0  # m
    max_rpm: float = 8000.0  # RPM
    max_torque: float = 40.0  # N·m (per motor)
    max_omega: float = 0.0  # rad/s, derived from max_rpm when left at 0

    def __post_init__(self) -> None:
        """Validate and calculate derived parameters"""
        _require_numbers(self)
        _require(_is_positive(self.mass), f"mass must be positive, got {self.mass}")
        _require(
            _is_positive(self.wheel_radius),
            f"wheel_radius must be positive, got {self.wheel_radius}",
        )
        _require(
            _is_positive(self.moment_of_inertia),
            f"moment_of_inertia must be positive, got {self.moment_of_inertia}",
        )
        _require(
            math.isfinite(self.track_width) and self.track_width >= 0,
            f"track_width must be non-negative, got {self.track_width}",
        )
        _require(
            math.isfinite(self.track_length) and self.track_length >= 0,
            f"track_length must be non-negative, got {self.track_length}",
        )
        _require(_is_positive(self.max_rpm), f"max_rpm must be positive, got {self.max_rpm}")
        _require(
            _is_positive(self.max_torque),
            f"max_torque must be positive, got {self.max_torque}",
        )
        if self.max_omega == 0.0:
            self.max_omega = self.max_rpm * 2 * math.pi / 60
        _require(
            _is_positive(self.max_omega),
            f"max_omega must be positive, got {self.max_omega}",
        )
        # The rotor speed limit must not itself exceed the RPM limit
        _require(
            self.max_omega * 60 / (2 * math.pi) <= self.max_rpm * (1 + 1e-9),
            f"max_omega {self.max_omega} rad/s is above max_rpm {self.max_rpm}",
        )


@dataclass
class BrakingConfig:
    """
    Spring-loaded friction wedge brake setup.

    The force of a single pad is derived from the wedge actuator unless
    given directly: a pre-compressed spring pushes a wedge of angle
    ``wedge_angle`` against the rail.
    """

    n_brake: int = 2
    cof: float = 0.38  # Kinetic friction coefficient of the brake pads
    spring_compression: float = 30.0  # mm, with the wedge pressing against the rail
    spring_coefficient: float = 20.6  # N/mm
    wedge_angle: float = 0.52  # rad
    brake_force: float = 0.0  # N per pad, derived when left at 0

    def __post_init__(self) -> None:
        """Validate and calculate derived parameters"""
        _require_numbers(self)
        _require(self.n_brake >= 0, f"n_brake must be non-negative, got {self.n_brake}")
        if self.brake_force == 0.0:
            actuation_force = self.spring_compression * self.spring_coefficient
            denominator = math.tan(self.wedge_angle) - self.cof
            _require(
                denominator > 0,
                "wedge angle too shallow for the friction coefficient (brake would self-lock)",
            )
            self.brake_force = actuation_force * self.cof / denominator
        _require(
            math.isfinite(self.brake_force) and self.brake_force >= 0,
            f"brake_force must be non-negative, got {self.brake_force}",
        )

    @property
    def total_force(self) -> float:
        """Braking force from all active brakes (N)"""
        return self.n_brake * self.brake_force

    def deceleration(self, mass: float) -> float:
        """Braking deceleration from all brakes for a pod of the given mass (m/s²)"""
        return self.total_force / mass


@dataclass
class RunConfig:
    """Run setup, fixed for the duration of a run"""

    dt: float = 0.01  # s (~0.1 s is enough for quick estimates)
    tmax: float = 120.0  # s, maximum allowed duration of run
    n_wheel: int = 2  # Number of propulsion wheel pairs
    braking_trigger: BrakingTrigger = BrakingTrigger.ENERGY
    max_acc_distance: float = 1000.0  # m, used with BrakingTrigger.FIXED_DISTANCE
    stripe_dist: float = 100 / 3.281  # m (100 ft between track stripes)

    def __post_init__(self) -> None:
        if isinstance(self.braking_trigger, str):
            try:
                self.braking_trigger = BrakingTrigger(self.braking_trigger)
            except ValueError as exc:
                raise ConfigurationError(f"unknown braking_trigger {self.braking_trigger!r}") from exc
        _require_numbers(self)
        _require(_is_positive(self.dt), f"dt must be positive, got {self.dt}")
        _require(
            math.isfinite(self.tmax) and self.tmax >= 0,
            f"tmax must be non-negative, got {self.tmax}",
        )
        _require(self.n_wheel >= 1, f"n_wheel must be at least 1, got {self.n_wheel}")
        _require(
            _is_positive(self.stripe_dist),
            f"stripe_dist must be positive, got {self.stripe_dist}",
        )

    @property
    def n_steps(self) -> int:
        """Number of steps after the initial condition"""
        # Never step past tmax; the tolerance keeps exact multiples whole
        return int(math.floor(self.tmax / self.dt + 1e-9))


def _build(cls: type, values: Dict[str, Any], section: str) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"unknown {section} parameter(s): {', '.join(unknown)}")
    return cls(**values)


def _read_json(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            document = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"invalid parameter file {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigurationError(f"parameter file {path} must contain a JSON object")
    return document


def load_vehicle_params(path: Union[str, Path]) -> VehicleParams:
    """
    Load vehicle parameters from a JSON file

    The file may hold the parameters at top level or under a "vehicle" key.
    """
    document = _read_json(path)
    return _build(VehicleParams, document.get("vehicle", document), "vehicle")


def load_run_setup(
    path: Union[str, Path],
) -> Tuple[VehicleParams, BrakingConfig, RunConfig]:
    """
    Load a complete run setup from a JSON file

    Args:
        path: JSON document with optional "vehicle", "braking" and "run" objects

    Returns:
        Tuple of (vehicle parameters, braking config, run config)
    """
    document = _read_json(path)
    unknown = sorted(set(document) - {"vehicle", "braking", "run"})
    if unknown:
        raise ConfigurationError(f"unknown section(s) in {path}: {', '.join(unknown)}")
    return (
        _build(VehicleParams, document.get("vehicle", {}), "vehicle"),
        _build(BrakingConfig, document.get("braking", {}), "braking"),
        _build(RunConfig, document.get("run", {}), "run"),
    )
