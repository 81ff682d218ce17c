"""
HypED Pod Trajectory Simulation

This package simulates the longitudinal trajectory of the pod along the
track, driven by slip-based Halbach wheel propulsion with thrust and loss
taken from precomputed lookup tables.
"""

from pod.errors import (
    ConfigurationError,
    MaxIterationsExceeded,
    NoRootBracketed,
    PodSimulationError,
    SolverError,
    StepFailure,
)
from pod.models import LookupTable, LookupTableModel, PropulsionModel, load_lookup_tables
from pod.params import (
    BrakingConfig,
    BrakingTrigger,
    RunConfig,
    VehicleParams,
    load_run_setup,
    load_vehicle_params,
)
from pod.simulator import PodSimulator
from pod.state import Phase, StateRecord
from pod.sweep import run_parameter_sweep
from pod.trajectory import TrajectoryResult

__all__ = [
    "BrakingConfig",
    "BrakingTrigger",
    "ConfigurationError",
    "LookupTable",
    "LookupTableModel",
    "MaxIterationsExceeded",
    "NoRootBracketed",
    "Phase",
    "PodSimulationError",
    "PodSimulator",
    "PropulsionModel",
    "RunConfig",
    "SolverError",
    "StateRecord",
    "StepFailure",
    "TrajectoryResult",
    "VehicleParams",
    "load_lookup_tables",
    "load_run_setup",
    "load_vehicle_params",
    "run_parameter_sweep",
]
