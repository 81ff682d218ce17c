"""
Parameter sweep functions
"""

import dataclasses
import logging
from typing import Any, Dict, Iterable, Optional

from pod.models import PropulsionModel
from pod.params import BrakingConfig, RunConfig, VehicleParams
from pod.simulator import PodSimulator

logger = logging.getLogger(__name__)


def run_parameter_sweep(
    parameter: str,
    values: Iterable[float],
    model: PropulsionModel,
    params: Optional[VehicleParams] = None,
    braking: Optional[BrakingConfig] = None,
    run: Optional[RunConfig] = None,
) -> Dict[float, Dict[str, Any]]:
    """
    Run one independent simulation per value of a vehicle parameter

    Args:
        parameter: VehicleParams field to vary (e.g. "max_torque")
        values: Values to simulate
        model: Propulsion model shared by all runs
        params: Base vehicle parameters (defaults to VehicleParams())
        braking: Brake setup
        run: Run setup

    Returns:
        Dictionary with results for each value
    """
    base = params if params is not None else VehicleParams()
    if parameter not in {f.name for f in dataclasses.fields(base)}:
        raise KeyError(f"VehicleParams has no field '{parameter}'")

    results: Dict[float, Dict[str, Any]] = {}
    for value in values:
        changes = {parameter: value}
        if parameter == "max_rpm":
            changes["max_omega"] = 0.0  # Re-derive from the new RPM limit
        swept = dataclasses.replace(base, **changes)
        simulator = PodSimulator(swept, model, braking=braking, run=run)

        logger.info("Sweep %s=%g", parameter, value)
        result = simulator.simulate()

        results[value] = {
            "result": result,
            "analysis": simulator.analyze(result),
            "simulator": simulator,
        }

    return results
