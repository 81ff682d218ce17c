"""
HypED Pod Trajectory Simulation

Command line entry point: loads the pod parameters and lookup tables,
runs the trajectory simulation and prints a summary of the run.

Usage:
    python pod_simulation.py --tables Parameters [--params pod.json] [--dt 0.01] [--tmax 120]
                             [--fixed-distance 1000] [--verbose]

NOTE ABOUT TIME STEP (dt):
For quick estimates a time step of ~0.1 s is sufficient.
For more accurate results use a time step of 0.05 s or smaller.
"""

import argparse
import dataclasses
import logging
import sys
from typing import Any, Dict, List, Optional

from pod import (
    BrakingConfig,
    BrakingTrigger,
    PodSimulationError,
    PodSimulator,
    RunConfig,
    VehicleParams,
    load_lookup_tables,
    load_run_setup,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pod trajectory simulation")
    parser.add_argument("--tables", required=True, help="Directory holding the lookup tables")
    parser.add_argument("--params", help="JSON file with vehicle, braking and run parameters")
    parser.add_argument("--dt", type=float, help="Time step (s)")
    parser.add_argument("--tmax", type=float, help="Maximum run duration (s)")
    parser.add_argument(
        "--fixed-distance",
        type=float,
        metavar="METRES",
        help="Start braking at a fixed distance instead of the braking distance estimate",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step")
    return parser.parse_args(argv)


def print_results(analysis: Dict[str, Any]) -> None:
    print("\n--------------------RESULTS--------------------")
    print(f"\nDuration of run: {analysis['duration']:.2f} s ({analysis['termination_reason']})")
    print(f"\nDistance: {analysis['distance']:.2f} m")
    print(
        f"\nMaximum speed: {analysis['max_velocity']:.2f} m/s "
        f"at {analysis['max_velocity_time']:.2f} s"
    )
    print(f"\nMaximum RPM: {analysis['max_rpm']:5.0f}")
    print(f"\nMaximum net thrust force per wheel: {analysis['max_thrust_per_wheel']:.2f} N")
    print(f"\nMaximum net lateral force per wheel: {analysis['max_lateral_force_per_wheel']:.2f} N")
    print(f"\nMaximum thrust torque: {analysis['max_torque']:.2f} Nm")
    print(f"\nMaximum motor torque: {analysis['max_motor_torque']:.2f} Nm")
    print(f"\nMaximum lateral torque: {analysis['max_lateral_torque']:.2f} Nm")
    print(f"\nPower per motor: {analysis['power_per_motor']:.2f} W")
    print(f"\nStripes detected: {analysis['stripes_detected']}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.params:
            params, braking, run = load_run_setup(args.params)
        else:
            params, braking, run = VehicleParams(), BrakingConfig(), RunConfig()

        overrides: Dict[str, Any] = {}
        if args.dt is not None:
            overrides["dt"] = args.dt
        if args.tmax is not None:
            overrides["tmax"] = args.tmax
        if args.fixed_distance is not None:
            overrides["braking_trigger"] = BrakingTrigger.FIXED_DISTANCE
            overrides["max_acc_distance"] = args.fixed_distance
        if overrides:
            run = dataclasses.replace(run, **overrides)

        model = load_lookup_tables(args.tables)
        simulator = PodSimulator(params, model, braking=braking, run=run)
        result = simulator.simulate()
    except (PodSimulationError, OSError) as exc:
        logging.getLogger(__name__).error("%s", exc)
        return 1

    print_results(simulator.analyze(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
