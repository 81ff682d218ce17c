"""
Main pod simulator class
"""

import logging
from typing import Optional

from pod.analysis import TrajectoryAnalyzer
from pod.dynamics import StepIntegrator
from pod.errors import ConfigurationError, SolverError, StepFailure
from pod.models import PropulsionModel
from pod.params import BrakingConfig, BrakingTrigger, RunConfig, VehicleParams
from pod.phase import PhaseController
from pod.state import Phase
from pod.stripes import detect_stripes, number_of_stripes
from pod.trajectory import Trajectory, TrajectoryResult

logger = logging.getLogger(__name__)


class PodSimulator:
    """Simulates the pod trajectory from launch until it stops or time runs out"""

    def __init__(
        self,
        params: VehicleParams,
        model: PropulsionModel,
        braking: Optional[BrakingConfig] = None,
        run: Optional[RunConfig] = None,
    ) -> None:
        """
        Initialize simulator

        Args:
            params: Pod physical parameters
            model: Thrust / power loss / optimal slip model of one wheel pair
            braking: Brake setup (defaults to BrakingConfig())
            run: Run setup (defaults to RunConfig())

        Raises:
            ConfigurationError: The setup cannot be simulated
        """
        self.params = params
        self.model = model
        self.braking = braking if braking is not None else BrakingConfig()
        self.run = run if run is not None else RunConfig()

        if self.run.braking_trigger is BrakingTrigger.ENERGY and self.braking.total_force <= 0:
            raise ConfigurationError(
                "braking distance estimate needs a positive total brake force"
            )

        # Initialize components
        self.integrator = StepIntegrator(
            params, self.braking, model, dt=self.run.dt, n_wheel=self.run.n_wheel
        )
        self.phase_controller = PhaseController(params, self.braking, self.run, self.integrator)
        self.analyzer = TrajectoryAnalyzer(self.run.n_wheel)

    def simulate(self) -> TrajectoryResult:
        """
        Run the simulation

        Returns:
            Trajectory truncated at the step where the pod stopped or the
            time budget ran out

        Raises:
            StepFailure: A step could not be solved; the run is aborted
        """
        n_steps = self.run.n_steps
        trajectory = Trajectory()
        phase = Phase.ACCELERATING
        reason = "time_limit"

        logger.info(
            "Simulation started. dt=%.4f s, tmax=%.1f s, track %.1f m",
            self.run.dt,
            self.run.tmax,
            self.params.track_length,
        )

        for i in range(1, n_steps + 1):
            try:
                phase = self.phase_controller.next_phase(phase, trajectory)
            except SolverError as exc:
                logger.error("Recomputing step %d under the rotor speed limit failed: %s", i - 1, exc)
                raise StepFailure(i - 1, Phase.ROTOR_SPEED_LIMITED, str(exc)) from exc

            try:
                state = self.integrator.step(trajectory.last, phase)
            except SolverError as exc:
                logger.error("Step %d failed in phase %s: %s", i, phase.name, exc)
                raise StepFailure(i, phase, str(exc)) from exc
            trajectory.append(state, phase)

            logger.debug(
                "Step: %d, %.2f s, %.2f m, %.2f m/s, %4.0f RPM, %.2f Nm, %.2f m/s, Phase: %s",
                i,
                i * self.run.dt,
                state.distance,
                state.velocity,
                state.rpm,
                state.torque_motor,
                state.slip,
                phase.name,
            )

            # Stop when speed is 0 m/s
            if state.velocity <= 0:
                reason = "stopped"
                break

        distances = [r.distance for r in trajectory.records]
        result = TrajectoryResult(
            records=trajectory.records,
            phases=trajectory.phases,
            dt=self.run.dt,
            termination_reason=reason,
            amendments=tuple(trajectory.amendments),
            stripes=detect_stripes(
                distances,
                self.run.stripe_dist,
                number_of_stripes(self.params.track_length, self.run.stripe_dist),
            ),
        )
        logger.info(
            "Simulation finished (%s) after %.2f s: %.2f m, %d stripes",
            reason,
            result.duration,
            result.records[-1].distance,
            len(result.stripes),
        )
        return result

    def analyze(self, result: TrajectoryResult) -> dict:
        """Summarise a finished run"""
        return self.analyzer.analyze(result)
