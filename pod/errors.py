"""
Exceptions raised by the pod trajectory simulation
"""

from typing import Optional, Tuple

from pod.state import Phase


class PodSimulationError(Exception):
    """Base class for all simulation errors"""


class ConfigurationError(PodSimulationError, ValueError):
    """
    Raised when vehicle, braking or run parameters are invalid.

    Always raised before the first step is computed.
    """


class SolverError(PodSimulationError):
    """Root finding failed for one of the implicit step equations"""

    def __init__(self, message: str, bracket: Optional[Tuple[float, float]] = None) -> None:
        super().__init__(message)
        self.bracket = bracket


class NoRootBracketed(SolverError):
    """The residual does not change sign across the bracket"""


class MaxIterationsExceeded(SolverError):
    """The solver did not converge within its iteration budget"""


class StepFailure(PodSimulationError):
    """
    A simulation step could not be computed.

    The underlying solver error is available as ``__cause__``.
    """

    def __init__(self, index: int, phase: Phase, message: str = "") -> None:
        self.index = index
        self.phase = phase
        detail = f": {message}" if message else ""
        super().__init__(f"step {index} failed in phase {phase.name}{detail}")
