"""
Thrust, power loss and optimal slip models backed by lookup tables
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Protocol, Union

import numpy as np
from scipy.interpolate import RegularGridInterpolator
from scipy.io import loadmat

from pod.errors import ConfigurationError

logger = logging.getLogger(__name__)

FORCE_TABLE = "force_lookup_table"
POWER_LOSS_TABLE = "power_loss_lookup_table"
SLIP_COEFFICIENTS = "optimal_slip_coefficients"


class PropulsionModel(Protocol):
    """Force, loss and optimal slip of one propulsion wheel pair"""

    def thrust_force(self, slip: float, velocity: float) -> float:
        """Net thrust of a wheel pair (N)"""
        ...

    def power_loss(self, slip: float, velocity: float) -> float:
        """Power dissipated by a wheel pair (W)"""
        ...

    def optimal_slip(self, velocity: float) -> float:
        """Slip giving the best thrust at the given velocity (m/s)"""
        ...


class LookupTable:
    """Bilinear interpolant over a regular (slip, velocity) grid"""

    def __init__(self, slips: np.ndarray, velocities: np.ndarray, values: np.ndarray) -> None:
        """
        Args:
            slips: Strictly increasing slip axis (m/s)
            velocities: Strictly increasing velocity axis (m/s)
            values: Table of shape (len(slips), len(velocities))
        """
        self.slips = np.asarray(slips, dtype=float).ravel()
        self.velocities = np.asarray(velocities, dtype=float).ravel()
        self.values = np.asarray(values, dtype=float)

        for name, axis in (("slips", self.slips), ("velocities", self.velocities)):
            if len(axis) < 2 or np.any(np.diff(axis) <= 0):
                raise ConfigurationError(f"lookup table axis '{name}' must be strictly increasing")
        expected = (len(self.slips), len(self.velocities))
        if self.values.shape != expected:
            raise ConfigurationError(
                f"lookup table has shape {self.values.shape}, expected {expected}"
            )

        # Linear extrapolation keeps the table continuous outside the grid
        self._interpolator = RegularGridInterpolator(
            (self.slips, self.velocities),
            self.values,
            method="linear",
            bounds_error=False,
            fill_value=None,
        )

    def __call__(self, slip: float, velocity: float) -> float:
        return float(self._interpolator([[slip, velocity]])[0])


@dataclass(frozen=True)
class LookupTableModel:
    """Propulsion model from precomputed force/loss tables and a fitted slip polynomial"""

    force_table: LookupTable
    loss_table: LookupTable
    slip_coefficients: np.ndarray  # Highest order first, as for numpy.polyval

    def thrust_force(self, slip: float, velocity: float) -> float:
        return self.force_table(slip, velocity)

    def power_loss(self, slip: float, velocity: float) -> float:
        return self.loss_table(slip, velocity)

    def optimal_slip(self, velocity: float) -> float:
        return float(np.polyval(self.slip_coefficients, velocity))


def _load_arrays(path: Path) -> Dict[str, np.ndarray]:
    if path.suffix == ".mat":
        return {k: v for k, v in loadmat(str(path)).items() if not k.startswith("__")}
    with np.load(path) as data:
        return {k: data[k] for k in data.files}


def _find(directory: Path, stem: str) -> Path:
    for suffix in (".npz", ".mat"):
        candidate = directory / f"{stem}{suffix}"
        if candidate.exists():
            return candidate
    raise ConfigurationError(f"no {stem}.npz or {stem}.mat in {directory}")


def load_table(path: Union[str, Path]) -> LookupTable:
    """Load a lookup table stored with 'slips', 'velocities' and 'values' arrays"""
    arrays = _load_arrays(Path(path))
    try:
        return LookupTable(arrays["slips"], arrays["velocities"], arrays["values"])
    except KeyError as exc:
        raise ConfigurationError(f"lookup table {path} is missing {exc}") from exc


def load_lookup_tables(directory: Union[str, Path]) -> LookupTableModel:
    """
    Load the propulsion model from a directory of tables

    Expects force_lookup_table, power_loss_lookup_table and
    optimal_slip_coefficients, each as .npz or .mat.
    """
    directory = Path(directory)
    coefficients_path = _find(directory, SLIP_COEFFICIENTS)
    arrays = _load_arrays(coefficients_path)
    if "coefficients" not in arrays:
        raise ConfigurationError(f"{coefficients_path} is missing 'coefficients'")

    model = LookupTableModel(
        force_table=load_table(_find(directory, FORCE_TABLE)),
        loss_table=load_table(_find(directory, POWER_LOSS_TABLE)),
        slip_coefficients=np.asarray(arrays["coefficients"], dtype=float).ravel(),
    )
    logger.info(
        "Loaded lookup tables from %s (%d slips x %d velocities)",
        directory,
        len(model.force_table.slips),
        len(model.force_table.velocities),
    )
    return model
