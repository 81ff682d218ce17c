"""
Trajectory history and finalised results
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from pod.state import STATE_FIELDS, Phase, StateRecord, omega_to_rpm


class Trajectory:
    """
    Append-only log of states, one per time index

    The only permitted change to history is replacing the most recent
    state through ``amend_last``.
    """

    def __init__(self, initial: StateRecord = StateRecord()) -> None:
        self._records: List[StateRecord] = [initial]
        self._phases: List[Phase] = [Phase.ACCELERATING]
        self.amendments: List[int] = []  # Indices that were recomputed

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> StateRecord:
        return self._records[index]

    @property
    def last(self) -> StateRecord:
        return self._records[-1]

    @property
    def records(self) -> Tuple[StateRecord, ...]:
        return tuple(self._records)

    @property
    def phases(self) -> Tuple[Phase, ...]:
        return tuple(self._phases)

    def append(self, record: StateRecord, phase: Phase) -> None:
        self._records.append(record)
        self._phases.append(phase)

    def amend_last(self, record: StateRecord, phase: Phase) -> None:
        """Replace the most recent state (never the initial condition)"""
        if len(self._records) < 2:
            raise IndexError("the initial state cannot be amended")
        self._records[-1] = record
        self._phases[-1] = phase
        self.amendments.append(len(self._records) - 1)


# Column names of the finalised result, keyed by state field
RESULT_COLUMNS = {
    "distance": "distance",
    "velocity": "velocity",
    "acceleration": "acceleration",
    "theta": "theta",
    "torque": "torque",
    "torque_lat": "torque_lat",
    "torque_motor": "torque_motor",
    "f_thrust_wheel": "wheel_x",
    "f_lat_wheel": "wheel_lat",
    "f_x_pod": "pod_x",
    "f_y_pod": "pod_y",
    "power": "power",
    "power_loss": "power_loss",
    "power_input": "power_input",
    "efficiency": "efficiency",
    "slip": "slips",
}


@dataclass
class TrajectoryResult:
    """Finished run, truncated at the termination index"""

    records: Tuple[StateRecord, ...]
    phases: Tuple[Phase, ...]
    dt: float
    termination_reason: str  # "stopped" or "time_limit"
    amendments: Tuple[int, ...] = ()
    stripes: Tuple[int, ...] = ()
    _columns: Dict[str, np.ndarray] = field(default_factory=dict, repr=False)

    @property
    def termination_index(self) -> int:
        return len(self.records) - 1

    @property
    def duration(self) -> float:
        return self.termination_index * self.dt

    @property
    def time(self) -> np.ndarray:
        return np.arange(len(self.records)) * self.dt

    @property
    def rpm(self) -> np.ndarray:
        return omega_to_rpm(self.column("omega"))

    def column(self, name: str) -> np.ndarray:
        """
        One state quantity over the whole run

        Args:
            name: StateRecord field name

        Returns:
            Array with one value per time index
        """
        if name not in STATE_FIELDS:
            raise KeyError(name)
        if name not in self._columns:
            self._columns[name] = np.array([getattr(r, name) for r in self.records], dtype=float)
        return self._columns[name]

    def __getitem__(self, name: str) -> np.ndarray:
        return self.column(name)

    def as_dict(self) -> Dict[str, np.ndarray]:
        """Columns of the run under their report names, with time and rpm"""
        result = {"time": self.time, "rpm": self.rpm}
        for state_field, column_name in RESULT_COLUMNS.items():
            result[column_name] = self.column(state_field)
        return result
