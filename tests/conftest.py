"""
Shared fixtures
"""

import pytest

from pod import BrakingConfig, RunConfig, VehicleParams
from tests.synthetic_models import LinearThrustModel


@pytest.fixture
def params() -> VehicleParams:
    """Default pod parameters"""
    return VehicleParams()


@pytest.fixture
def braking() -> BrakingConfig:
    """Default brake setup"""
    return BrakingConfig()


@pytest.fixture
def run() -> RunConfig:
    """Default run setup"""
    return RunConfig()


@pytest.fixture
def linear_model() -> LinearThrustModel:
    """Thrust 100·s N, no losses, optimal slip 2 m/s"""
    return LinearThrustModel()
