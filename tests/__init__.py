"""
Test suite for the HypED Pod Trajectory Simulation.

This package contains unit tests organized by component:
- test_params.py: Tests for vehicle, braking and run parameters
- test_solver.py: Tests for root finding and the step residuals
- test_models.py: Tests for lookup table propulsion models
- test_dynamics.py: Tests for the per-step physics update
- test_phase.py: Tests for phase transitions and braking distance
- test_trajectory.py: Tests for the trajectory log and results
- test_simulation.py: Tests for full simulation runs
- test_analysis.py: Tests for stripe detection and the run summary
- test_integration.py: Integration tests for sweeps, the command line and the dashboard
"""
