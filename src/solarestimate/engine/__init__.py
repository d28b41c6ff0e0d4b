"""Engine package orchestrating fetch and estimation."""

from .estimate import estimate_energy, run_estimation

__all__ = ["estimate_energy", "run_estimation"]
