"""Tests for the mfhwpt type-curve package."""
from . import (test_mfhwpt_parameters, test_mfhwpt_special, test_mfhwpt_fractures,
               test_mfhwpt_solvers, test_mfhwpt_model, test_mfhwpt_manager,
               test_mfhwpt_logging_setup)

__all__ = [
    "test_mfhwpt_parameters",
    "test_mfhwpt_special",
    "test_mfhwpt_fractures",
    "test_mfhwpt_solvers",
    "test_mfhwpt_model",
    "test_mfhwpt_manager",
    "test_mfhwpt_logging_setup",
]

__version__ = "0.0.1"
