"""
Core infrastructure for pysurvstat.

This module provides shared abstractions and utilities used by the
domain-specific submodules (survival, distributions).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and numeric configuration
"""

from pysurvstat.core.result import Result
from pysurvstat.core.exceptions import (
    PySurvStatError,
    ValidationError,
    InvalidSequenceError,
    NonConvergenceWarning,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PySurvStatError",
    "ValidationError",
    "InvalidSequenceError",
    "NonConvergenceWarning",
]
