"""
Shared compute infrastructure for pysurvstat.

Submodules:
    timing: Execution timing utilities
    tolerances: Convergence criteria and comparison tolerance tiers
"""

from pysurvstat.core.compute.timing import Timer
from pysurvstat.core.compute.tolerances import (
    ConvergenceCriteria,
    GAMMA_CONVERGENCE,
    ToleranceTier,
    CPU_FP64,
    REFERENCE_P_VALUE,
)

__all__ = [
    # Timing
    "Timer",
    # Tolerances
    "ConvergenceCriteria",
    "GAMMA_CONVERGENCE",
    "ToleranceTier",
    "CPU_FP64",
    "REFERENCE_P_VALUE",
]
