"""
pysurvstat: non-parametric survival statistics on aggregated counts.

Computes Kaplan-Meier curves and two-group log-rank tests from
per-time-point event, censoring and at-risk counts that have already
been aggregated per group (e.g. decrypted totals from remote nodes).

Submodules:
    survival: Kaplan-Meier curves and the log-rank test
    distributions: Chi-squared CDF
    core: Result envelope, exceptions, validation, numeric configuration
"""

__version__ = "0.1.0"

from pysurvstat import survival
from pysurvstat import distributions
from pysurvstat.survival import (
    build_curves,
    kaplan_meier_curves,
    group_ids,
    logrank_test,
    survdiff,
)
from pysurvstat.distributions import chi_squared_cdf, chi_squared_sf

__all__ = [
    "__version__",
    "survival",
    "distributions",
    "build_curves",
    "kaplan_meier_curves",
    "group_ids",
    "logrank_test",
    "survdiff",
    "chi_squared_cdf",
    "chi_squared_sf",
]
