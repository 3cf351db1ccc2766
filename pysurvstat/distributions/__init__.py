"""
Probability distributions.

Public API:
    chi_squared_cdf(x, df) -> float
    chi_squared_sf(x, df)  -> float
"""

from pysurvstat.distributions.chi2 import (
    chi_squared_cdf,
    chi_squared_sf,
    chi_squared_pq,
)

__all__ = [
    "chi_squared_cdf",
    "chi_squared_sf",
    "chi_squared_pq",
]
