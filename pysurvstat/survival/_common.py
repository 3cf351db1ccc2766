"""
Records and parameter payloads for survival analysis.

Input records (RawTimePoint, GroupRawResult) carry already-aggregated
per-time-point counts. Output records (SurvivalPoint, SurvivalCurve) and
the *Params payloads are frozen; the payloads travel inside a Result[P]
envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class RawTimePoint:
    """Aggregated counts of one group at one time point."""

    time_point: float
    n_events: int                # events of interest at exactly this time
    n_censorings: int            # censorings at exactly this time
    at_risk: int = 0             # subjects at risk just before this time


@dataclass(frozen=True)
class GroupRawResult:
    """Raw per-time-point results of one comparison group.

    ``initial_count`` seeds the survival curve. When None, the at-risk
    count of the earliest record is used (0 for a group with no records).
    """

    group_id: str
    points: tuple[RawTimePoint, ...] = ()
    initial_count: int | None = None


@dataclass(frozen=True)
class SurvivalPoint:
    """One step of a Kaplan-Meier curve.

    The first point of every curve is the synthetic time-zero point with
    prob = cumul = 1 and no events.
    """

    time_point: float
    at_risk: int                 # remaining before this step + events + censorings
    n_events: int
    n_censorings: int
    remaining: int               # at_risk - n_events - n_censorings
    prob: float                  # 1 - n_events / at_risk (1 when at_risk == 0)
    cumul: float                 # product of prob up to and including this step
    cumul_events: int
    cumul_censorings: int
    variance: float = 0.0        # Greenwood variance of cumul


@dataclass(frozen=True)
class SurvivalCurve:
    """Kaplan-Meier curve of one group: zero point followed by one point
    per distinct time point, in ascending time order."""

    group_id: str
    points: tuple[SurvivalPoint, ...]

    @property
    def initial_count(self) -> int:
        return self.points[0].at_risk

    @property
    def time(self) -> NDArray:
        return np.array([p.time_point for p in self.points], dtype=np.float64)

    @property
    def survival(self) -> NDArray:
        return np.array([p.cumul for p in self.points], dtype=np.float64)

    @property
    def se(self) -> NDArray:
        """Greenwood standard error of the survival estimate."""
        return np.sqrt(np.array([p.variance for p in self.points], dtype=np.float64))

    @property
    def median_survival(self) -> float | None:
        """Smallest time where S(t) <= 0.5, None if never reached."""
        for point in self.points:
            if point.cumul <= 0.5:
                return point.time_point
        return None

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class CurvesParams:
    """Kaplan-Meier curves, one per group, in input order."""

    curves: tuple[SurvivalCurve, ...]


@dataclass(frozen=True)
class LogRankParams:
    """Two-group Mantel-Haenszel log-rank test parameters."""

    statistic: float             # chi-squared statistic
    df: int                      # degrees of freedom (always 1)
    p_value: float
    observed: NDArray            # (2,) observed events per group
    expected: NDArray            # (2,) expected events per group under H0
    variance: float              # hypergeometric variance of O1 - E1
    n_per_group: NDArray         # (2,) initial at-risk count per group
    event_times: NDArray         # (m,) time points with at least one event
    converged: bool              # chi-squared CDF met its tolerance
