"""
Two-group log-rank test (Mantel-Haenszel) on aggregated counts.

Input is each group's per-time-point counts (events, censorings, at risk),
already validated and merged per time point by GroupDesign. The groups may
have disjoint, overlapping or identical time points.

Algorithm:
    1. Risk-set merge. Over the sorted union of both groups' time points,
       the combined at-risk count is one shared pool that starts at
       n1[0] + n2[0] and, after each time point, loses every event and
       censoring (both groups) recorded there. Ties are simultaneous.
    2. At each time t with D_t > 0 events in total and N_t at risk:
       - n1_t = group-1 at risk, or N_t - n2_t when group 1 has no event
       - E1_t = n1_t * D_t / N_t
       - O-E  += e1_t - E1_t
       - V    += n1_t (D_t/N_t) (N_t - D_t) (N_t - n1_t) / (N_t (N_t - 1)),
                 0 when N_t <= 1 or n1_t == N_t
    3. chisq = (O-E)^2 / V, defined as 0 when O-E == 0
    4. p = 1 - F_chi2(chisq; df=1)

References:
    Mantel, N. (1966). Evaluation of survival data and two new rank order
        statistics arising in its consideration. Cancer Chemotherapy
        Reports, 50(3), 163-170.
    R Core Team. survival::survdiff
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysurvstat.core.compute.tolerances import ConvergenceCriteria, GAMMA_CONVERGENCE
from pysurvstat.distributions.chi2 import chi_squared_pq
from pysurvstat.survival._common import LogRankParams
from pysurvstat.survival.design import GroupDesign


def merge_risk_sets(
    group1: GroupDesign,
    group2: GroupDesign,
) -> tuple[NDArray, NDArray]:
    """Combined risk set over the union of both groups' time points.

    Returns
    -------
    (time, n_risk)
        time : (k,) ascending distinct time points of either group.
        n_risk : (k,) combined number at risk just before each time point.
    """
    time = np.union1d(group1.time, group2.time)

    # Total leaving the pool at each time point, both groups
    removed = np.zeros(len(time), dtype=np.int64)
    for group in (group1, group2):
        idx = np.searchsorted(time, group.time)
        removed[idx] += group.n_events + group.n_censorings

    start = group1.initial_at_risk + group2.initial_at_risk
    removed_before = np.zeros_like(removed)
    removed_before[1:] = np.cumsum(removed)[:-1]
    n_risk = start - removed_before

    return time, n_risk


def _align(group: GroupDesign, time: NDArray) -> tuple[NDArray, NDArray, NDArray]:
    """Spread a group's events and at-risk counts over the merged time grid.

    The mask marks time points where the group has events; its at-risk
    count is only trusted there.
    """
    has_events = np.zeros(len(time), dtype=bool)
    events = np.zeros(len(time), dtype=np.float64)
    at_risk = np.zeros(len(time), dtype=np.float64)

    idx = np.searchsorted(time, group.time)
    has_events[idx] = group.n_events > 0
    events[idx] = group.n_events
    at_risk[idx] = group.at_risk

    return has_events, events, at_risk


def logrank_two_groups(
    group1: GroupDesign,
    group2: GroupDesign,
    criteria: ConvergenceCriteria = GAMMA_CONVERGENCE,
) -> tuple[LogRankParams, list[str]]:
    """Compute the two-group log-rank test.

    Parameters
    ----------
    group1, group2 : GroupDesign
        Validated per-time-point counts. Either may be empty.
    criteria : ConvergenceCriteria
        Stopping rule of the chi-squared CDF.

    Returns
    -------
    (LogRankParams, warnings)
    """
    warnings_list: list[str] = []

    time, n_risk = merge_risk_sets(group1, group2)
    n_risk = n_risk.astype(np.float64)

    has_events1, e1, r1 = _align(group1, time)
    _, e2, r2 = _align(group2, time)
    d = e1 + e2

    # Only time points with events contribute; a non-positive pool can only
    # come from inconsistent at-risk counts and is skipped.
    contributing = (d > 0) & (n_risk > 0)
    if np.any((d > 0) & (n_risk <= 0)):
        warnings_list.append(
            "Combined risk set is empty at an event time; "
            "at-risk counts are inconsistent with event counts"
        )

    t_c = time[contributing]
    n = n_risk[contributing]
    d_c = d[contributing]
    e1_c = e1[contributing]
    # Without a group-1 event at t, group 1's share is inferred from the pool
    n1 = np.where(has_events1[contributing], r1[contributing], n - r2[contributing])

    expected1_t = n1 * d_c / n
    diff = float(np.sum(e1_c - expected1_t))

    informative = (n > 1) & (n1 != n)
    var_t = np.zeros(len(n), dtype=np.float64)
    nn = n[informative]
    var_t[informative] = (
        n1[informative] * (d_c[informative] / nn)
        * (nn - d_c[informative]) * (nn - n1[informative])
        / (nn * (nn - 1.0))
    )
    variance = float(np.sum(var_t))

    if diff == 0.0:
        statistic = 0.0
    elif variance > 0.0:
        statistic = diff ** 2 / variance
    else:
        statistic = 0.0
        warnings_list.append(
            f"Variance of O-E is zero while O-E = {diff:.6g}; "
            f"statistic set to 0"
        )

    cdf, _, converged = chi_squared_pq(statistic, 1, criteria)
    p_value = 1.0 - cdf

    observed1 = float(np.sum(e1_c))
    expected1 = float(np.sum(expected1_t))
    total_events = float(np.sum(d_c))

    params = LogRankParams(
        statistic=statistic,
        df=1,
        p_value=p_value,
        observed=np.array([observed1, total_events - observed1]),
        expected=np.array([expected1, total_events - expected1]),
        variance=variance,
        n_per_group=np.array(
            [group1.initial_at_risk, group2.initial_at_risk], dtype=np.float64,
        ),
        event_times=t_c,
        converged=converged,
    )
    return params, warnings_list
