"""
Shared helpers for survival tests.

Individual-level (time, event) data is aggregated into the per-time-point
records the package consumes, with at_risk = number of subjects whose
time is >= t. Such records are internally consistent, so results can be
compared with a textbook individual-level computation.
"""

import numpy as np
import pytest

from pysurvstat.survival import GroupRawResult, RawTimePoint


def aggregate_individual(time, event) -> tuple[RawTimePoint, ...]:
    """Per-time-point records of individual-level survival data."""
    time = np.asarray(time, dtype=np.float64)
    event = np.asarray(event, dtype=np.float64)

    records = []
    for t in np.unique(time):
        at_t = time == t
        records.append(RawTimePoint(
            time_point=float(t),
            n_events=int(np.sum(event[at_t] == 1)),
            n_censorings=int(np.sum(event[at_t] == 0)),
            at_risk=int(np.sum(time >= t)),
        ))
    return tuple(records)


def individual_logrank(time, event, group) -> tuple[float, float]:
    """Textbook two-group log-rank on individual data: (O1 - E1, V1)."""
    time = np.asarray(time, dtype=np.float64)
    event = np.asarray(event, dtype=np.float64)
    group = np.asarray(group)
    labels = np.unique(group)
    in1 = group == labels[0]

    diff = 0.0
    var = 0.0
    for t in np.unique(time[event == 1]):
        risk = time >= t
        n = np.sum(risk)
        n1 = np.sum(risk & in1)
        d = np.sum((time == t) & (event == 1))
        d1 = np.sum((time == t) & (event == 1) & in1)
        diff += d1 - n1 * d / n
        if n > 1:
            var += n1 * (n - n1) * d * (n - d) / (n ** 2 * (n - 1))
    return float(diff), float(var)


@pytest.fixture
def aggregate():
    return aggregate_individual


@pytest.fixture
def reference_logrank():
    return individual_logrank


@pytest.fixture
def disjoint_groups():
    """Two groups with disjoint event times.

    Hand computation: O1 - E1 = 7/6, V = 17/36, chisq = 49/17 ≈ 2.882,
    p ≈ 0.08956.
    """
    group1 = (
        RawTimePoint(time_point=1, n_events=1, n_censorings=0, at_risk=2),
        RawTimePoint(time_point=2, n_events=1, n_censorings=0, at_risk=1),
    )
    group2 = (
        RawTimePoint(time_point=3, n_events=1, n_censorings=0, at_risk=2),
        RawTimePoint(time_point=4, n_events=1, n_censorings=0, at_risk=1),
    )
    return group1, group2


@pytest.fixture
def two_arm_groups(aggregate):
    """Classic two-arm trial, one GroupRawResult per arm."""
    treatment = GroupRawResult(
        group_id="treatment",
        points=aggregate([6, 7, 10, 15, 16, 22, 23], [1, 1, 1, 1, 0, 1, 1]),
    )
    control = GroupRawResult(
        group_id="control",
        points=aggregate([6, 9, 10, 11, 17, 19, 20], [0, 1, 0, 1, 1, 1, 1]),
    )
    return treatment, control
