"""
Public API for survival analysis.

    build_curves(groups) -> list[SurvivalCurve]
    kaplan_meier_curves(groups) -> CurvesSolution
    group_ids(groups) -> list[str]
    logrank_test(group1, group2) -> float (p-value)
    survdiff(group1, group2) -> LogRankSolution

Each function validates inputs, builds a GroupDesign per group, runs the
computation and, for the Solution-returning entry points, wraps the
Result in a Solution.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Sequence

from pysurvstat.core.exceptions import NonConvergenceWarning
from pysurvstat.core.result import Result
from pysurvstat.core.compute.timing import Timer
from pysurvstat.core.compute.tolerances import ConvergenceCriteria, GAMMA_CONVERGENCE
from pysurvstat.core.validation import check_unique_labels
from pysurvstat.survival._common import CurvesParams, GroupRawResult, SurvivalCurve
from pysurvstat.survival._curves import kaplan_meier_curve
from pysurvstat.survival._logrank import logrank_two_groups
from pysurvstat.survival.design import GroupDesign
from pysurvstat.survival.solution import CurvesSolution, LogRankSolution


def kaplan_meier_curves(groups: Sequence[GroupRawResult]) -> CurvesSolution:
    """Kaplan-Meier curves for each group.

    Parameters
    ----------
    groups : sequence of GroupRawResult
        Per-group raw time-point results. Records need not be sorted;
        records sharing a time point within a group are merged.

    Returns
    -------
    CurvesSolution

    Raises
    ------
    ValidationError
        If a record is malformed or group ids repeat.
    InvalidSequenceError
        If a group's counts exceed its initial count.
    """
    groups = list(groups)
    check_unique_labels([g.group_id for g in groups], "groups")

    timer = Timer()
    timer.start()

    with timer.section("design"):
        designs = [GroupDesign.for_group(g) for g in groups]

    with timer.section("curves"):
        curves = tuple(kaplan_meier_curve(design) for design in designs)

    timer.stop()

    result = Result(
        params=CurvesParams(curves=curves),
        info={"method": "Kaplan-Meier", "n_groups": len(curves)},
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=(),
    )

    return CurvesSolution(_result=result)


def build_curves(groups: Sequence[GroupRawResult]) -> list[SurvivalCurve]:
    """Kaplan-Meier curve of each group, in input order.

    Each curve starts with the synthetic zero point followed by one
    SurvivalPoint per distinct time point of the group. See
    kaplan_meier_curves() for the Result-wrapped variant.
    """
    return kaplan_meier_curves(groups).curves


def group_ids(groups: Sequence[GroupRawResult]) -> list[str]:
    """Group identifiers in input order."""
    return [g.group_id for g in groups]


def survdiff(
    group1,
    group2,
    *,
    criteria: ConvergenceCriteria = GAMMA_CONVERGENCE,
) -> LogRankSolution:
    """Two-group log-rank test (Mantel-Haenszel).

    Parameters
    ----------
    group1, group2 : GroupRawResult or iterable of records
        Per-time-point counts of each group. Records expose
        ``time_point``, ``n_events``, ``n_censorings`` and ``at_risk``
        (RawTimePoint or SurvivalPoint). Either group may be empty.
    criteria : ConvergenceCriteria
        Stopping rule of the chi-squared CDF behind the p-value.

    Returns
    -------
    LogRankSolution

    Warns
    -----
    NonConvergenceWarning
        If the chi-squared CDF hit its iteration cap.
    RuntimeWarning
        If the counts are inconsistent (empty risk set at an event time,
        zero variance with non-zero O-E).
    """
    design1 = _as_design(group1, "group1")
    design2 = _as_design(group2, "group2")

    timer = Timer()
    timer.start()

    params, warnings_list = logrank_two_groups(design1, design2, criteria)

    timer.stop()

    for message in warnings_list:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    if not params.converged:
        message = (
            f"Chi-squared CDF did not converge within {criteria.max_iter} "
            f"iterations; p-value is approximate"
        )
        warnings.warn(message, NonConvergenceWarning, stacklevel=2)
        warnings_list.append(message)

    result = Result(
        params=params,
        info={
            "method": "Log-rank test",
            "group_labels": (design1.group_id, design2.group_id),
            "n_event_times": len(params.event_times),
        },
        timing=timer.result(),
        backend_name="cpu_logrank",
        warnings=tuple(warnings_list),
    )

    return LogRankSolution(_result=result)


def logrank_test(
    group1,
    group2,
    *,
    criteria: ConvergenceCriteria = GAMMA_CONVERGENCE,
) -> float:
    """p-value of the two-group log-rank test.

    Same inputs as survdiff(). Returns the probability, under identical
    survival in both groups, of a chi-squared statistic at least as
    extreme as the observed one.
    """
    return survdiff(group1, group2, criteria=criteria).p_value


def _as_design(group, default_id: str) -> GroupDesign:
    if isinstance(group, GroupRawResult):
        return GroupDesign.from_points(group.points, group_id=group.group_id)
    if isinstance(group, Iterable):
        return GroupDesign.from_points(group, group_id=default_id)
    raise TypeError(
        f"{default_id}: expected GroupRawResult or iterable of time-point "
        f"records, got {type(group).__name__}"
    )
