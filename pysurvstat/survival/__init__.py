"""
Survival analysis on aggregated per-time-point counts.

Public API:
    build_curves(groups) -> list[SurvivalCurve]
    kaplan_meier_curves(groups) -> CurvesSolution
    group_ids(groups) -> list[str]
    logrank_test(group1, group2) -> float
    survdiff(group1, group2) -> LogRankSolution
"""

from pysurvstat.survival.solvers import (
    build_curves, kaplan_meier_curves, group_ids, logrank_test, survdiff,
)
from pysurvstat.survival._common import (
    RawTimePoint,
    GroupRawResult,
    SurvivalPoint,
    SurvivalCurve,
    CurvesParams,
    LogRankParams,
)
from pysurvstat.survival._state import SurvivalState, SurvivalStateMachine
from pysurvstat.survival.design import GroupDesign
from pysurvstat.survival.solution import CurvesSolution, LogRankSolution

__all__ = [
    "build_curves",
    "kaplan_meier_curves",
    "group_ids",
    "logrank_test",
    "survdiff",
    "RawTimePoint",
    "GroupRawResult",
    "SurvivalPoint",
    "SurvivalCurve",
    "CurvesParams",
    "LogRankParams",
    "SurvivalState",
    "SurvivalStateMachine",
    "GroupDesign",
    "CurvesSolution",
    "LogRankSolution",
]
