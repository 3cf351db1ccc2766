"""
Kaplan-Meier curve construction from aggregated per-group counts.

Each group is handled independently:
    1. validate and sort its records, merging repeated time points
       (GroupDesign)
    2. seed a fresh SurvivalStateMachine with the group's initial count
    3. emit the zero point, then one point per distinct time point

A curve therefore holds (distinct time points + 1) points.
"""

from __future__ import annotations

from pysurvstat.survival._common import SurvivalCurve
from pysurvstat.survival._state import SurvivalStateMachine
from pysurvstat.survival.design import GroupDesign


def kaplan_meier_curve(design: GroupDesign) -> SurvivalCurve:
    """Compute the Kaplan-Meier curve of one group.

    Parameters
    ----------
    design : GroupDesign
        Validated, sorted counts of the group.

    Returns
    -------
    SurvivalCurve

    Raises
    ------
    InvalidSequenceError
        If the counts remove more subjects than the initial count holds.
    """
    machine = SurvivalStateMachine(design.initial_count)

    points = [machine.current()]
    for time_point, n_events, n_censorings, _ in design.records():
        points.append(machine.next(time_point, n_events, n_censorings))

    return SurvivalCurve(group_id=design.group_id, points=tuple(points))
