"""
GroupDesign: immutable, validated per-time-point counts of one group.

Raw records may arrive unsorted and with repeated time points. GroupDesign
validates every record and aggregates repeats into a sorted association
list (time -> events, censorings, at_risk) held as parallel numpy arrays.
All downstream code trusts clean data.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from pysurvstat.core.exceptions import ValidationError
from pysurvstat.core.validation import check_count, check_time_point
from pysurvstat.survival._common import GroupRawResult

_FIELDS = ("time_point", "n_events", "n_censorings", "at_risk")


@dataclass(frozen=True)
class GroupDesign:
    """Sorted, de-duplicated time-point counts of one group.

    Parameters
    ----------
    group_id : str
        Group label.
    time : NDArray
        (m,) strictly increasing time points.
    n_events : NDArray
        (m,) events of interest at each time point.
    n_censorings : NDArray
        (m,) censorings at each time point.
    at_risk : NDArray
        (m,) subjects at risk just before each time point.
    initial_count : int
        Subjects at risk at time zero.
    """

    group_id: str
    time: NDArray
    n_events: NDArray
    n_censorings: NDArray
    at_risk: NDArray
    initial_count: int

    @classmethod
    def for_group(cls, raw: GroupRawResult) -> GroupDesign:
        """Create and validate the design of a GroupRawResult.

        Raises
        ------
        ValidationError
            If any record is malformed.
        """
        design = cls.from_points(raw.points, group_id=raw.group_id)
        if raw.initial_count is None:
            return design

        initial_count = check_count(
            raw.initial_count, f"{raw.group_id}: initial_count",
        )
        return cls(
            group_id=design.group_id,
            time=design.time,
            n_events=design.n_events,
            n_censorings=design.n_censorings,
            at_risk=design.at_risk,
            initial_count=initial_count,
        )

    @classmethod
    def from_points(cls, points: Iterable, *, group_id: str = "group") -> GroupDesign:
        """Create and validate a design from per-time-point records.

        Parameters
        ----------
        points : iterable
            Objects exposing ``time_point``, ``n_events``, ``n_censorings``
            and ``at_risk`` (RawTimePoint, SurvivalPoint, ...). Need not be
            sorted. Records sharing a time point are merged by summing
            events, censorings and at_risk, as for partial counts of one
            group reported separately.
        group_id : str
            Group label used in error messages.

        Returns
        -------
        GroupDesign
        """
        records = [_read_record(p, i, group_id) for i, p in enumerate(points)]

        if not records:
            empty_f = np.array([], dtype=np.float64)
            empty_i = np.array([], dtype=np.int64)
            return cls(
                group_id=group_id,
                time=empty_f,
                n_events=empty_i,
                n_censorings=empty_i.copy(),
                at_risk=empty_i.copy(),
                initial_count=0,
            )

        raw_time = np.array([r[0] for r in records], dtype=np.float64)
        raw_counts = np.array([r[1:] for r in records], dtype=np.int64)

        time, inverse = np.unique(raw_time, return_inverse=True)
        m = len(time)

        n_events = np.zeros(m, dtype=np.int64)
        n_censorings = np.zeros(m, dtype=np.int64)
        at_risk = np.zeros(m, dtype=np.int64)
        np.add.at(n_events, inverse, raw_counts[:, 0])
        np.add.at(n_censorings, inverse, raw_counts[:, 1])
        np.add.at(at_risk, inverse, raw_counts[:, 2])

        return cls(
            group_id=group_id,
            time=time,
            n_events=n_events,
            n_censorings=n_censorings,
            at_risk=at_risk,
            initial_count=int(at_risk[0]),
        )

    @property
    def n_times(self) -> int:
        """Number of distinct time points."""
        return len(self.time)

    @property
    def is_empty(self) -> bool:
        return len(self.time) == 0

    @property
    def initial_at_risk(self) -> int:
        """At-risk count of the earliest record (0 for an empty group)."""
        return int(self.at_risk[0]) if len(self.at_risk) > 0 else 0

    @property
    def total_events(self) -> int:
        return int(np.sum(self.n_events))

    def records(self):
        """Iterate (time, events, censorings, at_risk) in ascending time."""
        for i in range(len(self.time)):
            yield (
                float(self.time[i]),
                int(self.n_events[i]),
                int(self.n_censorings[i]),
                int(self.at_risk[i]),
            )


def _read_record(point, index: int, group_id: str) -> tuple[float, int, int, int]:
    missing = [f for f in _FIELDS if not hasattr(point, f)]
    if missing:
        raise ValidationError(
            f"{group_id}: record {index} of type {type(point).__name__} "
            f"lacks attributes {missing}"
        )

    prefix = f"{group_id}[{index}]"
    return (
        check_time_point(point.time_point, f"{prefix}.time_point"),
        check_count(point.n_events, f"{prefix}.n_events"),
        check_count(point.n_censorings, f"{prefix}.n_censorings"),
        check_count(point.at_risk, f"{prefix}.at_risk"),
    )
