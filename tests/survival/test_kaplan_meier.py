"""
Tests for Kaplan-Meier curve construction from aggregated counts.

Reference curve (6 subjects, censored at t=2 and t=4):
    time   n.risk  n.event  survival
       1        6        1    0.8333
       3        4        1    0.6250
       5        2        1    0.3125
       6        1        1    0.0000
Greenwood variances are hand-computed: S(t)^2 * Σ d / (n (n - d)).
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pysurvstat.core.compute.tolerances import CPU_FP64
from pysurvstat.core.exceptions import InvalidSequenceError, ValidationError
from pysurvstat.survival import (
    CurvesSolution,
    GroupRawResult,
    RawTimePoint,
    SurvivalCurve,
    build_curves,
    group_ids,
    kaplan_meier_curves,
)


# ── Fixtures ─────────────────────────────────────────────────────────

BASIC_TIME = [1, 2, 3, 4, 5, 6]
BASIC_EVENT = [1, 0, 1, 0, 1, 1]


@pytest.fixture
def basic_group(aggregate):
    return GroupRawResult(group_id="basic", points=aggregate(BASIC_TIME, BASIC_EVENT))


class TestKaplanMeierBasic:
    """Basic curve shape and values."""

    def test_basic_survival_curve(self, basic_group):
        (curve,) = build_curves([basic_group])

        assert isinstance(curve, SurvivalCurve)
        assert curve.group_id == "basic"
        assert len(curve) == 7  # zero point + 6 distinct times
        assert_allclose(curve.time, [0, 1, 2, 3, 4, 5, 6])
        assert_allclose(
            curve.survival,
            [1, 5 / 6, 5 / 6, 5 / 8, 5 / 8, 5 / 16, 0.0],
            rtol=CPU_FP64.rtol,
        )

    def test_at_risk_and_remaining(self, basic_group):
        (curve,) = build_curves([basic_group])
        steps = curve.points[1:]

        assert [p.at_risk for p in steps] == [6, 5, 4, 3, 2, 1]
        assert [p.remaining for p in steps] == [5, 4, 3, 2, 1, 0]
        assert [p.n_events for p in steps] == [1, 0, 1, 0, 1, 1]
        assert [p.n_censorings for p in steps] == [0, 1, 0, 1, 0, 0]

    def test_greenwood_variance(self, basic_group):
        (curve,) = build_curves([basic_group])

        s1, s3, s5 = 5 / 6, 5 / 8, 5 / 16
        g1 = 1 / (6 * 5)
        g3 = g1 + 1 / (4 * 3)
        g5 = g3 + 1 / (2 * 1)
        expected = [0, s1 ** 2 * g1, s1 ** 2 * g1, s3 ** 2 * g3, s3 ** 2 * g3,
                    s5 ** 2 * g5, 0.0]

        assert_allclose([p.variance for p in curve.points], expected,
                        rtol=CPU_FP64.rtol, atol=CPU_FP64.atol)
        assert_allclose(curve.se, np.sqrt(expected), rtol=CPU_FP64.rtol)

    def test_zero_point(self, basic_group):
        (curve,) = build_curves([basic_group])
        zero = curve.points[0]

        assert zero.time_point == 0.0
        assert zero.prob == 1.0
        assert zero.cumul == 1.0
        assert zero.n_events == 0
        assert zero.n_censorings == 0
        assert zero.at_risk == 6
        assert zero.remaining == 6
        assert curve.initial_count == 6

    def test_median_survival(self, basic_group):
        (curve,) = build_curves([basic_group])
        assert curve.median_survival == 5.0

    def test_median_not_reached(self, aggregate):
        group = GroupRawResult("g", points=aggregate([1, 2, 3, 4], [1, 0, 0, 0]))
        (curve,) = build_curves([group])
        assert curve.median_survival is None


class TestKaplanMeierGrouping:
    """Per-group processing, sorting and merging of raw records."""

    def test_groups_processed_independently(self, two_arm_groups):
        curves = build_curves(two_arm_groups)

        assert [c.group_id for c in curves] == ["treatment", "control"]
        assert curves[0].initial_count == 7
        assert curves[1].initial_count == 7
        assert len(curves[0]) == 8
        assert len(curves[1]) == 8

    def test_unsorted_input(self, basic_group):
        shuffled = GroupRawResult(
            group_id="basic", points=tuple(reversed(basic_group.points)),
        )
        assert build_curves([shuffled]) == build_curves([basic_group])

    def test_duplicate_time_points_merged(self):
        group = GroupRawResult("g", points=(
            RawTimePoint(time_point=2, n_events=1, n_censorings=0, at_risk=3),
            RawTimePoint(time_point=2, n_events=1, n_censorings=1, at_risk=2),
            RawTimePoint(time_point=4, n_events=1, n_censorings=0, at_risk=2),
        ))
        (curve,) = build_curves([group])

        assert len(curve) == 3
        assert curve.points[1].n_events == 2
        assert curve.points[1].n_censorings == 1
        assert curve.points[1].at_risk == 5
        assert curve.points[1].cumul == pytest.approx(3 / 5)
        assert curve.points[2].cumul == pytest.approx(3 / 5 * 1 / 2)

    def test_explicit_initial_count(self):
        group = GroupRawResult(
            "g",
            points=(RawTimePoint(time_point=3, n_events=2, n_censorings=0),),
            initial_count=10,
        )
        (curve,) = build_curves([group])

        assert curve.initial_count == 10
        assert curve.points[1].at_risk == 10
        assert curve.points[1].cumul == pytest.approx(0.8)

    def test_no_records_single_zero_point(self):
        (curve,) = build_curves([GroupRawResult("empty", initial_count=25)])

        assert len(curve) == 1
        assert curve.points[0].cumul == 1.0
        assert curve.points[0].at_risk == 25

    def test_no_records_no_initial_count(self):
        (curve,) = build_curves([GroupRawResult("empty")])
        assert len(curve) == 1
        assert curve.initial_count == 0

    def test_deterministic(self, two_arm_groups):
        assert build_curves(two_arm_groups) == build_curves(two_arm_groups)

    def test_group_ids(self, two_arm_groups):
        assert group_ids(two_arm_groups) == ["treatment", "control"]


class TestKaplanMeierInvariants:
    """Invariants on random cohorts."""

    def test_random_cohorts(self, rng, aggregate):
        groups = []
        for k in range(8):
            n = int(rng.integers(1, 60))
            time = np.round(rng.exponential(20, n), 1) + 0.1
            event = rng.binomial(1, 0.6, n)
            groups.append(GroupRawResult(f"g{k}", points=aggregate(time, event)))

        for curve in build_curves(groups):
            cumul = curve.survival
            assert np.all(np.diff(cumul) <= 0)
            assert np.all((cumul >= 0) & (cumul <= 1))
            for point in curve.points:
                assert point.remaining >= 0
                assert (point.remaining + point.cumul_events
                        + point.cumul_censorings) == curve.initial_count
            assert curve.points[-1].remaining == 0


class TestKaplanMeierErrors:
    """Structural input errors fail fast."""

    def test_counts_exceed_initial_count(self):
        group = GroupRawResult(
            "g",
            points=(RawTimePoint(time_point=1, n_events=3, n_censorings=0),),
            initial_count=2,
        )
        with pytest.raises(InvalidSequenceError) as exc_info:
            build_curves([group])
        assert exc_info.value.remaining == 2
        assert exc_info.value.time_point == 1.0

    def test_duplicate_group_ids(self, basic_group):
        with pytest.raises(ValidationError, match="duplicate"):
            build_curves([basic_group, basic_group])

    def test_negative_initial_count(self):
        with pytest.raises(ValidationError, match="initial_count"):
            build_curves([GroupRawResult("g", initial_count=-1)])

    def test_record_at_time_zero(self):
        """A record at t=0 would duplicate the zero point's time."""
        group = GroupRawResult("a", points=(
            RawTimePoint(time_point=0, n_events=1, n_censorings=0, at_risk=3),
            RawTimePoint(time_point=2, n_events=1, n_censorings=0, at_risk=2),
        ))
        with pytest.raises(InvalidSequenceError, match="strictly increasing") as exc_info:
            build_curves([group])
        assert exc_info.value.time_point == 0.0

    def test_time_points_distinct(self, two_arm_groups):
        for curve in build_curves(two_arm_groups):
            assert len(set(curve.time)) == len(curve)

    def test_non_finite_time(self):
        group = GroupRawResult("g", points=(
            RawTimePoint(time_point=float("nan"), n_events=1, n_censorings=0, at_risk=1),
        ))
        with pytest.raises(ValidationError, match="finite"):
            build_curves([group])


class TestCurvesSolution:
    """Result-wrapped variant."""

    def test_solution_surface(self, two_arm_groups):
        result = kaplan_meier_curves(two_arm_groups)

        assert isinstance(result, CurvesSolution)
        assert result.n_groups == 2
        assert result.group_ids == ["treatment", "control"]
        assert result.curve("control").group_id == "control"
        assert result.backend_name == "cpu_km"
        assert "total_seconds" in result.timing
        assert "design" in result.timing
        assert "curves" in result.timing
        assert result.warnings == ()

    def test_unknown_group(self, two_arm_groups):
        with pytest.raises(KeyError, match="placebo"):
            kaplan_meier_curves(two_arm_groups).curve("placebo")

    def test_summary_output(self, two_arm_groups):
        s = kaplan_meier_curves(two_arm_groups).summary()

        assert "kaplan_meier_curves()" in s
        assert "group=treatment" in s
        assert "group=control" in s
        assert "n.risk" in s
        assert "median=" in s

    def test_summary_truncates_long_curves(self):
        points = tuple(
            RawTimePoint(time_point=t, n_events=1, n_censorings=0, at_risk=30 - t + 1)
            for t in range(1, 31)
        )
        s = kaplan_meier_curves([GroupRawResult("long", points=points)]).summary()
        assert "(10 more rows)" in s

    def test_repr(self, two_arm_groups):
        assert "CurvesSolution" in repr(kaplan_meier_curves(two_arm_groups))
