"""
Solution wrappers for survival analysis results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods.
"""

from __future__ import annotations

from pysurvstat.core.result import Result
from pysurvstat.survival._common import CurvesParams, LogRankParams, SurvivalCurve

# Rows shown per table in summary()
_MAX_ROWS = 20


class CurvesSolution:
    """Kaplan-Meier curves of one or more groups.

    Properties mirror R's survfit() output, one curve per group.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[CurvesParams]) -> None:
        self._result = _result

    @property
    def curves(self) -> list[SurvivalCurve]:
        """Curves in input group order."""
        return list(self._result.params.curves)

    @property
    def group_ids(self) -> list[str]:
        return [curve.group_id for curve in self._result.params.curves]

    @property
    def n_groups(self) -> int:
        return len(self._result.params.curves)

    def curve(self, group_id: str) -> SurvivalCurve:
        """Curve of the given group."""
        for curve in self._result.params.curves:
            if curve.group_id == group_id:
                return curve
        raise KeyError(
            f"No curve for group {group_id!r}. Available: {self.group_ids}"
        )

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of every curve."""
        lines = []
        lines.append("Call: kaplan_meier_curves()")

        for curve in self._result.params.curves:
            last = curve.points[-1]
            median = curve.median_survival
            median_str = f"{median:.4g}" if median is not None else "NA"

            lines.append("")
            lines.append(
                f"  group={curve.group_id}: n={curve.initial_count}, "
                f"events={last.cumul_events}, "
                f"censored={last.cumul_censorings}, "
                f"median={median_str}"
            )
            lines.append(
                f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
                f"{'n.censor':>8s}  {'survival':>10s}  {'std.err':>10s}"
            )

            # Skip the synthetic zero point
            steps = curve.points[1:]
            for point in steps[:_MAX_ROWS]:
                lines.append(
                    f"  {point.time_point:8.4g}  {point.at_risk:8d}  "
                    f"{point.n_events:8d}  {point.n_censorings:8d}  "
                    f"{point.cumul:10.6f}  {point.variance ** 0.5:10.6f}"
                )
            if len(steps) > _MAX_ROWS:
                lines.append(f"  ... ({len(steps) - _MAX_ROWS} more rows)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CurvesSolution(groups={self.group_ids})"


class LogRankSolution:
    """Two-group log-rank test solution.

    Properties mirror R's survdiff() output.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LogRankParams]) -> None:
        self._result = _result

    @property
    def statistic(self) -> float:
        return self._result.params.statistic

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def observed(self):
        return self._result.params.observed

    @property
    def expected(self):
        return self._result.params.expected

    @property
    def variance(self) -> float:
        return self._result.params.variance

    @property
    def n_per_group(self):
        return self._result.params.n_per_group

    @property
    def event_times(self):
        return self._result.params.event_times

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def group_labels(self) -> tuple[str, str]:
        return self._result.info["group_labels"]

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of log-rank test."""
        lines = []
        lines.append("Call: survdiff()")
        lines.append("")

        lines.append(f"  {'':>12s}  {'N':>6s}  {'Observed':>10s}  {'Expected':>10s}  {'(O-E)^2/E':>10s}")
        for i, label in enumerate(self.group_labels):
            oe = ((self.observed[i] - self.expected[i]) ** 2
                  / self.expected[i]) if self.expected[i] > 0 else 0
            lines.append(
                f"  {label:>12s}  {self.n_per_group[i]:6.0f}  "
                f"{self.observed[i]:10.1f}  {self.expected[i]:10.1f}  "
                f"{oe:10.3f}"
            )

        lines.append("")
        lines.append(
            f"  Chisq= {self.statistic:.4f} on {self.df} degrees of freedom, "
            f"p= {self.p_value:.4g}"
        )

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LogRankSolution(chisq={self.statistic:.4f}, "
            f"df={self.df}, p={self.p_value:.4g})"
        )
