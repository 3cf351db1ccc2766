"""
Kaplan-Meier survival state machine.

The running totals of one group's curve live in an immutable SurvivalState.
A single transition, SurvivalState.advance(), consumes one time point and
returns the next state together with the emitted SurvivalPoint:

    at_risk   = remaining
    prob      = 1 - d / at_risk            (1 when at_risk == 0)
    cumul    *= prob
    remaining = at_risk - d - c

Greenwood's sum Σ d_j / (n_j (n_j - d_j)) is carried along so every point
holds Var(S(t)) = S(t)^2 * Σ. Terms with n_j == d_j are skipped, as in R's
survfit().

The zero point counts as the previous time point, so the first real time
point must be strictly positive.

SurvivalStateMachine is the stateful face used by the curve builder: it is
seeded once with a group's initial count and cannot be re-seeded.
"""

from __future__ import annotations

from dataclasses import dataclass

from pysurvstat.core.exceptions import InvalidSequenceError
from pysurvstat.core.validation import check_count, check_time_point
from pysurvstat.survival._common import SurvivalPoint

# Time of the synthetic first point of every curve
ZERO_TIME = 0.0


@dataclass(frozen=True)
class SurvivalState:
    """Running totals of one group between two time points."""

    initial_count: int
    remaining: int
    cumul_events: int = 0
    cumul_censorings: int = 0
    cumul: float = 1.0
    greenwood_sum: float = 0.0
    last_time: float = ZERO_TIME

    @classmethod
    def seed(cls, initial_count) -> SurvivalState:
        """Initial state of a group with ``initial_count`` subjects at risk."""
        count = check_count(initial_count, "initial_count")
        return cls(initial_count=count, remaining=count)

    def zero_point(self) -> SurvivalPoint:
        """The synthetic time-zero point of a curve seeded from this state."""
        return SurvivalPoint(
            time_point=ZERO_TIME,
            at_risk=self.initial_count,
            n_events=0,
            n_censorings=0,
            remaining=self.initial_count,
            prob=1.0,
            cumul=1.0,
            cumul_events=0,
            cumul_censorings=0,
            variance=0.0,
        )

    def advance(
        self,
        time_point,
        event_of_interest_count,
        censoring_count,
    ) -> tuple[SurvivalState, SurvivalPoint]:
        """Consume one time point.

        Raises
        ------
        ValidationError
            If the time is not finite and non-negative, or a count is not
            a non-negative integer.
        InvalidSequenceError
            If time_point does not exceed the previous time point, or the
            step removes more subjects than remain at risk.
        """
        t = check_time_point(time_point, "time_point")
        d = check_count(event_of_interest_count, "event_of_interest_count")
        c = check_count(censoring_count, "censoring_count")

        if t <= self.last_time:
            raise InvalidSequenceError(
                f"time_point must be strictly increasing: got {t} "
                f"after {self.last_time}",
                time_point=t,
                previous_time_point=self.last_time,
            )

        at_risk = self.remaining
        if d + c > at_risk:
            raise InvalidSequenceError(
                f"time_point {t}: {d} events + {c} censorings exceed "
                f"the {at_risk} subjects at risk",
                time_point=t,
                previous_time_point=self.last_time,
                remaining=at_risk,
            )

        prob = 1.0 if at_risk == 0 else 1.0 - d / at_risk
        cumul = self.cumul * prob

        greenwood_sum = self.greenwood_sum
        if d > 0 and at_risk - d > 0:
            greenwood_sum += d / (at_risk * (at_risk - d))

        state = SurvivalState(
            initial_count=self.initial_count,
            remaining=at_risk - d - c,
            cumul_events=self.cumul_events + d,
            cumul_censorings=self.cumul_censorings + c,
            cumul=cumul,
            greenwood_sum=greenwood_sum,
            last_time=t,
        )
        point = SurvivalPoint(
            time_point=t,
            at_risk=at_risk,
            n_events=d,
            n_censorings=c,
            remaining=state.remaining,
            prob=prob,
            cumul=cumul,
            cumul_events=state.cumul_events,
            cumul_censorings=state.cumul_censorings,
            variance=cumul ** 2 * greenwood_sum,
        )
        return state, point


class SurvivalStateMachine:
    """Kaplan-Meier estimator for exactly one group.

    Usage:
        machine = SurvivalStateMachine(initial_count=10)
        points = [machine.current()]
        for t, d, c in observations:
            points.append(machine.next(t, d, c))
    """

    __slots__ = ('_state', '_zero_point')

    def __init__(self, initial_count) -> None:
        self._state = SurvivalState.seed(initial_count)
        self._zero_point = self._state.zero_point()

    @property
    def state(self) -> SurvivalState:
        return self._state

    def current(self) -> SurvivalPoint:
        """The synthetic zero point. Does not change the state."""
        return self._zero_point

    def next(self, time_point, event_of_interest_count, censoring_count) -> SurvivalPoint:
        """Advance by one time point and return its SurvivalPoint."""
        self._state, point = self._state.advance(
            time_point, event_of_interest_count, censoring_count,
        )
        return point

    def __repr__(self) -> str:
        return (
            f"SurvivalStateMachine(initial_count={self._state.initial_count}, "
            f"remaining={self._state.remaining}, cumul={self._state.cumul:.6g})"
        )
