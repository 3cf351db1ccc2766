"""
Exception hierarchy for pysurvstat.

All exceptions inherit from PySurvStatError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
    - Numeric edge cases are absorbed with defined fallbacks and reported
      as warnings, never raised
"""


class PySurvStatError(Exception):
    """Base exception for all pysurvstat errors."""
    pass


class ValidationError(PySurvStatError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks (negative
    counts, non-finite times, invalid degrees of freedom, ...).
    """
    pass


class InvalidSequenceError(ValidationError):
    """
    Time-point sequence violates the survival state machine contract.

    Raised when a time point does not strictly follow the previous one,
    or when a step would remove more subjects than remain at risk.

    Attributes:
        time_point: The offending time point
        previous_time_point: Time point of the previous step, if any
        remaining: Subjects at risk before the offending step, if known
    """

    def __init__(
        self,
        message: str,
        time_point: float | None = None,
        previous_time_point: float | None = None,
        remaining: int | None = None
    ):
        super().__init__(message)
        self.time_point = time_point
        self.previous_time_point = previous_time_point
        self.remaining = remaining


class NonConvergenceWarning(RuntimeWarning):
    """
    Iterative numeric routine hit its iteration cap.

    Emitted (never raised) when a series or continued-fraction evaluation
    stops before meeting its tolerance. The returned value is a best-effort
    approximation clamped to its valid range.
    """
    pass
