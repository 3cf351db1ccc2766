"""
Input validation utilities for pysurvstat.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent coercion of fractional counts to integers
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
from numbers import Integral, Real
from typing import Any

import numpy as np

from pysurvstat.core.exceptions import ValidationError


def check_count(value: Any, name: str) -> int:
    """
    Validate a subject count and return it as a Python int.

    Accepts Python and numpy integers, and floats with an integral value
    (aggregated counts often arrive as floats after decoding).

    Args:
        value: Count to validate
        name: Parameter name for error messages

    Returns:
        The count as int

    Raises:
        ValidationError: If value is not a non-negative integer
    """
    if isinstance(value, (bool, np.bool_)):
        raise ValidationError(f"{name}: expected a count, got bool {value!r}")

    if isinstance(value, Integral):
        count = int(value)
    elif isinstance(value, Real) and math.isfinite(value) and float(value).is_integer():
        count = int(value)
    else:
        raise ValidationError(
            f"{name}: expected a non-negative integer count, got {value!r}"
        )

    if count < 0:
        raise ValidationError(f"{name}: must be non-negative, got {count}")

    return count


def check_time_point(value: Any, name: str) -> float:
    """
    Validate a time point and return it as a float.

    Args:
        value: Time value to validate
        name: Parameter name for error messages

    Returns:
        The time point as float

    Raises:
        ValidationError: If value is not a finite, non-negative number
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise ValidationError(f"{name}: expected a number, got {value!r}")

    time_point = float(value)
    if not math.isfinite(time_point):
        raise ValidationError(f"{name}: must be finite, got {time_point}")
    if time_point < 0:
        raise ValidationError(f"{name}: must be non-negative, got {time_point}")

    return time_point


def check_positive(value: Any, name: str) -> float:
    """
    Verify a real parameter is finite and strictly positive.

    Args:
        value: Parameter to check
        name: Parameter name for error messages

    Returns:
        The value as float

    Raises:
        ValidationError: If value is not a finite positive number
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise ValidationError(f"{name}: expected a number, got {value!r}")

    result = float(value)
    if not math.isfinite(result) or result <= 0:
        raise ValidationError(f"{name}: must be finite and > 0, got {result}")

    return result


def check_unique_labels(labels: list[str], name: str) -> None:
    """
    Verify no label occurs more than once.

    Args:
        labels: Labels to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If any label is repeated
    """
    seen: set[str] = set()
    duplicates = []
    for label in labels:
        if label in seen and label not in duplicates:
            duplicates.append(label)
        seen.add(label)

    if duplicates:
        raise ValidationError(f"{name}: duplicate labels {duplicates}")
