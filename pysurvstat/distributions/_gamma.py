"""
Regularized incomplete gamma functions.

    P(a, x) = γ(a, x) / Γ(a)        (lower)
    Q(a, x) = Γ(a, x) / Γ(a) = 1 - P(a, x)   (upper)

Evaluation strategy (Numerical Recipes §6.2):
    - x < a + 1: power series for P, which converges fast there
    - otherwise: continued fraction for Q via the modified Lentz method

Both branches stop on a relative tolerance or an iteration cap taken from
a ConvergenceCriteria. Hitting the cap is not an error: the partial value
is clamped to [0, 1] and returned together with converged=False, so that
callers can decide whether to warn.

References:
    Press, W. H. et al. (2007). Numerical Recipes, 3rd ed., §6.2.
    Lentz, W. J. (1976). Generating Bessel functions in Mie scattering
        calculations using continued fractions. Applied Optics 15(3).
"""

from __future__ import annotations

import math

from scipy.special import gammaln

from pysurvstat.core.compute.tolerances import ConvergenceCriteria, FPMIN


def gamma_pq(
    a: float,
    x: float,
    criteria: ConvergenceCriteria,
) -> tuple[float, float, bool]:
    """Evaluate P(a, x) and Q(a, x) together.

    Parameters
    ----------
    a : float
        Shape parameter, a > 0 (validated by the caller).
    x : float
        Evaluation point, x >= 0 or +inf (validated by the caller).
    criteria : ConvergenceCriteria
        Tolerance and iteration cap.

    Returns
    -------
    (p, q, converged)
        p + q == 1 up to rounding; both in [0, 1].
    """
    if x <= 0.0:
        return 0.0, 1.0, True
    if math.isinf(x):
        return 1.0, 0.0, True

    if x < a + 1.0:
        p, converged = _series_p(a, x, criteria)
        p = _clamp(p)
        return p, 1.0 - p, converged

    q, converged = _continued_fraction_q(a, x, criteria)
    q = _clamp(q)
    return 1.0 - q, q, converged


def _log_prefactor(a: float, x: float) -> float:
    """log(x^a e^-x / Γ(a))."""
    return a * math.log(x) - x - float(gammaln(a))


def _series_p(a: float, x: float, criteria: ConvergenceCriteria) -> tuple[float, bool]:
    """P(a, x) = x^a e^-x / Γ(a) * Σ x^n / (a (a+1) ... (a+n))."""
    ap = a
    term = 1.0 / a
    total = term
    converged = False

    for _ in range(criteria.max_iter):
        ap += 1.0
        term *= x / ap
        total += term
        if abs(term) < abs(total) * criteria.tol:
            converged = True
            break

    return total * math.exp(_log_prefactor(a, x)), converged


def _continued_fraction_q(
    a: float, x: float, criteria: ConvergenceCriteria,
) -> tuple[float, bool]:
    """Q(a, x) by the Legendre continued fraction, modified Lentz."""
    b = x + 1.0 - a
    c = 1.0 / FPMIN
    d = 1.0 / b
    h = d
    converged = False

    for i in range(1, criteria.max_iter + 1):
        an = -i * (i - a)
        b += 2.0
        d = an * d + b
        if abs(d) < FPMIN:
            d = FPMIN
        c = b + an / c
        if abs(c) < FPMIN:
            c = FPMIN
        d = 1.0 / d
        delta = d * c
        h *= delta
        if abs(delta - 1.0) < criteria.tol:
            converged = True
            break

    return math.exp(_log_prefactor(a, x)) * h, converged


def _clamp(value: float) -> float:
    # A truncated series or fraction may overshoot, or be NaN on overflow
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)
