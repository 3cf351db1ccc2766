"""
Numeric configuration constants.

Two kinds of settings live here:
- ConvergenceCriteria: tolerance and iteration cap for iterative special
  function evaluation (incomplete gamma series / continued fraction).
- ToleranceTier: precision expectations when comparing results against a
  reference implementation. Used by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConvergenceCriteria:
    """Stopping rule for an iterative numeric routine."""
    tol: float
    max_iter: int
    name: str

    def __post_init__(self):
        if not self.tol > 0:
            raise ValueError(f"tol must be > 0, got {self.tol}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")


# Regularized incomplete gamma: relative term size below a few ulps.
# The series needs O(sqrt(a)) terms past x ~ a and the continued fraction
# converges in well under 100 steps for x > a + 1, so the cap only trips on
# pathological arguments (a ~ 1e8 and beyond).
GAMMA_CONVERGENCE = ConvergenceCriteria(
    tol=3e-16,
    max_iter=10_000,
    name='gamma_default',
)

# Smallest representable magnitude used to keep Lentz's algorithm off zero.
FPMIN = 1e-300


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# CPU reference: must match the reference distribution to machine precision
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, matches scipy.stats reference',
)

# Published regression values quoted to 4-5 significant digits
REFERENCE_P_VALUE = ToleranceTier(
    rtol=0.0,
    atol=1e-4,
    name='reference_p_value',
    description='Hand-computed or published statistics',
)
