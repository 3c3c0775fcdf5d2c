"""
Numerical tolerances.

Two concerns live here:
- The rank tolerance used to decide which diagonal entries of a QR factor
  are numerically non-zero. This decides which predictors survive
  collinearity pruning, so the formula is fixed:
      tol = max(n_rows, n_cols) * eps * ||R||_F
- Tolerance tiers for comparing coefficients. The backend records which
  tier applies to each fit, and the test suite compares against it.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Well-conditioned double precision problems
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, well-conditioned',
)

# Ill-conditioned problems (cond > 1e4), e.g. raw MD operating data where
# flow rates are ~1e3 and pore sizes ~1e-1
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)


def rank_tolerance(
    shape: tuple[int, int],
    R: NDArray[np.floating[Any]],
) -> float:
    """
    Threshold below which |R[i, i]| counts as zero.

    Args:
        shape: Shape (n_rows, n_cols) of the decomposed matrix
        R: Upper triangular factor

    Returns:
        max(shape) * machine epsilon * Frobenius norm of R
    """
    if R.size == 0:
        return 0.0
    eps = np.finfo(np.float64).eps
    return float(max(shape) * eps * np.linalg.norm(R, 'fro'))


def select_tolerance(is_ill_conditioned: bool = False) -> ToleranceTier:
    """Select the comparison tier for a problem."""
    if is_ill_conditioned:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
