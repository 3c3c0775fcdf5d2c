"""
QR decomposition implementations.

Provides plain and column-pivoted QR (LAPACK via NumPy/SciPy) plus a
least squares solve. Pivoted QR is what the regression engine uses to
find which predictor columns are linearly independent.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray
import scipy.linalg as sla

from fluxpredictor.core.exceptions import SingularMatrixError
from fluxpredictor.core.compute.tolerances import rank_tolerance


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (n x k where k = min(n, p) for reduced mode)
        R: Upper triangular matrix (k x p), columns in pivot order
        rank: Numerical rank determined from R diagonal
        pivot: Column permutation, X[:, pivot] = Q @ R (identity if unpivoted)
        tolerance: Threshold applied to |diag(R)| when computing rank
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    pivot: NDArray[np.intp]
    tolerance: float

    @property
    def independent_columns(self) -> NDArray[np.intp]:
        """Original indices of the first `rank` pivot columns, ascending."""
        return np.sort(self.pivot[:self.rank])


def _numerical_rank(shape: tuple[int, int], R: NDArray) -> tuple[int, float]:
    tol = rank_tolerance(shape, R)
    diag_R = np.abs(np.diag(R))
    if len(diag_R) == 0:
        return 0, tol
    return int(np.sum(diag_R > tol)), tol


def qr_decompose(
    X: NDArray[np.floating[Any]],
    mode: Literal['reduced', 'complete'] = 'reduced'
) -> QRResult:
    """
    QR decomposition using LAPACK (via NumPy).

    Computes X = QR where Q is orthogonal and R is upper triangular.

    Args:
        X: Matrix to decompose (n x p)
        mode: 'reduced' for economy QR (Q is n x k, R is k x p where k = min(n,p))
              'complete' for full QR (Q is n x n, R is n x p)

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode=mode)
    rank, tol = _numerical_rank(X.shape, R)
    return QRResult(
        Q=Q, R=R, rank=rank,
        pivot=np.arange(X.shape[1]),
        tolerance=tol,
    )


def qr_pivoted(
    X: NDArray[np.floating[Any]],
    n_fixed: int = 0,
) -> QRResult:
    """
    Column-pivoted QR with the first `n_fixed` columns locked in place.

    The leading block is factored without pivoting. The remaining columns
    are projected onto its orthogonal complement and factored with
    LAPACK geqp3 (largest remaining column norm first). The assembled
    factors satisfy X[:, pivot] = Q @ R with pivot[:n_fixed] == 0..n_fixed-1,
    so a regression intercept can never be displaced by a constant predictor.

    Args:
        X: Matrix to decompose (n x p), n >= n_fixed
        n_fixed: Number of leading columns excluded from pivoting

    Returns:
        QRResult whose rank uses rank_tolerance() on the assembled R
    """
    n, p = X.shape
    if not 0 <= n_fixed <= p:
        raise ValueError(f"n_fixed must be in [0, {p}], got {n_fixed}")

    if n_fixed == 0:
        Q, R, piv = sla.qr(X, mode='economic', pivoting=True)
        rank, tol = _numerical_rank(X.shape, R)
        return QRResult(Q=Q, R=R, rank=rank, pivot=piv, tolerance=tol)

    Q1, R11 = np.linalg.qr(X[:, :n_fixed], mode='reduced')
    X_free = X[:, n_fixed:]
    R12 = Q1.T @ X_free
    X_res = X_free - Q1 @ R12

    if X_free.shape[1] > 0:
        Q2, R22, piv_free = sla.qr(X_res, mode='economic', pivoting=True)
    else:
        Q2 = np.empty((n, 0))
        R22 = np.empty((0, 0))
        piv_free = np.empty(0, dtype=np.intp)

    k1 = R11.shape[0]
    k2 = R22.shape[0]
    R = np.zeros((k1 + k2, p), dtype=np.float64)
    R[:k1, :n_fixed] = R11
    R[:k1, n_fixed:] = R12[:, piv_free]
    R[k1:, n_fixed:] = R22

    Q = np.hstack([Q1, Q2])
    pivot = np.concatenate([np.arange(n_fixed), n_fixed + piv_free]).astype(np.intp)
    rank, tol = _numerical_rank(X.shape, R)

    return QRResult(Q=Q, R=R, rank=rank, pivot=pivot, tolerance=tol)


def qr_solve(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    check_rank: bool
) -> tuple[NDArray[np.floating[Any]], QRResult]:
    """
    Solve least squares via QR decomposition.

    Solves: min_β ||y - Xβ||² via QR decomposition of X.

    The solution is computed as:
        X = QR
        β = R⁻¹ Q'y

    Args:
        X: Design matrix (n x p), must have n >= p
        y: Response vector (n,)
        check_rank: If True, raise SingularMatrixError on rank-deficient X

    Returns:
        Coefficient vector β (p,) and the QRResult it came from

    Raises:
        SingularMatrixError: If X is rank-deficient and check_rank=True
    """
    n, p = X.shape
    qr_result = qr_decompose(X, mode='reduced')

    if check_rank and qr_result.rank < p:
        raise SingularMatrixError(
            f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
            f"This indicates perfect multicollinearity.",
            matrix_name='X',
            rank=qr_result.rank,
            expected_rank=p
        )

    Qty = qr_result.Q.T @ y

    # R is p x p upper triangular (for reduced QR with n >= p)
    beta = sla.solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)

    return beta, qr_result
