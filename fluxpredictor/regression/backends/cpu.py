"""
CPU backend for ordinary least squares.

Receives a design that collinearity pruning has already reduced to full
column rank, so the unpivoted QR solve never meets a zero pivot.
"""

from typing import Any
import numpy as np

from fluxpredictor.core.result import Result
from fluxpredictor.core.compute.timing import Timer
from fluxpredictor.core.compute.tolerances import select_tolerance
from fluxpredictor.core.compute.linalg.qr import QRResult, qr_solve
from fluxpredictor.regression.design import Design
from fluxpredictor.regression.solution import LinearParams

# Above this estimate, coefficient comparisons use the looser tolerance tier
ILL_CONDITIONED_THRESHOLD = 1e4


def _condition_estimate(qr_result: QRResult) -> float:
    """max|r_ii| / min|r_ii|, a cheap lower bound on cond(X)."""
    diag = np.abs(np.diag(qr_result.R))
    if diag.size == 0 or diag.min() == 0.0:
        return float('inf')
    return float(diag.max() / diag.min())


class CPUQRBackend:
    """QR least squares on a full-rank Design, producing Result[LinearParams]."""

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(
        self,
        design: Design,
        *,
        info: dict[str, Any] | None = None,
        warnings: tuple[str, ...] = (),
    ) -> Result[LinearParams]:
        """
        Fit β = R⁻¹ Q'y and derive residuals and sums of squares.

        Args:
            design: Full-rank regression design
            info: Upstream metadata (rank pruning details) merged into Result.info
            warnings: Non-fatal messages raised upstream, carried on the Result

        Raises:
            SingularMatrixError: If X is rank-deficient after all
        """
        timer = Timer().start()
        X, y = design.X, design.y

        with timer.section('solve'):
            coefficients, qr_result = qr_solve(X, y, check_rank=True)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            centered = y - y.mean()
            tss = float(centered @ centered)
            condition = _condition_estimate(qr_result)

        timer.stop()

        tier = select_tolerance(is_ill_conditioned=condition > ILL_CONDITIONED_THRESHOLD)
        result_info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'condition_estimate': condition,
            'tolerance_tier': tier.name,
            **(info or {}),
        }

        return Result(
            params=LinearParams(
                coefficients=coefficients,
                residuals=residuals,
                fitted_values=fitted_values,
                rss=rss,
                tss=tss,
                rank=qr_result.rank,
                df_residual=design.n - qr_result.rank,
            ),
            info=result_info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings),
        )
