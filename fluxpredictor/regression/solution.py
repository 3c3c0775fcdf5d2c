"""
Regression solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, Mapping, TYPE_CHECKING
import math

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from fluxpredictor.core.result import Result
from fluxpredictor.core.exceptions import ValidationError

if TYPE_CHECKING:
    from fluxpredictor.regression.design import Design


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear regression.

    This is the immutable data computed by backends. Coefficients are in
    design column order: intercept first, then retained predictors.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int


@dataclass
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and provides convenient accessors for the
    fitted model: named coefficients, point prediction, and diagnostics.
    The design it holds contains only the retained predictors.
    """
    _result: Result[LinearParams]
    _design: 'Design'

    # Cached computations
    _standard_errors: NDArray[np.floating[Any]] | None = None
    _t_statistics: NDArray[np.floating[Any]] | None = None

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def intercept(self) -> float:
        return float(self.coefficients[0])

    @property
    def named_coefficients(self) -> dict[str, float]:
        """Retained predictor name -> coefficient (intercept excluded)."""
        return {
            name: float(coef)
            for name, coef in zip(self._design.names, self.coefficients[1:])
        }

    @property
    def retained(self) -> tuple[str, ...]:
        """Predictors kept in the model, in their original order."""
        return self._design.names

    @property
    def dropped(self) -> tuple[str, ...]:
        """Predictors rejected as linearly dependent."""
        return tuple(self._result.info.get('dropped', ()))

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def mse(self) -> float:
        """Training mean squared error, RSS / n."""
        return self.rss / self._design.n

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        p = self._result.params.rank
        if n - p <= 0 or self.tss == 0:
            return self.r_squared
        return 1.0 - (1.0 - self.r_squared) * (n - 1) / (n - p)

    @property
    def residual_std_error(self) -> float:
        df = self._result.params.df_residual
        if df <= 0:
            return 0.0
        return float(np.sqrt(self.rss / df))

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        Computed as SE(β) = sqrt(diag(σ² (X'X)⁻¹)). NaN when there are
        no residual degrees of freedom.
        """
        if self._standard_errors is not None:
            return self._standard_errors

        df = self._result.params.df_residual
        p = len(self.coefficients)

        if df <= 0:
            self._standard_errors = np.full(p, np.nan, dtype=np.float64)
            return self._standard_errors

        sigma_sq = self.rss / df
        try:
            XtX_inv = np.linalg.inv(self._design.XtX())
            self._standard_errors = np.sqrt(sigma_sq * np.diag(XtX_inv))
        except np.linalg.LinAlgError:
            # Only reachable for designs that bypassed rank pruning
            self._standard_errors = np.full(p, np.nan, dtype=np.float64)

        return self._standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        """t-statistics for coefficients."""
        if self._t_statistics is not None:
            return self._t_statistics

        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / se
            t = np.where(np.isfinite(t), t, np.nan)
        self._t_statistics = t
        return self._t_statistics

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values, Pr(>|t|) on df_residual degrees of freedom."""
        df = self._result.params.df_residual
        if df <= 0:
            return np.full(len(self.coefficients), np.nan, dtype=np.float64)
        return 2.0 * sp_stats.t.sf(np.abs(self.t_statistics), df)

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def provenance(self) -> dict[str, Any]:
        return self._result.provenance

    def predict(self, row: Mapping[str, float]) -> float:
        """
        Point prediction for one observation.

        Args:
            row: Value for every retained predictor, and nothing else

        Returns:
            intercept + Σ coefficient_i * value_i

        Raises:
            ValidationError: If names don't match the retained predictors
                or a value is not finite
        """
        expected = set(self.retained)
        given = set(row)
        missing = [name for name in self.retained if name not in given]
        unknown = sorted(given - expected)
        if missing or unknown:
            raise ValidationError(
                f"predict: row must supply exactly {list(self.retained)}; "
                f"missing={missing}, unknown={unknown}"
            )

        total = self.intercept
        for name, coef in self.named_coefficients.items():
            value = float(row[name])
            if not math.isfinite(value):
                raise ValidationError(f"predict: {name}={value} is not finite")
            total += coef * value
        return total

    def summary(self) -> str:
        """Generate R-style summary output."""
        lines = [
            "Linear Regression Results",
            "=" * 72,
            f"Observations: {self._design.n}",
            f"Predictors: {len(self.retained)} retained, {len(self.dropped)} dropped",
            f"Rank: {self.rank}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            f"Training MSE: {self.mse:.6f}",
            "",
            "Coefficients:",
            "-" * 72,
            f"{'Term':<16} {'Estimate':>14} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 72,
        ]

        for name, coef, se, t, pv in zip(
            self._design.column_names, self.coefficients,
            self.standard_errors, self.t_statistics, self.p_values,
        ):
            se_str = f"{se:12.6f}" if not np.isnan(se) else "          NA"
            t_str = f"{t:10.3f}" if not np.isnan(t) else "        NA"
            p_str = f"{pv:12.4g}" if not np.isnan(pv) else "          NA"
            lines.append(f"{name:<16} {coef:14.6f} {se_str} {t_str} {p_str}")

        for name in self.dropped:
            lines.append(f"{name:<16} {'(dropped)':>14}")

        lines.append("-" * 72)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )
