"""
Regression Design.

Design wraps a DataSource and extracts X (design matrix) and y (response).
It knows it's building a regression; DataSource doesn't.

The design matrix always carries a leading intercept column of ones,
followed by the named predictor columns in the order requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray

from fluxpredictor.core.datasource import DataSource
from fluxpredictor.core.validation import (
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_min_samples,
    check_unique_names,
)

INTERCEPT = '(Intercept)'


@dataclass(frozen=True)
class Design:
    """
    Regression design matrix specification.

    Immutable after construction.

    Construction:
        Design.from_datasource(ds, x=['FeedTemp', 'HotFlow'], y='Flux')
        Design.from_arrays(X, y)                      # predictors named x1..xp
        Design.from_arrays(X, y, names=['a', 'b'])
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _names: tuple[str, ...]
    _n: int
    _p: int

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        *,
        x: str | Sequence[str],
        y: str,
    ) -> Design:
        """
        Build Design from DataSource.

        Args:
            source: The DataSource
            x: Predictor column name(s), in design order
            y: Response column name

        Returns:
            Design ready for regression
        """
        names = [x] if isinstance(x, str) else list(x)
        y_arr = np.asarray(source[y], dtype=np.float64)
        X_arr = _get_columns(source, names, n_rows=y_arr.shape[0])
        return cls._build(X_arr, y_arr, names=names)

    @classmethod
    def from_arrays(
        cls,
        X: NDArray,
        y: NDArray,
        names: Sequence[str] | None = None,
    ) -> Design:
        """Build Design directly from a predictor matrix (no intercept column) and response."""
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if names is None:
            names = [f"x{i + 1}" for i in range(X.shape[1] if X.ndim == 2 else 0)]
        return cls._build(X, y, names=list(names))

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        names: list[str],
    ) -> Design:
        """Internal builder with validation. Prepends the intercept column."""
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))
        check_min_samples(y, 1, 'y')
        check_unique_names(names, 'predictors')
        if len(names) != X.shape[1]:
            raise ValueError(
                f"Got {len(names)} predictor names for {X.shape[1]} columns"
            )

        n = X.shape[0]
        X_full = np.column_stack([np.ones(n, dtype=np.float64), X])

        return cls(
            _X=X_full, _y=y, _names=tuple(names),
            _n=n, _p=X_full.shape[1],
        )

    def select(self, indices: Sequence[int]) -> Design:
        """
        Keep the intercept and the predictors at `indices`.

        Args:
            indices: Positions into self.names (not into X's columns)
        """
        idx = list(indices)
        cols = [0] + [i + 1 for i in idx]
        return Design(
            _X=self._X[:, cols],
            _y=self._y,
            _names=tuple(self._names[i] for i in idx),
            _n=self._n,
            _p=len(cols),
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p), intercept column first."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def names(self) -> tuple[str, ...]:
        """Predictor names, excluding the intercept."""
        return self._names

    @property
    def column_names(self) -> tuple[str, ...]:
        """Names of every column of X, intercept included."""
        return (INTERCEPT,) + self._names

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of design columns (intercept included)."""
        return self._p

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Compute X'X (for standard errors)."""
        return self._X.T @ self._X


def _get_columns(source: DataSource, names: list[str], n_rows: int) -> NDArray:
    """Stack named 1-D columns from DataSource into an (n x len(names)) matrix."""
    if not names:
        return np.empty((n_rows, 0), dtype=np.float64)
    arrays = []
    for name in names:
        arr = np.asarray(source[name], dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        arrays.append(arr)
    return np.hstack(arrays)
