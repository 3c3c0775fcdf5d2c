"""
Solver dispatch for regression.

This module provides the fit() function (public API), collinearity
pruning, and backend selection.
"""

import logging
import warnings
from typing import Literal, Sequence

from numpy.typing import ArrayLike

from fluxpredictor.core.datasource import DataSource
from fluxpredictor.core.exceptions import (
    DependentPredictorsWarning,
    NoIndependentPredictorsError,
)
from fluxpredictor.core.validation import check_array
from fluxpredictor.core.compute.linalg.qr import qr_pivoted
from fluxpredictor.regression.design import Design
from fluxpredictor.regression.solution import LinearSolution
from fluxpredictor.regression.backends.cpu import CPUQRBackend

logger = logging.getLogger(__name__)

BackendChoice = Literal['auto', 'cpu', 'cpu_qr']


def fit(
    data: DataSource | Design | ArrayLike,
    y: ArrayLike | None = None,
    *,
    predictors: Sequence[str] | None = None,
    target: str | None = None,
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit an intercept-including linear regression model.

    Solves the ordinary least squares problem
        min_β ||y - Xβ||²
    where X = [1, predictors...], after removing predictor columns that are
    linearly dependent on the intercept and on each other.

    Args:
        data: A DataSource (requires `predictors` and `target`), a prebuilt
            Design, or a predictor matrix (n x k) without an intercept column
        y: Response vector, required when `data` is a matrix
        predictors: Predictor column names, in design order. For a matrix,
            optional labels for its columns (default x1..xk)
        target: Response column name (DataSource only)
        backend: Computational backend ('auto', 'cpu' or 'cpu_qr')

    Returns:
        LinearSolution over the retained predictors

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions
        NoIndependentPredictorsError: If no predictor survives rank detection
        ValueError: If the backend is unknown or required arguments are missing

    Warns:
        DependentPredictorsWarning: If some predictors were dropped

    Example:
        >>> from fluxpredictor.regression import fit
        >>> result = fit(ds, predictors=['FeedTemp', 'HotFlow'], target='Flux')
        >>> result.predict({'FeedTemp': 60.0, 'HotFlow': 600.0})
    """
    full = _build_design(data, y, predictors=predictors, target=target)
    backend_impl = _get_backend(backend)

    retained_idx, prune_info = _select_independent(full)
    kept = set(retained_idx)
    dropped = [name for i, name in enumerate(full.names) if i not in kept]

    if not retained_idx:
        logger.error(f"No independent predictors among {list(full.names)}")
        raise NoIndependentPredictorsError(
            f"no independent predictors: all of {list(full.names)} are linearly "
            f"dependent on the intercept (rank={prune_info['design_rank']}, "
            f"tol={prune_info['rank_tolerance']:.3e})",
            dropped=dropped,
            rank=prune_info['design_rank'],
            tolerance=prune_info['rank_tolerance'],
        )

    messages: tuple[str, ...] = ()
    if dropped:
        message = (
            f"Dropped linearly dependent predictor(s) {dropped}; "
            f"fitting with {[full.names[i] for i in retained_idx]}"
        )
        warnings.warn(message, DependentPredictorsWarning, stacklevel=2)
        logger.warning(message)
        messages = (message,)

    design = full if not dropped else full.select(retained_idx)
    prune_info['retained'] = list(design.names)
    prune_info['dropped'] = dropped

    result = backend_impl.solve(design, info=prune_info, warnings=messages)
    logger.debug(
        f"Fitted {len(design.names)} predictor(s) on {design.n} rows via {backend_impl.name}"
    )
    return LinearSolution(_result=result, _design=design)


def _build_design(
    data: DataSource | Design | ArrayLike,
    y: ArrayLike | None,
    *,
    predictors: Sequence[str] | None,
    target: str | None,
) -> Design:
    """Coerce fit() inputs into a full (unpruned) Design."""
    if isinstance(data, Design):
        return data

    if isinstance(data, DataSource):
        if predictors is None or target is None:
            raise ValueError("predictors and target are required with a DataSource")
        return Design.from_datasource(data, x=list(predictors), y=target)

    # This is the boundary - validate here, trust everywhere else
    if y is None:
        raise ValueError("y required when data is an array")
    X_arr = check_array(data, 'X')
    y_arr = check_array(y, 'y')
    return Design.from_arrays(X_arr, y_arr, names=predictors)


def _select_independent(design: Design) -> tuple[list[int], dict]:
    """
    Find predictors that are linearly independent of the intercept and each other.

    Pivoted QR of the full design with the intercept locked first; the
    predictor pivots within the numerical rank survive.

    Returns:
        (ascending predictor indices into design.names, diagnostic info)
    """
    qr_result = qr_pivoted(design.X, n_fixed=1)
    kept_columns = qr_result.independent_columns
    retained = [int(c) - 1 for c in kept_columns if c != 0]

    info = {
        'design_rank': qr_result.rank,
        'rank_tolerance': qr_result.tolerance,
        'pivot': [design.column_names[int(c)] for c in qr_result.pivot],
    }
    return retained, info


def _get_backend(choice: BackendChoice):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend()
    raise ValueError(f"Unknown backend: {choice!r}")
