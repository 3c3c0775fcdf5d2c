"""
Linear regression with collinearity pruning.

Public API:
    fit(data, ...) -> LinearSolution

The fit() function is the only entry point. It handles:
    - Input validation
    - Design construction (intercept + named predictors)
    - Dropping linearly dependent predictors (pivoted QR rank)
    - Backend selection
    - Result wrapping

Example:
    >>> from fluxpredictor.regression import fit
    >>> result = fit(ds, predictors=['FeedTemp', 'HotFlow'], target='Flux')
    >>> print(result.named_coefficients)
    >>> print(result.summary())
"""

from fluxpredictor.regression.design import Design, INTERCEPT
from fluxpredictor.regression.solution import LinearSolution, LinearParams
from fluxpredictor.regression.solvers import fit

__all__ = [
    "fit",
    "Design",
    "INTERCEPT",
    "LinearSolution",
    "LinearParams",
]
