"""
Input validation for fluxpredictor.

Validators fail fast and loud: each checks one property, raises with the
offending values in the message, and never repairs its input. Every
message starts with the parameter name so errors from deep in a fit can
be traced back to the column or argument that caused them.

Array checks guard the regression boundary (fit(), Design). Name and
range checks guard the loader and the prediction engine.
"""

import math
from collections import Counter
from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from fluxpredictor.core.exceptions import (
    ValidationError,
    DimensionError,
    InputOutOfRangeError,
)


# === Arrays ===

def check_array(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert an array-like to a floating numpy array.

    Integer and boolean input is promoted to float64. Object, string and
    other non-numeric dtypes are rejected rather than coerced.

    Raises:
        ValidationError: If the input is not numeric
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )
    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)
    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Raises:
        ValidationError: If array holds NaN or Inf (counts in the message)
    """
    finite = np.isfinite(array)
    if finite.all():
        return
    n_nan = int(np.isnan(array).sum())
    n_inf = int(array.size - finite.sum()) - n_nan
    raise ValidationError(
        f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
    )


def _check_ndim(array: NDArray, ndim: int, name: str) -> None:
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Raises DimensionError unless array is a vector."""
    _check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Raises DimensionError unless array is a matrix."""
    _check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...],
) -> None:
    """
    Verify all arrays share the same number of rows.

    Raises:
        ValueError: If `names` doesn't match the number of arrays
        DimensionError: If row counts differ
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )
    lengths = {label: arr.shape[0] for label, arr in zip(names, arrays)}
    if len(set(lengths.values())) > 1:
        details = ", ".join(f"{label}={n}" for label, n in lengths.items())
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """Raises ValidationError if array has fewer than min_samples rows."""
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


# === Names and scalars ===

def check_unique_names(names: Sequence[str], name: str) -> None:
    """
    Raises:
        ValidationError: If a column name is repeated (each listed once)
    """
    duplicates = [item for item, count in Counter(names).items() if count > 1]
    if duplicates:
        raise ValidationError(f"{name}: duplicate names {duplicates}")


def check_in_range(value: float, minimum: float, maximum: float, name: str) -> None:
    """
    Verify minimum <= value <= maximum. NaN is never in range.

    Raises:
        InputOutOfRangeError: Carrying name, value and both bounds
    """
    if math.isnan(value) or not minimum <= value <= maximum:
        raise InputOutOfRangeError(
            f"{name}: value {value} outside accepted range [{minimum}, {maximum}]",
            name=name,
            value=value,
            minimum=minimum,
            maximum=maximum,
        )
