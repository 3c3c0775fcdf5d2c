"""
Core infrastructure for fluxpredictor.

This module provides shared abstractions, utilities, and compute infrastructure
used by the regression engine and the membrane domain layer.

Key components:
    datasource: DataSource container and file readers
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra primitives
"""

from fluxpredictor.core.datasource import DataSource
from fluxpredictor.core.result import Result
from fluxpredictor.core.exceptions import (
    FluxPredictorError,
    ValidationError,
    DimensionError,
    MissingColumnError,
    InputOutOfRangeError,
    ConfigError,
    DataFileError,
    DataFileNotFoundError,
    DataFileUnreadableError,
    NumericalError,
    SingularMatrixError,
    NoIndependentPredictorsError,
    ModelNotTrainedError,
    DependentPredictorsWarning,
)

__all__ = [
    # Data
    "DataSource",
    # Result
    "Result",
    # Exceptions
    "FluxPredictorError",
    "ValidationError",
    "DimensionError",
    "MissingColumnError",
    "InputOutOfRangeError",
    "ConfigError",
    "DataFileError",
    "DataFileNotFoundError",
    "DataFileUnreadableError",
    "NumericalError",
    "SingularMatrixError",
    "NoIndependentPredictorsError",
    "ModelNotTrainedError",
    "DependentPredictorsWarning",
]
