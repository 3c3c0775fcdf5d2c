"""
Exception hierarchy for fluxpredictor.

All exceptions inherit from FluxPredictorError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class FluxPredictorError(Exception):
    """Base exception for all fluxpredictor errors."""
    pass


class ValidationError(FluxPredictorError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class MissingColumnError(ValidationError):
    """
    One or more configured columns are absent from a dataset.

    Attributes:
        missing: Names of the absent columns, in configured order
        available: Columns the dataset actually has
    """

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        available: list[str] | None = None,
    ):
        super().__init__(message)
        self.missing = list(missing) if missing is not None else []
        self.available = list(available) if available is not None else []


class InputOutOfRangeError(ValidationError):
    """
    A prediction input lies outside its accepted (inclusive) range.

    Attributes:
        name: Predictor name
        value: The rejected value
        minimum: Lower bound of the accepted range
        maximum: Upper bound of the accepted range
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        value: float | None = None,
        minimum: float | None = None,
        maximum: float | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class ConfigError(ValidationError):
    """Configuration file is missing or structurally invalid."""
    pass


class DataFileError(FluxPredictorError):
    """
    A dataset file could not be read.

    Attributes:
        path: The offending path, as given
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class DataFileNotFoundError(DataFileError, FileNotFoundError):
    """Dataset file does not exist."""
    pass


class DataFileUnreadableError(DataFileError):
    """Dataset file exists but cannot be parsed, or has an unknown format."""
    pass


class NumericalError(FluxPredictorError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a matrix operation requires invertibility but the matrix
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically min(n, p))
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NoIndependentPredictorsError(NumericalError):
    """
    Every predictor column is linearly dependent on the intercept.

    Raised by fit() when rank detection leaves no predictor to regress on
    (e.g. all predictor columns are constant).

    Attributes:
        dropped: Names of all predictors that were rejected
        rank: Numerical rank of the full design matrix (intercept included)
        tolerance: The rank tolerance that was applied
    """

    def __init__(
        self,
        message: str,
        dropped: list[str] | None = None,
        rank: int | None = None,
        tolerance: float | None = None,
    ):
        super().__init__(message)
        self.dropped = list(dropped) if dropped is not None else []
        self.rank = rank
        self.tolerance = tolerance


class ModelNotTrainedError(FluxPredictorError):
    """
    A trained model is required but none is available.

    Raised when predicting (or asking for training diagnostics) before a
    successful fit, or after a failed fit cleared the model.
    """
    pass


class DependentPredictorsWarning(UserWarning):
    """
    Some predictors were dropped as linearly dependent.

    Non-fatal: the fit proceeds with the remaining predictors.
    """
    pass
