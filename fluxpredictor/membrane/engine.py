"""
Stateful flux prediction engine.

FluxPredictor owns the single current model and the two-state lifecycle
behind an interactive front end:

    UNTRAINED --fit ok--> TRAINED --fit ok--> TRAINED
        ^                    |
        +------fit fails-----+

A failed load never touches the model; a failed fit clears it.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import numpy as np
from numpy.typing import NDArray

from fluxpredictor.core.datasource import DataSource
from fluxpredictor.core.exceptions import (
    FluxPredictorError,
    ModelNotTrainedError,
    ValidationError,
)
from fluxpredictor.core.compute.timing import timed
from fluxpredictor.membrane.config import DEFAULT_CONFIG, FluxConfig
from fluxpredictor.membrane.loader import load_dataset
from fluxpredictor.regression import LinearSolution, fit

logger = logging.getLogger(__name__)

UNTRAINED_TEXT = 'Model not trained yet'
PREDICTION_FORMAT = 'Predicted Flux: {:.2f}'


class EngineState(enum.Enum):
    UNTRAINED = 'untrained'
    TRAINED = 'trained'


@dataclass(frozen=True)
class TrainingFit:
    """Measured vs predicted flux on the training rows."""
    actual: NDArray[np.floating[Any]]
    predicted: NDArray[np.floating[Any]]

    @property
    def limits(self) -> tuple[float, float]:
        """Span of the identity line: min and max over both series."""
        both = np.concatenate([self.actual, self.predicted])
        return float(both.min()), float(both.max())


class FluxPredictor:
    """
    Load MD data, fit the flux model, and predict from operating parameters.

    Args:
        config: Predictor names, ranges, target and data file
    """

    def __init__(self, config: FluxConfig = DEFAULT_CONFIG):
        self.config = config
        self._model: LinearSolution | None = None
        self._dataset: DataSource | None = None

    @property
    def state(self) -> EngineState:
        return EngineState.TRAINED if self._model is not None else EngineState.UNTRAINED

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    @property
    def model(self) -> LinearSolution:
        """The current fitted model."""
        if self._model is None:
            raise ModelNotTrainedError(UNTRAINED_TEXT)
        return self._model

    @property
    def dataset(self) -> DataSource | None:
        """Data the current model was fitted on, if any."""
        return self._dataset

    def reload(self, path: str | Path | None = None) -> LinearSolution:
        """
        Re-read the data file and retrain.

        Loader errors (missing file, unreadable file, missing column)
        propagate and leave the current model untouched.

        Args:
            path: File to load instead of config.data_file
        """
        path = Path(path) if path is not None else self.config.data_file
        with timed('load') as timer:
            dataset = load_dataset(
                path,
                self.config.names,
                self.config.target,
                sheet=self.config.sheet,
            )
        logger.info(f"Loaded {path} in {timer.result()['total_seconds']:.3f}s")
        return self.fit(dataset)

    def fit(self, dataset: DataSource) -> LinearSolution:
        """
        Fit a new model, replacing the current one on success.

        Any failure clears the current model and leaves the engine UNTRAINED.

        Raises:
            NoIndependentPredictorsError: If every predictor is dependent
            ValidationError: If the dataset is empty or otherwise unusable
        """
        try:
            model = fit(
                dataset,
                predictors=self.config.names,
                target=self.config.target,
            )
        except FluxPredictorError as e:
            self.clear()
            logger.error(f"Fit failed, model cleared: {e}")
            raise

        self._model = model
        self._dataset = dataset
        logger.info(
            f"Trained on {model.n_observations} rows: retained={list(model.retained)}, "
            f"R²={model.r_squared:.4f}"
        )
        return model

    def clear(self) -> None:
        """Drop the current model."""
        self._model = None
        self._dataset = None

    def collect_inputs(self, values: Mapping[str, float | None] | None = None) -> dict[str, float]:
        """
        Full input row as a front end would submit it.

        Starts from each predictor's default, overlays `values`, and maps
        blank entries (None or NaN) to 0.0. Unknown names are rejected.
        """
        values = dict(values or {})
        unknown = sorted(set(values) - set(self.config.names))
        if unknown:
            raise ValidationError(
                f"Unknown predictor(s) {unknown}. Available: {list(self.config.names)}"
            )

        inputs = self.config.defaults
        for name, value in values.items():
            if value is None or math.isnan(float(value)):
                inputs[name] = 0.0
            else:
                inputs[name] = float(value)
        return inputs

    def predict(self, inputs: Mapping[str, float]) -> float:
        """
        Predict flux for one set of operating parameters.

        Every supplied configured predictor is range-checked; values of
        dropped predictors are checked and then ignored.

        Raises:
            ModelNotTrainedError: If no model is trained
            InputOutOfRangeError: If any value is outside its range
            ValidationError: If a retained predictor is missing or a name is unknown
        """
        model = self.model

        unknown = sorted(set(inputs) - set(self.config.names))
        if unknown:
            raise ValidationError(
                f"Unknown predictor(s) {unknown}. Available: {list(self.config.names)}"
            )
        checked = {
            name: self.config.spec(name).check(value)
            for name, value in inputs.items()
        }
        missing = [name for name in model.retained if name not in checked]
        if missing:
            raise ValidationError(f"Missing value(s) for retained predictor(s) {missing}")

        return model.predict({name: checked[name] for name in model.retained})

    def status_text(self, inputs: Mapping[str, float | None] | None = None) -> str:
        """
        Label text for the current prediction.

        Untrained engines report a placeholder instead of raising.
        """
        if self._model is None:
            return UNTRAINED_TEXT
        return PREDICTION_FORMAT.format(self.predict(self.collect_inputs(inputs)))

    def training_fit(self) -> TrainingFit:
        """Measured vs model-predicted flux over the training rows."""
        model = self.model
        return TrainingFit(
            actual=np.asarray(self._dataset[self.config.target], dtype=np.float64),
            predicted=model.fitted_values,
        )
