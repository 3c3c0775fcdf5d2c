"""
Membrane-distillation flux prediction.

Public API:
    load_dataset(path, predictors, target) -> DataSource
    FluxPredictor(config).reload() / .predict(inputs)
    FluxConfig, PredictorSpec, load_config(path)
"""

from fluxpredictor.membrane.config import (
    DEFAULT_CONFIG,
    DEFAULT_PREDICTORS,
    FluxConfig,
    PredictorSpec,
    load_config,
)
from fluxpredictor.membrane.loader import clean_frame, load_dataset
from fluxpredictor.membrane.engine import EngineState, FluxPredictor, TrainingFit

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_PREDICTORS",
    "FluxConfig",
    "PredictorSpec",
    "load_config",
    "clean_frame",
    "load_dataset",
    "EngineState",
    "FluxPredictor",
    "TrainingFit",
]
