"""
Predictor configuration for membrane-distillation flux models.

The six operating parameters, their display labels, defaults and accepted
input ranges are fixed here as frozen dataclasses. A YAML file can
override any of them.

Usage:
    from fluxpredictor.membrane.config import DEFAULT_CONFIG, load_config

    config = load_config("flux.yaml")
    config.names   # ('FeedTemp', 'PermeateTemp', ...)
    config.spec('HotFlow').check(600.0)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fluxpredictor.core.exceptions import ConfigError
from fluxpredictor.core.validation import check_in_range

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = 'MDData.xlsx'
DEFAULT_TARGET = 'Flux'


@dataclass(frozen=True)
class PredictorSpec:
    """One operating parameter: name, display text, default and inclusive range."""
    name: str
    label: str
    unit: str
    default: float
    minimum: float = 0.0
    maximum: float = math.inf

    @property
    def display_label(self) -> str:
        return f"{self.label} ({self.unit})" if self.unit else self.label

    def contains(self, value: float) -> bool:
        return not math.isnan(value) and self.minimum <= value <= self.maximum

    def check(self, value: float) -> float:
        """
        Return value as float if within [minimum, maximum].

        Raises:
            InputOutOfRangeError: Otherwise
        """
        value = float(value)
        check_in_range(value, self.minimum, self.maximum, self.name)
        return value


DEFAULT_PREDICTORS: tuple[PredictorSpec, ...] = (
    PredictorSpec('FeedTemp', 'Feed temperature', '°C', 60.0),
    PredictorSpec('PermeateTemp', 'Cold temperature', '°C', 20.0),
    PredictorSpec('HotFlow', 'Hot flow rate', 'mL/min', 600.0),
    PredictorSpec('ColdFlow', 'Cold flow rate', 'mL/min', 600.0),
    PredictorSpec('PoreSize', 'Pore size', 'µm', 0.22),
    PredictorSpec('Thickness', 'Thickness', 'µm', 200.0),
)


@dataclass(frozen=True)
class FluxConfig:
    """
    Everything the engine needs to load data and validate inputs.

    Attributes:
        predictors: Candidate predictor columns, in design order
        target: Response column name
        data_file: Spreadsheet to (re)load
        sheet: Sheet index or name within the spreadsheet
    """
    predictors: tuple[PredictorSpec, ...] = DEFAULT_PREDICTORS
    target: str = DEFAULT_TARGET
    data_file: Path = field(default_factory=lambda: Path(DEFAULT_DATA_FILE))
    sheet: int | str = 0

    def __post_init__(self):
        if not self.predictors:
            raise ConfigError("At least one predictor must be configured")
        names = [p.name for p in self.predictors]
        if len(set(names)) != len(names):
            raise ConfigError(f"Duplicate predictor names: {names}")
        if self.target in names:
            raise ConfigError(f"Target {self.target!r} is also listed as a predictor")
        for p in self.predictors:
            if p.minimum > p.maximum:
                raise ConfigError(
                    f"{p.name}: minimum {p.minimum} exceeds maximum {p.maximum}"
                )
            if not p.contains(p.default):
                raise ConfigError(
                    f"{p.name}: default {p.default} outside [{p.minimum}, {p.maximum}]"
                )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.predictors)

    @property
    def defaults(self) -> dict[str, float]:
        return {p.name: p.default for p in self.predictors}

    def spec(self, name: str) -> PredictorSpec:
        for p in self.predictors:
            if p.name == name:
                return p
        raise KeyError(f"No predictor named {name!r}. Available: {list(self.names)}")


DEFAULT_CONFIG = FluxConfig()


def load_config(config_path: str | Path) -> FluxConfig:
    """
    Load configuration from YAML file.

    Recognized keys (all optional): data_file, sheet, target, predictors.
    A relative data_file is resolved against the config file's directory.
    A missing or null predictor maximum means unbounded.

    Args:
        config_path: Path to the configuration file

    Returns:
        FluxConfig

    Raises:
        ConfigError: If the file doesn't exist, is malformed, or describes
            an invalid configuration
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed configuration file {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path}: expected a mapping at top level")

    kwargs: dict[str, Any] = {}
    if 'data_file' in raw:
        data_file = Path(raw['data_file'])
        if not data_file.is_absolute():
            data_file = config_path.parent / data_file
        kwargs['data_file'] = data_file
    if 'sheet' in raw:
        kwargs['sheet'] = raw['sheet']
    if 'target' in raw:
        kwargs['target'] = str(raw['target'])
    if 'predictors' in raw:
        kwargs['predictors'] = tuple(
            _parse_predictor(entry, config_path) for entry in raw['predictors'] or []
        )

    config = FluxConfig(**kwargs)
    logger.info(f"Loaded configuration from {config_path}")
    return config


def _parse_predictor(entry: Any, source: Path) -> PredictorSpec:
    if not isinstance(entry, dict) or 'name' not in entry:
        raise ConfigError(f"{source}: each predictor needs at least a 'name'")
    name = str(entry['name'])
    try:
        maximum = entry.get('maximum')
        return PredictorSpec(
            name=name,
            label=str(entry.get('label', name)),
            unit=str(entry.get('unit', '')),
            default=float(entry.get('default', 0.0)),
            minimum=float(entry.get('minimum', 0.0)),
            maximum=math.inf if maximum is None else float(maximum),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{source}: invalid values for predictor {name!r}: {e}") from e
