"""
Configuration loading for SENSORVOTE.

Report settings live in the ReportConfig dataclasses; this module reads
them from a JSON file and checks their values.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Dict, Type, TypeVar

from sensorvote.core.exceptions import ConfigurationError
from sensorvote.core.types import DataConfig, ModelConfig, ReportConfig
from sensorvote.ensemble.weighted_voter import MAX_TIE_TOLERANCE

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _build(cls: Type[T], values: Dict, prefix: str) -> T:
    """Instantiate a config dataclass, rejecting unknown keys"""
    if not isinstance(values, dict):
        raise ConfigurationError(prefix, "Expected a JSON object")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"{prefix}.{unknown[0]}", "Unknown setting")

    return cls(**values)


def load_config(path: str) -> ReportConfig:
    """
    Load a report configuration from a JSON file.

    Missing keys keep their defaults. Nested ``data`` and ``model`` objects
    map onto DataConfig and ModelConfig.

    Args:
        path: Path to the JSON file

    Returns:
        Validated ReportConfig

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    config_path = Path(path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(str(config_path), f"Cannot read config: {e}")

    if not isinstance(raw, dict):
        raise ConfigurationError(str(config_path), "Expected a JSON object")

    raw = dict(raw)
    data = _build(DataConfig, raw.pop("data", {}), "data")
    model = _build(ModelConfig, raw.pop("model", {}), "model")
    config = _build(ReportConfig, raw, "report")
    config.data = data
    config.model = model

    try:
        validate_config(config)
    except TypeError as e:
        raise ConfigurationError(str(config_path), f"Setting has the wrong type: {e}")
    logger.debug(f"Loaded configuration from {config_path}")
    return config


def validate_config(config: ReportConfig) -> None:
    """
    Check configuration values.

    Raises:
        ConfigurationError: On the first invalid value found
    """
    data = config.data
    model = config.model

    if not 0.0 < data.train_fraction < 1.0:
        raise ConfigurationError("data.train_fraction", "Must be between 0 and 1 (exclusive)")

    if not 0.0 <= data.max_missing_fraction <= 1.0:
        raise ConfigurationError("data.max_missing_fraction", "Must be between 0 and 1")

    if not model.classifiers:
        raise ConfigurationError("model.classifiers", "At least one classifier is required")

    if len(set(model.classifiers)) != len(model.classifiers):
        raise ConfigurationError("model.classifiers", "Classifier ids must be unique")

    if model.cv_folds < 2:
        raise ConfigurationError("model.cv_folds", "Need at least 2 folds")

    for key in ("rf_estimators", "gbm_estimators", "gbm_max_depth", "knn_neighbors"):
        if getattr(model, key) < 1:
            raise ConfigurationError(f"model.{key}", "Must be positive")

    if not 0 <= config.tie_tolerance < MAX_TIE_TOLERANCE:
        raise ConfigurationError(
            "tie_tolerance", f"Must be non-negative and below {MAX_TIE_TOLERANCE}"
        )

    if config.labels is not None and len(set(config.labels)) != len(config.labels):
        raise ConfigurationError("labels", "Labels must be unique")
