"""
Core abstractions and interfaces for SENSORVOTE.

This module defines the core protocols, types and errors used throughout
the system.
"""

from sensorvote.core.interfaces import (
    ClassifierProtocol,
    VoterProtocol,
)
from sensorvote.core.types import (
    PredictionMatrix,
    AccuracyTable,
    EnsembleResult,
    ModelEvaluation,
    DatasetSplit,
    DataConfig,
    ModelConfig,
    ReportConfig,
)
from sensorvote.core.exceptions import (
    SensorVoteError,
    InvalidInputError,
    DegenerateWeightsError,
    DataLoadError,
    TrainingError,
    ConfigurationError,
    ModelNotFoundError,
)

__all__ = [
    # Protocols
    "ClassifierProtocol",
    "VoterProtocol",
    # Types
    "PredictionMatrix",
    "AccuracyTable",
    "EnsembleResult",
    "ModelEvaluation",
    "DatasetSplit",
    "DataConfig",
    "ModelConfig",
    "ReportConfig",
    # Exceptions
    "SensorVoteError",
    "InvalidInputError",
    "DegenerateWeightsError",
    "DataLoadError",
    "TrainingError",
    "ConfigurationError",
    "ModelNotFoundError",
]
