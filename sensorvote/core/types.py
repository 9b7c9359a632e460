"""
Domain types and data models for SENSORVOTE.

These types define the core data structures used throughout the system,
providing type safety and clear contracts between components.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import numpy as np
import pandas as pd

from sensorvote.core.exceptions import InvalidInputError


@dataclass(frozen=True)
class PredictionMatrix:
    """
    Per-sample labels predicted by each classifier.

    Stored column-wise: ``columns[classifier_id][i]`` is the label that
    classifier predicted for sample ``i``. Immutable after creation.
    """
    columns: Mapping[str, Sequence[str]]

    def __post_init__(self):
        """Validate and freeze the prediction columns"""
        if not self.columns:
            raise InvalidInputError("predictions", "At least one classifier is required")

        frozen = {str(cid): tuple(str(label) for label in labels)
                  for cid, labels in self.columns.items()}
        if len(frozen) != len(self.columns):
            raise InvalidInputError("predictions", "Classifier ids collide once converted to strings")

        lengths = {cid: len(labels) for cid, labels in frozen.items()}
        if len(set(lengths.values())) != 1:
            raise InvalidInputError(
                "predictions",
                f"Classifiers predicted different numbers of samples: {lengths}"
            )
        if next(iter(lengths.values())) == 0:
            raise InvalidInputError("predictions", "No samples to aggregate")

        object.__setattr__(self, "columns", frozen)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "PredictionMatrix":
        """Build from a DataFrame with one column per classifier"""
        return cls({str(col): frame[col].tolist() for col in frame.columns})

    @property
    def classifier_ids(self) -> Tuple[str, ...]:
        return tuple(self.columns)

    @property
    def n_samples(self) -> int:
        return len(next(iter(self.columns.values())))

    def row(self, index: int) -> Dict[str, str]:
        """Predictions for one sample, keyed by classifier"""
        return {cid: labels[index] for cid, labels in self.columns.items()}

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({cid: list(labels) for cid, labels in self.columns.items()})


@dataclass(frozen=True)
class AccuracyTable:
    """
    Standalone accuracy of each classifier on a held-out evaluation set.

    Accuracies must lie in [0, 1].
    """
    scores: Mapping[str, float]

    def __post_init__(self):
        """Validate accuracy values"""
        if not self.scores:
            raise InvalidInputError("accuracies", "At least one classifier is required")

        frozen = {}
        for cid, value in self.scores.items():
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidInputError(
                    "accuracies",
                    f"Accuracy for '{cid}' must be a number, got {value!r}"
                )
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(
                    "accuracies",
                    f"Accuracy for '{cid}' must be 0-1, got {value}"
                )
            frozen[str(cid)] = value

        if len(frozen) != len(self.scores):
            raise InvalidInputError("accuracies", "Classifier ids collide once converted to strings")

        object.__setattr__(self, "scores", frozen)

    @property
    def classifier_ids(self) -> Tuple[str, ...]:
        return tuple(self.scores)

    @property
    def total(self) -> float:
        return float(sum(self.scores.values()))


@dataclass(frozen=True)
class EnsembleResult:
    """
    Result from accuracy-weighted voting.

    ``confusion_matrix`` and ``accuracy`` are only present when true labels
    were supplied. Matrix rows are true labels, columns are predicted labels,
    both in ``labels`` order.
    """
    predictions: Tuple[str, ...]
    weights: Dict[str, float]
    labels: Tuple[str, ...]
    vote_vectors: Tuple[Dict[str, float], ...]
    confusion_matrix: Optional[np.ndarray] = None
    accuracy: Optional[float] = None
    metadata: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dictionary for API responses"""
        return {
            "predictions": list(self.predictions),
            "weights": {k: float(v) for k, v in self.weights.items()},
            "labels": list(self.labels),
            "accuracy": None if self.accuracy is None else float(self.accuracy),
            "confusion_matrix": (
                None if self.confusion_matrix is None
                else self.confusion_matrix.astype(int).tolist()
            ),
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class ModelEvaluation:
    """Evaluation of a single classifier against known labels"""
    classifier_id: str
    accuracy: float
    confusion_matrix: np.ndarray
    labels: Tuple[str, ...]
    per_class_recall: Dict[str, float]
    cv_mean: Optional[float] = None
    cv_std: Optional[float] = None


@dataclass
class DatasetSplit:
    """Training and validation partitions of a labeled dataset"""
    X_train: pd.DataFrame
    X_valid: pd.DataFrame
    y_train: pd.Series
    y_valid: pd.Series
    feature_columns: List[str]


@dataclass
class DataConfig:
    """Configuration for dataset loading and partitioning"""
    training_path: str = "data/pml-training.csv"
    test_path: Optional[str] = "data/pml-testing.csv"
    label_column: str = "classe"
    id_column: str = "problem_id"
    summary_flag_column: str = "new_window"
    summary_flag_value: str = "yes"
    bookkeeping_columns: List[str] = field(default_factory=lambda: [
        "user_name",
        "raw_timestamp_part_1",
        "raw_timestamp_part_2",
        "cvtd_timestamp",
        "new_window",
        "num_window",
    ])
    na_values: List[str] = field(default_factory=lambda: ["NA", "", "#DIV/0!"])
    max_missing_fraction: float = 0.5
    train_fraction: float = 0.7


@dataclass
class ModelConfig:
    """Configuration for the classifiers fitted side by side"""
    classifiers: List[str] = field(default_factory=lambda: ["rf", "gbm", "knn"])
    cv_folds: int = 5
    rf_estimators: int = 100
    gbm_estimators: int = 100
    gbm_max_depth: int = 3
    gbm_learning_rate: float = 0.1
    knn_neighbors: int = 5


@dataclass
class ReportConfig:
    """Configuration for a full report run"""
    data: DataConfig = field(default_factory=DataConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    random_seed: int = 42
    labels: Optional[List[str]] = None  # None: infer from training labels
    tie_tolerance: float = 1e-12
    model_dir: Optional[str] = None  # save fitted models here when set
