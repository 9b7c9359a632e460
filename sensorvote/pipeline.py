"""
End-to-end report pipeline.

Loads and cleans the labeled dataset, fits the configured classifiers,
evaluates each on the validation partition, combines them with an
accuracy-weighted vote, and optionally predicts the unlabeled test set.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sensorvote.core.config import validate_config
from sensorvote.core.interfaces import VoterProtocol
from sensorvote.core.types import DatasetSplit, EnsembleResult, ModelEvaluation, ReportConfig
from sensorvote.data.loader import load_unlabeled, prepare_dataset
from sensorvote.ensemble.weighted_voter import WeightedVoter
from sensorvote.models.ensemble import ClassifierList
from sensorvote.models.evaluation import accuracy_table, evaluate_models

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    """Everything a report run produces"""
    labels: List[str]
    feature_columns: List[str]
    evaluations: Dict[str, ModelEvaluation]
    validation: EnsembleResult
    test_predictions: Dict[str, str] = field(default_factory=dict)
    test_model_predictions: Dict[str, List[str]] = field(default_factory=dict)
    saved_models: List[str] = field(default_factory=list)


def run_report(config: ReportConfig, split: Optional[DatasetSplit] = None) -> ReportResult:
    """
    Run the full analysis.

    Args:
        config: Report configuration
        split: Pre-built partitions; when None the training CSV is loaded

    Returns:
        ReportResult with per-model evaluations and ensemble predictions

    Raises:
        ConfigurationError, DataLoadError, TrainingError: From each stage
    """
    validate_config(config)

    if split is None:
        split = prepare_dataset(config.data.training_path, config.data,
                                random_seed=config.random_seed)

    # Same alphabetical order as the voter, so all confusion matrices line up
    labels = sorted(str(label) for label in (config.labels or set(split.y_train) | set(split.y_valid)))

    classifiers = ClassifierList.from_config(config.model, random_seed=config.random_seed)
    classifiers.fit(split.X_train, split.y_train)

    valid_predictions = classifiers.predict(split.X_valid)
    evaluations = evaluate_models(
        valid_predictions,
        split.y_valid.tolist(),
        labels=labels,
        cv_summary=classifiers.cv_summary()
    )
    accuracies = accuracy_table(evaluations)

    voter: VoterProtocol = WeightedVoter(labels=labels, tie_tolerance=config.tie_tolerance)
    validation = voter.vote(valid_predictions, accuracies, split.y_valid.tolist())
    logger.info(f"Ensemble validation accuracy: {validation.accuracy:.2%}")

    result = ReportResult(
        labels=labels,
        feature_columns=split.feature_columns,
        evaluations=evaluations,
        validation=validation
    )

    if config.data.test_path:
        ids, X_test = load_unlabeled(config.data.test_path, split.feature_columns, config.data)
        test_matrix = classifiers.predict(X_test)
        test_vote = voter.vote(test_matrix, accuracies)
        result.test_predictions = dict(zip(ids, test_vote.predictions))
        result.test_model_predictions = {
            cid: list(column) for cid, column in test_matrix.columns.items()
        }
        logger.info(f"Predicted {len(ids)} unlabeled samples")

    if config.model_dir:
        result.saved_models = [str(p) for p in classifiers.save(config.model_dir)]

    return result
