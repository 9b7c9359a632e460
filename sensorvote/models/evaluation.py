"""
Per-classifier evaluation against known labels.
"""

from typing import Dict, Optional, Sequence

import numpy as np
from sklearn.metrics import accuracy_score, confusion_matrix

from sensorvote.core.exceptions import InvalidInputError
from sensorvote.core.types import AccuracyTable, ModelEvaluation, PredictionMatrix


def evaluate_models(
    predictions: PredictionMatrix,
    y_true: Sequence[str],
    labels: Optional[Sequence[str]] = None,
    cv_summary: Optional[Dict[str, Dict[str, float]]] = None
) -> Dict[str, ModelEvaluation]:
    """
    Score each classifier's predictions against the true labels.

    Args:
        predictions: Labels predicted by each classifier
        y_true: Known labels for the same samples
        labels: Label order for the confusion matrices; defaults to the
                sorted union of true and predicted labels
        cv_summary: Optional cross-validation mean/std per classifier

    Returns:
        Dictionary mapping classifier ids to ModelEvaluation
    """
    truth = [str(label) for label in y_true]
    if len(truth) != predictions.n_samples:
        raise InvalidInputError(
            "y_true",
            f"Expected {predictions.n_samples} labels, got {len(truth)}"
        )

    if labels is None:
        seen = set(truth)
        for column in predictions.columns.values():
            seen.update(column)
        labels = sorted(seen)
    labels = tuple(str(label) for label in labels)

    evaluations = {}
    for cid, predicted in predictions.columns.items():
        cm = confusion_matrix(truth, list(predicted), labels=list(labels))
        support = cm.sum(axis=1)
        recall = {
            label: float(cm[i, i] / support[i]) if support[i] else 0.0
            for i, label in enumerate(labels)
        }
        cv = (cv_summary or {}).get(cid, {})
        evaluations[cid] = ModelEvaluation(
            classifier_id=cid,
            accuracy=float(accuracy_score(truth, list(predicted))),
            confusion_matrix=cm,
            labels=labels,
            per_class_recall=recall,
            cv_mean=cv.get('mean'),
            cv_std=cv.get('std')
        )

    return evaluations


def accuracy_table(evaluations: Dict[str, ModelEvaluation]) -> AccuracyTable:
    """Collect held-out accuracies into an AccuracyTable"""
    return AccuracyTable({cid: ev.accuracy for cid, ev in evaluations.items()})


def format_confusion_matrix(matrix: np.ndarray, labels: Sequence[str]) -> str:
    """
    Render a confusion matrix as a text table.

    Rows are true labels, columns are predicted labels.
    """
    width = max(6, max(len(str(v)) for v in np.asarray(matrix).ravel()) + 2,
                max(len(label) for label in labels) + 2)
    lines = [" " * 10 + "Predicted", "Actual".ljust(10) + "".join(l.rjust(width) for l in labels)]
    for label, row in zip(labels, np.asarray(matrix)):
        lines.append(f"  {label}".ljust(10) + "".join(str(int(v)).rjust(width) for v in row))
    return "\n".join(lines)
