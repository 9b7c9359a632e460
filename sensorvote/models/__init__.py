"""
Classifier training and evaluation for SENSORVOTE.
"""

from sensorvote.models.ensemble import ClassifierList, build_default_estimators
from sensorvote.models.evaluation import (
    evaluate_models,
    accuracy_table,
    format_confusion_matrix,
)

__all__ = [
    "ClassifierList",
    "build_default_estimators",
    "evaluate_models",
    "accuracy_table",
    "format_confusion_matrix",
]
