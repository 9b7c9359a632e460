"""
Protocol definitions for SENSORVOTE components.

These protocols define the interfaces that implementations must follow,
so any estimator or voting strategy can be swapped in.
"""

from typing import Optional, Protocol, Sequence
import numpy as np
from sensorvote.core.types import AccuracyTable, EnsembleResult, PredictionMatrix


class ClassifierProtocol(Protocol):
    """
    Protocol for a trainable classifier.

    Any scikit-learn classifier or pipeline satisfies this interface.
    """

    def fit(self, X, y) -> "ClassifierProtocol":
        """Fit the classifier on features X and labels y"""
        ...

    def predict(self, X) -> np.ndarray:
        """
        Predict one label per row of X.

        Args:
            X: Feature matrix

        Returns:
            Array of predicted labels
        """
        ...


class VoterProtocol(Protocol):
    """
    Protocol for ensemble voting strategies.

    Voters combine per-classifier predictions into a single prediction
    per sample.
    """

    def vote(
        self,
        predictions: PredictionMatrix,
        accuracies: AccuracyTable,
        true_labels: Optional[Sequence[str]] = None
    ) -> EnsembleResult:
        """
        Combine classifier predictions into ensemble result.

        Args:
            predictions: Labels predicted by each classifier
            accuracies: Standalone accuracy of each classifier
            true_labels: Known labels, used for scoring only

        Returns:
            EnsembleResult with one prediction per sample

        Raises:
            InvalidInputError: If inputs are inconsistent
            DegenerateWeightsError: If weights cannot be derived
        """
        ...
