"""
Accuracy-weighted voting for ensemble classification.

Combines the labels predicted by several independently trained classifiers
into one label per sample. Each classifier votes for its predicted label
with a weight proportional to its standalone accuracy; the label with the
largest accumulated weight wins.

Ties are broken deterministically: candidate labels are kept in sorted
order and the first label whose score is within ``tie_tolerance`` of the
maximum is chosen.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix

from sensorvote.core.exceptions import DegenerateWeightsError, InvalidInputError
from sensorvote.core.interfaces import VoterProtocol
from sensorvote.core.types import AccuracyTable, EnsembleResult, PredictionMatrix

logger = logging.getLogger(__name__)

# Larger tolerances would let a clearly outvoted label win the tie-break
MAX_TIE_TOLERANCE = 1e-6

PredictionsLike = Union[PredictionMatrix, Mapping[str, Sequence[str]]]
AccuraciesLike = Union[AccuracyTable, Mapping[str, float]]


def normalize_weights(accuracies: AccuraciesLike) -> Dict[str, float]:
    """
    Turn accuracies into weights that sum to 1.

    Args:
        accuracies: Standalone accuracy per classifier

    Returns:
        Dictionary mapping classifier ids to weight = accuracy / total

    Raises:
        DegenerateWeightsError: If the accuracies sum to zero or less
    """
    table = _as_accuracy_table(accuracies)
    total = table.total
    if total <= 0:
        raise DegenerateWeightsError(total)
    return {cid: score / total for cid, score in table.scores.items()}


class WeightedVoter:
    """
    Voter that combines classifier predictions using accuracy weights.

    Features:
    - Weights derived from held-out accuracies, normalized to sum to 1
    - Optional fixed label set (e.g. every class of the training data)
    - Deterministic alphabetical tie-break
    - Confusion matrix and accuracy when true labels are supplied
    """

    def __init__(
        self,
        labels: Optional[Iterable[str]] = None,
        tie_tolerance: float = 1e-12
    ):
        """
        Initialize weighted voter.

        Args:
            labels: Every label a sample may receive. If None, the labels
                    seen in the predictions (and true labels) are used.
            tie_tolerance: Scores this close to the maximum count as tied.
                           Must be below MAX_TIE_TOLERANCE.
        """
        if not 0 <= tie_tolerance < MAX_TIE_TOLERANCE:
            raise InvalidInputError(
                "tie_tolerance",
                f"Must be non-negative and below {MAX_TIE_TOLERANCE}, got {tie_tolerance}"
            )

        self.labels = None if labels is None else tuple(sorted({str(l) for l in labels}))
        self.tie_tolerance = tie_tolerance

    def vote(
        self,
        predictions: PredictionsLike,
        accuracies: AccuraciesLike,
        true_labels: Optional[Sequence[str]] = None
    ) -> EnsembleResult:
        """
        Combine classifier predictions into ensemble result.

        Args:
            predictions: Labels predicted by each classifier, per sample
            accuracies: Standalone accuracy of each classifier. Used only to
                        derive weights; true labels never affect weights.
            true_labels: Known labels for the same samples, for scoring

        Returns:
            EnsembleResult with one prediction per sample, in input order

        Raises:
            InvalidInputError: If classifier sets differ, inputs are empty,
                               or labels fall outside the label set
            DegenerateWeightsError: If the accuracies sum to zero
        """
        matrix = _as_prediction_matrix(predictions)
        table = _as_accuracy_table(accuracies)

        self._check_classifiers(matrix, table)

        truth = None
        if true_labels is not None:
            truth = tuple(str(label) for label in true_labels)
            if len(truth) != matrix.n_samples:
                raise InvalidInputError(
                    "true_labels",
                    f"Expected {matrix.n_samples} labels, got {len(truth)}"
                )

        weights = normalize_weights(table)
        labels = self._candidate_labels(matrix, truth)
        scores = self._tally(matrix, weights, labels)
        winners, ties = self._select(scores)

        ensemble = tuple(labels[i] for i in winners)
        vote_vectors = tuple(
            {label: float(score) for label, score in zip(labels, row)}
            for row in scores
        )

        cm = None
        accuracy = None
        if truth is not None:
            cm = confusion_matrix(truth, ensemble, labels=list(labels))
            accuracy = float(np.mean(np.asarray(ensemble) == np.asarray(truth)))

        logger.debug(
            f"Weighted vote over {matrix.n_samples} samples from {len(weights)} classifiers ({ties} ties)"
        )

        return EnsembleResult(
            predictions=ensemble,
            weights=weights,
            labels=labels,
            vote_vectors=vote_vectors,
            confusion_matrix=cm,
            accuracy=accuracy,
            metadata={
                'voting_method': 'accuracy_weighted',
                'tie_break': 'alphabetical',
                'num_voters': len(weights),
                'num_samples': matrix.n_samples,
                'num_ties': ties
            }
        )

    def _check_classifiers(self, matrix: PredictionMatrix, table: AccuracyTable) -> None:
        """Both inputs must name exactly the same classifiers"""
        predicted = set(matrix.classifier_ids)
        scored = set(table.classifier_ids)
        if predicted != scored:
            raise InvalidInputError(
                "accuracies",
                f"Classifier sets differ: missing accuracies for {sorted(predicted - scored)}, "
                f"no predictions for {sorted(scored - predicted)}"
            )

    def _candidate_labels(
        self,
        matrix: PredictionMatrix,
        truth: Optional[Tuple[str, ...]]
    ) -> Tuple[str, ...]:
        """Sorted labels a VoteVector holds an entry for"""
        seen = set()
        for column in matrix.columns.values():
            seen.update(column)
        if truth is not None:
            seen.update(truth)

        if self.labels is None:
            return tuple(sorted(seen))

        unknown = sorted(seen - set(self.labels))
        if unknown:
            raise InvalidInputError("labels", f"Labels outside the label set: {unknown}")
        return self.labels

    def _tally(
        self,
        matrix: PredictionMatrix,
        weights: Dict[str, float],
        labels: Tuple[str, ...]
    ) -> np.ndarray:
        """
        Accumulate weighted votes.

        Returns:
            Array of shape (n_samples, n_labels); row i is sample i's VoteVector
        """
        index = {label: i for i, label in enumerate(labels)}
        scores = np.zeros((matrix.n_samples, len(labels)))
        rows = np.arange(matrix.n_samples)

        for cid in sorted(matrix.classifier_ids):
            cols = np.array([index[label] for label in matrix.columns[cid]])
            scores[rows, cols] += weights[cid]

        return scores

    def _select(self, scores: np.ndarray) -> Tuple[np.ndarray, int]:
        """
        Pick the winning label of each sample.

        Returns:
            Index of the first voted label within tolerance of each row's
            maximum, and the number of rows where more than one label was tied
        """
        best = scores.max(axis=1, keepdims=True)
        # Unvoted labels sit at 0 and never tie
        tied = (scores >= best - self.tie_tolerance) & (scores > 0)
        return np.argmax(tied, axis=1), int(np.sum(tied.sum(axis=1) > 1))


def weighted_vote(
    predictions: PredictionsLike,
    accuracies: AccuraciesLike,
    true_labels: Optional[Sequence[str]] = None,
    labels: Optional[Iterable[str]] = None,
    tie_tolerance: float = 1e-12
) -> EnsembleResult:
    """Functional form of WeightedVoter.vote"""
    voter = WeightedVoter(labels=labels, tie_tolerance=tie_tolerance)
    return voter.vote(predictions, accuracies, true_labels)


def _as_prediction_matrix(predictions: PredictionsLike) -> PredictionMatrix:
    if isinstance(predictions, PredictionMatrix):
        return predictions
    if isinstance(predictions, pd.DataFrame):
        return PredictionMatrix.from_frame(predictions)
    return PredictionMatrix(predictions)


def _as_accuracy_table(accuracies: AccuraciesLike) -> AccuracyTable:
    if isinstance(accuracies, AccuracyTable):
        return accuracies
    return AccuracyTable(accuracies)


def _type_check() -> None:
    """Static check that WeightedVoter implements VoterProtocol"""
    def check(voter: VoterProtocol) -> None:
        pass

    check(WeightedVoter())
