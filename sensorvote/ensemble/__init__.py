"""
Ensemble voting strategies for SENSORVOTE.

This module provides voters that combine the predictions of several
classifiers into a single prediction per sample.
"""

from sensorvote.ensemble.weighted_voter import WeightedVoter, normalize_weights, weighted_vote

__all__ = [
    "WeightedVoter",
    "normalize_weights",
    "weighted_vote",
]
