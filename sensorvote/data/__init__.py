"""
Dataset loading and partitioning for SENSORVOTE.
"""

from sensorvote.data.loader import (
    load_dataset,
    remove_summary_rows,
    select_features,
    partition,
    prepare_dataset,
    load_unlabeled,
)

__all__ = [
    "load_dataset",
    "remove_summary_rows",
    "select_features",
    "partition",
    "prepare_dataset",
    "load_unlabeled",
]
