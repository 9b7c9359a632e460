"""
Shared fixtures: small synthetic sensor recordings in the layout of the
weight-lifting exercise CSVs.
"""
import numpy as np
import pandas as pd
import pytest

from sensorvote.core.types import DataConfig, ModelConfig, ReportConfig

LABELS = ["A", "B", "C", "D", "E"]
FEATURES = ["roll_belt", "pitch_belt", "yaw_belt", "accel_arm_x"]


def _sensor_rows(rng, label_index, count):
    """Readings clustered around a per-class centre"""
    centre = 4.0 * label_index
    return {name: rng.normal(centre + offset, 0.5, size=count)
            for offset, name in enumerate(FEATURES)}


@pytest.fixture
def training_frame():
    """Labeled recordings with interleaved summary rows"""
    rng = np.random.default_rng(7)
    parts = []
    for i, label in enumerate(LABELS):
        rows = pd.DataFrame(_sensor_rows(rng, i, 40))
        rows["classe"] = label
        rows["new_window"] = "no"
        rows["avg_roll_belt"] = ""
        rows["kurtosis_yaw_belt"] = ""
        parts.append(rows)

        summary = pd.DataFrame(_sensor_rows(rng, i, 2))
        summary["classe"] = label
        summary["new_window"] = "yes"
        summary["avg_roll_belt"] = 1.5
        summary["kurtosis_yaw_belt"] = "#DIV/0!"
        parts.append(summary)

    frame = pd.concat(parts, ignore_index=True)
    frame.insert(0, "user_name", "carlitos")
    frame.insert(1, "raw_timestamp_part_1", 1323084231)
    frame.insert(2, "raw_timestamp_part_2", np.arange(len(frame)))
    frame.insert(3, "cvtd_timestamp", "05/12/2011 11:23")
    frame.insert(5, "num_window", 11)
    return frame


@pytest.fixture
def training_csv(tmp_path, training_frame):
    """Training CSV with an unnamed leading row-index column"""
    path = tmp_path / "pml-training.csv"
    frame = training_frame.copy()
    frame.index = frame.index + 1
    frame.to_csv(path, index=True, index_label="")
    return path


@pytest.fixture
def testing_csv(tmp_path):
    """Unlabeled CSV: one sample per class, then repeats"""
    rng = np.random.default_rng(11)
    parts = []
    for i in range(10):
        rows = pd.DataFrame(_sensor_rows(rng, i % len(LABELS), 1))
        parts.append(rows)
    frame = pd.concat(parts, ignore_index=True)
    frame["avg_roll_belt"] = ""
    frame["problem_id"] = np.arange(1, len(frame) + 1)
    path = tmp_path / "pml-testing.csv"
    frame.to_csv(path, index=False)
    return path


@pytest.fixture
def small_model_config():
    """Fast classifier settings for tests"""
    return ModelConfig(cv_folds=3, rf_estimators=10, gbm_estimators=10, knn_neighbors=3)


@pytest.fixture
def report_config(training_csv, testing_csv, small_model_config):
    return ReportConfig(
        data=DataConfig(training_path=str(training_csv), test_path=str(testing_csv)),
        model=small_model_config,
        random_seed=0
    )
