"""
Tests for configuration loading and the core data types
"""
import json

import pandas as pd
import pytest

from sensorvote.core.config import load_config, validate_config
from sensorvote.core.exceptions import ConfigurationError, InvalidInputError
from sensorvote.core.types import AccuracyTable, EnsembleResult, PredictionMatrix, ReportConfig


class TestLoadConfig:
    """Test suite for JSON configuration files"""

    def write(self, tmp_path, payload):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_defaults(self):
        """Defaults describe the three-classifier report"""
        config = ReportConfig()
        assert config.model.classifiers == ["rf", "gbm", "knn"]
        assert config.data.label_column == "classe"
        assert config.data.summary_flag_column == "new_window"
        validate_config(config)

    def test_nested_values_override_defaults(self, tmp_path):
        path = self.write(tmp_path, {
            "random_seed": 7,
            "labels": ["A", "B", "C", "D", "E"],
            "data": {"train_fraction": 0.75},
            "model": {"cv_folds": 10, "classifiers": ["rf", "knn"]},
        })

        config = load_config(str(path))

        assert config.random_seed == 7
        assert config.data.train_fraction == 0.75
        assert config.data.label_column == "classe"
        assert config.model.cv_folds == 10
        assert config.model.classifiers == ["rf", "knn"]

    def test_unknown_key_rejected(self, tmp_path):
        path = self.write(tmp_path, {"model": {"trees": 5}})
        with pytest.raises(ConfigurationError, match="model.trees"):
            load_config(str(path))

    def test_invalid_value_rejected(self, tmp_path):
        path = self.write(tmp_path, {"data": {"train_fraction": 1.5}})
        with pytest.raises(ConfigurationError, match="train_fraction"):
            load_config(str(path))

    def test_too_few_folds_rejected(self, tmp_path):
        path = self.write(tmp_path, {"model": {"cv_folds": 1}})
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_unreadable_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(str(bad))
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "missing.json"))

    def test_loose_tie_tolerance_rejected(self, tmp_path):
        path = self.write(tmp_path, {"tie_tolerance": 1.0})
        with pytest.raises(ConfigurationError, match="tie_tolerance"):
            load_config(str(path))

class TestCoreTypes:
    """Test suite for PredictionMatrix, AccuracyTable and EnsembleResult"""

    def test_prediction_matrix_is_frozen_and_stringified(self):
        matrix = PredictionMatrix({'rf': ['A', 'B'], 'gbm': ('B', 'B')})

        assert matrix.classifier_ids == ('rf', 'gbm')
        assert matrix.n_samples == 2
        assert matrix.row(1) == {'rf': 'B', 'gbm': 'B'}
        assert isinstance(matrix.columns['rf'], tuple)

    def test_prediction_matrix_frame_round_trip(self):
        frame = pd.DataFrame({'rf': ['A', 'C'], 'knn': ['B', 'C']})
        matrix = PredictionMatrix.from_frame(frame)
        pd.testing.assert_frame_equal(matrix.to_frame(), frame)

    def test_accuracy_table_validates_range(self):
        table = AccuracyTable({'rf': 1, 'gbm': 0.5})
        assert table.total == pytest.approx(1.5)
        with pytest.raises(InvalidInputError):
            AccuracyTable({'rf': 2.0})
        with pytest.raises(InvalidInputError):
            AccuracyTable({})

    def test_ensemble_result_to_dict(self):
        result = EnsembleResult(
            predictions=('A',),
            weights={'rf': 1.0},
            labels=('A',),
            vote_vectors=({'A': 1.0},)
        )
        payload = result.to_dict()
        assert payload['predictions'] == ['A']
        assert payload['accuracy'] is None
        assert payload['confusion_matrix'] is None

    def test_prediction_matrix_rejects_colliding_ids(self):
        """1 and '1' would silently merge into one classifier"""
        with pytest.raises(InvalidInputError, match="collide"):
            PredictionMatrix({1: ['A'], '1': ['B']})

    def test_accuracy_table_rejects_colliding_ids(self):
        with pytest.raises(InvalidInputError, match="collide"):
            AccuracyTable({1: 0.9, '1': 0.5})

    def test_accuracy_table_rejects_non_numeric(self):
        with pytest.raises(InvalidInputError, match="must be a number"):
            AccuracyTable({'rf': 'high'})
        with pytest.raises(InvalidInputError, match="must be a number"):
            AccuracyTable({'rf': None})
