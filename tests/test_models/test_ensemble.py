"""
Tests for side-by-side classifier training and evaluation
"""
import numpy as np
import pandas as pd
import pytest
from sklearn.linear_model import LogisticRegression
from sklearn.tree import DecisionTreeClassifier

from sensorvote.core.exceptions import (
    ConfigurationError,
    InvalidInputError,
    ModelNotFoundError,
    TrainingError,
)
from sensorvote.core.types import DataConfig, ModelConfig, PredictionMatrix
from sensorvote.data.loader import prepare_dataset
from sensorvote.models.ensemble import ClassifierList, build_default_estimators
from sensorvote.models.evaluation import accuracy_table, evaluate_models, format_confusion_matrix


class TestClassifierList:
    """Test suite for ClassifierList"""

    @pytest.fixture
    def split(self, training_csv):
        """Training and validation partitions of the synthetic recordings"""
        return prepare_dataset(str(training_csv), DataConfig(), random_seed=0)

    @pytest.fixture
    def fitted(self, split, small_model_config):
        """Classifiers fitted on the training partition"""
        classifiers = ClassifierList.from_config(small_model_config, random_seed=0)
        return classifiers.fit(split.X_train, split.y_train)

    def test_default_estimators(self, small_model_config):
        estimators = build_default_estimators(small_model_config)
        assert list(estimators) == ["rf", "gbm", "knn"]

    def test_unknown_classifier_rejected(self):
        with pytest.raises(ConfigurationError, match="svm"):
            build_default_estimators(ModelConfig(classifiers=["rf", "svm"]))

    def test_empty_classifier_list_rejected(self):
        with pytest.raises(TrainingError):
            ClassifierList({})

    def test_fit_records_shared_fold_scores(self, fitted, small_model_config):
        """Every classifier is scored on the same number of folds"""
        assert fitted.is_fitted
        for cid in ["rf", "gbm", "knn"]:
            assert len(fitted.cv_scores[cid]) == small_model_config.cv_folds
            summary = fitted.cv_summary()[cid]
            assert 0.0 <= summary['mean'] <= 1.0

    def test_predict_returns_prediction_matrix(self, fitted, split):
        predictions = fitted.predict(split.X_valid)

        assert isinstance(predictions, PredictionMatrix)
        assert predictions.classifier_ids == ("rf", "gbm", "knn")
        assert predictions.n_samples == len(split.X_valid)
        assert set(predictions.columns["rf"]) <= set("ABCDE")

    def test_separable_classes_are_learned(self, fitted, split):
        """Well separated clusters are classified almost perfectly"""
        predictions = fitted.predict(split.X_valid)
        truth = split.y_valid.tolist()
        for cid, column in predictions.columns.items():
            assert np.mean(np.array(column) == np.array(truth)) > 0.9, cid

    def test_predict_before_fit_fails(self, split):
        classifiers = ClassifierList({"tree": DecisionTreeClassifier()})
        with pytest.raises(TrainingError, match="fitted"):
            classifiers.predict(split.X_valid)

    def test_training_failure_is_wrapped(self, split):
        """Estimator errors surface as TrainingError naming the classifier"""
        classifiers = ClassifierList({"logreg": LogisticRegression(C=-1.0)}, cv_folds=3)
        with pytest.raises(TrainingError, match="logreg") as exc_info:
            classifiers.fit(split.X_train, split.y_train)
        assert exc_info.value.original_error is not None

    def test_too_few_samples_for_folds_is_wrapped(self):
        """Fold construction errors surface as TrainingError"""
        X = pd.DataFrame({"roll_belt": [0.1, 0.2, 0.3, 0.4, 5.0, 5.1]})
        y = pd.Series(["A", "A", "A", "A", "B", "B"])
        classifiers = ClassifierList({"tree": DecisionTreeClassifier()}, cv_folds=5)

        with pytest.raises(TrainingError, match="folds") as exc_info:
            classifiers.fit(X, y)
        assert isinstance(exc_info.value.original_error, ValueError)
        assert not classifiers.is_fitted

    def test_constructor_clones_estimators(self):
        tree = DecisionTreeClassifier(max_depth=2)
        classifiers = ClassifierList({"tree": tree})
        assert classifiers.estimators["tree"] is not tree
        assert classifiers.estimators["tree"].max_depth == 2

    def test_save_and_load(self, fitted, split, tmp_path):
        written = fitted.save(str(tmp_path / "models"))
        assert len(written) == 3
        assert (tmp_path / "models" / "rf_classifier.pkl").exists()

        loaded = ClassifierList.load(str(tmp_path / "models"), ["rf", "gbm", "knn"])

        assert loaded.is_fitted
        assert loaded.predict(split.X_valid) == fitted.predict(split.X_valid)

    def test_load_missing_model(self, tmp_path):
        with pytest.raises(ModelNotFoundError):
            ClassifierList.load(str(tmp_path), ["rf"])


class TestEvaluation:
    """Test suite for per-classifier evaluation"""

    @pytest.fixture
    def predictions(self):
        return PredictionMatrix({
            'rf': ['A', 'B', 'C', 'C'],
            'knn': ['A', 'A', 'A', 'C'],
        })

    def test_evaluate_models(self, predictions):
        evaluations = evaluate_models(predictions, ['A', 'B', 'C', 'C'], labels=['A', 'B', 'C'])

        rf = evaluations['rf']
        assert rf.accuracy == 1.0
        np.testing.assert_array_equal(rf.confusion_matrix, np.diag([1, 1, 2]))

        knn = evaluations['knn']
        assert knn.accuracy == pytest.approx(0.5)
        assert knn.per_class_recall == {'A': 1.0, 'B': 0.0, 'C': 0.5}

    def test_labels_inferred_when_omitted(self, predictions):
        evaluations = evaluate_models(predictions, ['A', 'B', 'C', 'E'])
        assert evaluations['rf'].labels == ('A', 'B', 'C', 'E')
        assert evaluations['rf'].per_class_recall['E'] == 0.0

    def test_cv_summary_attached(self, predictions):
        evaluations = evaluate_models(
            predictions, ['A', 'B', 'C', 'C'],
            cv_summary={'rf': {'mean': 0.9, 'std': 0.01}}
        )
        assert evaluations['rf'].cv_mean == 0.9
        assert evaluations['knn'].cv_mean is None

    def test_length_mismatch(self, predictions):
        with pytest.raises(InvalidInputError, match="Expected 4 labels"):
            evaluate_models(predictions, ['A'])

    def test_accuracy_table(self, predictions):
        table = accuracy_table(evaluate_models(predictions, ['A', 'B', 'C', 'C']))
        assert table.scores == {'rf': 1.0, 'knn': 0.5}

    def test_format_confusion_matrix(self):
        text = format_confusion_matrix(np.array([[3, 0], [1, 12]]), ('A', 'B'))
        lines = text.splitlines()
        assert "Predicted" in lines[0]
        assert lines[2].split() == ['A', '3', '0']
        assert lines[3].split() == ['B', '1', '12']
