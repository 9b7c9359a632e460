"""
Side-by-side classifier training for SENSORVOTE.

Fits several off-the-shelf scikit-learn classifiers on the same training
data. Every model is cross-validated on one shared set of stratified folds
so their resampling accuracies are directly comparable, then refit on the
full training set.
"""

import logging
from pathlib import Path
from typing import Dict, List

import joblib
import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.model_selection import StratifiedKFold, cross_val_score
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler

from sensorvote.core.exceptions import ConfigurationError, ModelNotFoundError, TrainingError
from sensorvote.core.interfaces import ClassifierProtocol
from sensorvote.core.types import ModelConfig, PredictionMatrix

logger = logging.getLogger(__name__)

KNOWN_CLASSIFIERS = ("rf", "gbm", "knn")


def build_default_estimators(config: ModelConfig, random_seed: int = 42) -> Dict[str, ClassifierProtocol]:
    """
    Create the configured estimators.

    Args:
        config: Model settings; ``config.classifiers`` picks from
                'rf', 'gbm' and 'knn'
        random_seed: Seed for the stochastic estimators

    Returns:
        Dictionary mapping classifier ids to unfitted estimators

    Raises:
        ConfigurationError: If an unknown classifier id is configured
    """
    estimators = {}
    for cid in config.classifiers:
        if cid == "rf":
            estimators[cid] = RandomForestClassifier(
                n_estimators=config.rf_estimators,
                random_state=random_seed,
                n_jobs=-1
            )
        elif cid == "gbm":
            estimators[cid] = GradientBoostingClassifier(
                n_estimators=config.gbm_estimators,
                max_depth=config.gbm_max_depth,
                learning_rate=config.gbm_learning_rate,
                random_state=random_seed
            )
        elif cid == "knn":
            # Distance based, so features need a common scale
            estimators[cid] = make_pipeline(
                StandardScaler(),
                KNeighborsClassifier(n_neighbors=config.knn_neighbors)
            )
        else:
            raise ConfigurationError(
                "model.classifiers",
                f"Unknown classifier '{cid}', expected one of {list(KNOWN_CLASSIFIERS)}"
            )
    return estimators


class ClassifierList:
    """
    A named set of classifiers trained on shared cross-validation folds.

    Attributes:
        estimators: Classifier id -> fitted estimator (after ``fit``)
        cv_scores: Classifier id -> per-fold validation accuracies
    """

    def __init__(self, estimators: Dict[str, ClassifierProtocol], cv_folds: int = 5, random_seed: int = 42):
        if not estimators:
            raise TrainingError("ensemble", "No classifiers given")

        self.estimators: Dict[str, ClassifierProtocol] = {str(cid): clone(est) for cid, est in estimators.items()}
        self.cv_folds = cv_folds
        self.random_seed = random_seed
        self.cv_scores: Dict[str, np.ndarray] = {}
        self._fitted = False

    @classmethod
    def from_config(cls, config: ModelConfig, random_seed: int = 42) -> "ClassifierList":
        return cls(
            build_default_estimators(config, random_seed=random_seed),
            cv_folds=config.cv_folds,
            random_seed=random_seed
        )

    @property
    def classifier_ids(self) -> List[str]:
        return list(self.estimators)

    @property
    def is_fitted(self) -> bool:
        return self._fitted

    def fit(self, X: pd.DataFrame, y: pd.Series) -> "ClassifierList":
        """
        Cross-validate then fit every classifier.

        Raises:
            TrainingError: If any classifier fails to train
        """
        folds = StratifiedKFold(
            n_splits=self.cv_folds,
            shuffle=True,
            random_state=self.random_seed
        )
        # Materialized once so every model sees identical folds
        try:
            splits = list(folds.split(X, y))
        except ValueError as e:
            raise TrainingError("ensemble", f"Cannot build {self.cv_folds} folds: {e}", original_error=e)

        for cid, model in self.estimators.items():
            logger.info(f"Training {cid} ({type(model).__name__})...")
            try:
                scores = cross_val_score(model, X, y, cv=splits, scoring="accuracy")
                model.fit(X, y)
            except Exception as e:
                raise TrainingError(cid, str(e), original_error=e)

            self.cv_scores[cid] = scores
            logger.info(f"  {cid} CV accuracy: {scores.mean():.2%} +/- {scores.std():.2%}")

        self._fitted = True
        return self

    def cv_summary(self) -> Dict[str, Dict[str, float]]:
        """Mean and standard deviation of each classifier's fold accuracies"""
        return {
            cid: {'mean': float(scores.mean()), 'std': float(scores.std())}
            for cid, scores in self.cv_scores.items()
        }

    def predict(self, X: pd.DataFrame) -> PredictionMatrix:
        """
        Predict a label for every row with every classifier.

        Raises:
            TrainingError: If called before ``fit`` or a prediction fails
        """
        if not self._fitted:
            raise TrainingError("ensemble", "Classifiers must be fitted before predicting")

        columns = {}
        for cid, model in self.estimators.items():
            try:
                columns[cid] = [str(label) for label in model.predict(X)]
            except Exception as e:
                raise TrainingError(cid, f"Prediction failed: {e}", original_error=e)

        return PredictionMatrix(columns)

    def save(self, output_dir: str) -> List[Path]:
        """Save each fitted classifier to ``<output_dir>/<id>_classifier.pkl``"""
        if not self._fitted:
            raise TrainingError("ensemble", "Classifiers must be fitted before saving")

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        written = []
        for cid, model in self.estimators.items():
            model_file = output_path / f"{cid}_classifier.pkl"
            joblib.dump(model, model_file)
            written.append(model_file)
            logger.info(f"Model saved to {model_file}")
        return written

    @classmethod
    def load(cls, model_dir: str, classifier_ids: List[str],
             cv_folds: int = 5, random_seed: int = 42) -> "ClassifierList":
        """
        Load previously saved classifiers.

        Raises:
            ModelNotFoundError: If a classifier file does not exist
        """
        models = {}
        for cid in classifier_ids:
            model_file = Path(model_dir) / f"{cid}_classifier.pkl"
            if not model_file.exists():
                raise ModelNotFoundError(str(model_file))
            models[cid] = joblib.load(model_file)

        loaded = cls(models, cv_folds=cv_folds, random_seed=random_seed)
        # __init__ stores unfitted clones; keep the loaded models instead
        loaded.estimators = models
        loaded._fitted = True
        return loaded

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(classifiers={self.classifier_ids}, fitted={self._fitted})"
