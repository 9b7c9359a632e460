"""
Run the SENSORVOTE activity-quality report.

This script:
1. Loads the labeled sensor recordings and removes summary rows
2. Partitions them into training and validation sets
3. Trains the classifiers on shared cross-validation folds
4. Prints a confusion matrix for each classifier
5. Combines them with an accuracy-weighted vote
6. Prints ensemble predictions for the unlabeled test set

Usage:
    python scripts/run_report.py --training data/pml-training.csv --testing data/pml-testing.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sensorvote.core.config import load_config
from sensorvote.core.exceptions import SensorVoteError
from sensorvote.core.types import ReportConfig
from sensorvote.models.evaluation import format_confusion_matrix
from sensorvote.pipeline import ReportResult, run_report


def parse_args():
    parser = argparse.ArgumentParser(description="Train classifiers on sensor recordings and combine them by weighted vote.")
    parser.add_argument("--config", help="JSON configuration file.")
    parser.add_argument("--training", help="Labeled training CSV (overrides config).")
    parser.add_argument("--testing", help="Unlabeled test CSV (overrides config).")
    parser.add_argument("--no-test", action="store_true", help="Skip predicting the unlabeled test set.")
    parser.add_argument("--cv-folds", type=int, help="Cross-validation folds per classifier.")
    parser.add_argument("--seed", type=int, help="Random seed.")
    parser.add_argument("--model-dir", help="Save fitted classifiers to this directory.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args()


def build_config(args) -> ReportConfig:
    config = load_config(args.config) if args.config else ReportConfig()

    if args.training:
        config.data.training_path = args.training
    if args.testing:
        config.data.test_path = args.testing
    if args.no_test:
        config.data.test_path = None
    if args.cv_folds is not None:
        config.model.cv_folds = args.cv_folds
    if args.seed is not None:
        config.random_seed = args.seed
    if args.model_dir:
        config.model_dir = args.model_dir

    return config


def print_report(result: ReportResult):
    """Print per-model and ensemble results."""
    print("\n" + "="*60)
    print("Classifier Evaluation (validation set)")
    print("="*60)

    for cid, evaluation in result.evaluations.items():
        print(f"\n{cid}:")
        if evaluation.cv_mean is not None:
            print(f"  CV Accuracy: {evaluation.cv_mean:.2%} +/- {evaluation.cv_std:.2%}")
        print(f"  Validation Accuracy: {evaluation.accuracy:.2%}")
        print(format_confusion_matrix(evaluation.confusion_matrix, evaluation.labels))

    validation = result.validation
    print("\n" + "="*60)
    print("Weighted Vote Ensemble")
    print("="*60)
    print("\nWeights:")
    for cid, weight in validation.weights.items():
        print(f"  {cid}: {weight:.3f}")
    print(f"\nEnsemble Accuracy: {validation.accuracy:.2%}")
    print(format_confusion_matrix(validation.confusion_matrix, validation.labels))

    if result.test_predictions:
        print("\n" + "="*60)
        print("Test Set Predictions")
        print("="*60)
        models = list(result.test_model_predictions)
        print(f"{'id':>6}  " + "  ".join(f"{cid:>5}" for cid in models) + "  ensemble")
        for i, (sample_id, label) in enumerate(result.test_predictions.items()):
            votes = "  ".join(f"{result.test_model_predictions[cid][i]:>5}" for cid in models)
            print(f"{sample_id:>6}  {votes}  {label:>8}")


def main():
    """Main report pipeline."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("="*60)
    print("SENSORVOTE Activity Quality Report")
    print("="*60)

    try:
        config = build_config(args)
        result = run_report(config)
    except SensorVoteError as e:
        print(f"[ERROR] {e}")
        return 1

    print_report(result)

    if result.saved_models:
        print(f"\n[OK] Models saved: {', '.join(result.saved_models)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
