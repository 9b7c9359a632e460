"""
Dataset loading for sensor-measurement recordings.

Reads the labeled training CSV and the unlabeled test CSV, removes the
per-window summary rows, keeps the numeric sensor features and splits the
labeled data into training and validation partitions.
"""

import logging
from pathlib import Path
from typing import List, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from sensorvote.core.exceptions import DataLoadError
from sensorvote.core.types import DataConfig, DatasetSplit

logger = logging.getLogger(__name__)


def read_csv(path: str, config: DataConfig) -> pd.DataFrame:
    """
    Read a measurement CSV.

    The configured NA strings become missing values and an unnamed leading
    row-index column is dropped.

    Raises:
        DataLoadError: If the file cannot be read
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise DataLoadError(str(csv_path), "File not found")

    try:
        frame = pd.read_csv(
            csv_path,
            na_values=config.na_values,
            keep_default_na=False,
            low_memory=False
        )
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise DataLoadError(str(csv_path), str(e), original_error=e)

    index_columns = [col for col in frame.columns if str(col).startswith("Unnamed:")]
    if index_columns:
        frame = frame.drop(columns=index_columns)

    logger.info(f"Loaded {len(frame)} rows x {frame.shape[1]} columns from {csv_path}")
    return frame


def load_dataset(path: str, config: DataConfig) -> pd.DataFrame:
    """
    Load the labeled dataset.

    Raises:
        DataLoadError: If the file cannot be read or has no label column
    """
    frame = read_csv(path, config)
    if config.label_column not in frame.columns:
        raise DataLoadError(path, f"Label column '{config.label_column}' not found")
    return frame


def remove_summary_rows(frame: pd.DataFrame, config: DataConfig) -> pd.DataFrame:
    """
    Drop the per-window summary rows.

    Summary rows carry aggregate statistics rather than raw readings and are
    flagged by ``summary_flag_column == summary_flag_value``.
    """
    column = config.summary_flag_column
    if column not in frame.columns:
        logger.warning(f"Summary flag column '{column}' not found, keeping all rows")
        return frame

    flags = frame[column].astype(str).str.strip().str.lower()
    mask = flags == config.summary_flag_value.lower()
    logger.info(f"Removing {int(mask.sum())} summary rows")
    return frame.loc[~mask].reset_index(drop=True)


def select_features(frame: pd.DataFrame, config: DataConfig) -> Tuple[pd.DataFrame, List[str]]:
    """
    Keep the numeric sensor features and the label.

    Bookkeeping columns (user, timestamps, window markers) are dropped, as
    are columns whose missing fraction exceeds ``max_missing_fraction``.
    Rows that still have a missing feature are dropped.

    Returns:
        Cleaned frame and the ordered list of feature columns

    Raises:
        DataLoadError: If no features or no rows survive cleaning
    """
    label = config.label_column
    frame = frame.drop(columns=[c for c in config.bookkeeping_columns if c in frame.columns])

    missing = frame.drop(columns=[label]).isna().mean()
    sparse = missing[missing > config.max_missing_fraction].index.tolist()
    if sparse:
        logger.info(f"Dropping {len(sparse)} mostly-empty columns")
        frame = frame.drop(columns=sparse)

    features = frame.drop(columns=[label]).select_dtypes(include="number").columns.tolist()
    if not features:
        raise DataLoadError("dataset", "No numeric feature columns left after cleaning")

    frame = frame[features + [label]].dropna().reset_index(drop=True)
    if frame.empty:
        raise DataLoadError("dataset", "No complete rows left after cleaning")

    frame[label] = frame[label].astype(str)
    logger.info(f"Kept {len(features)} features over {len(frame)} rows")
    return frame, features


def partition(frame: pd.DataFrame, feature_columns: List[str], config: DataConfig,
              random_seed: int = 42) -> DatasetSplit:
    """
    Stratified split into training and validation sets.

    Raises:
        DataLoadError: If a class is too small to stratify
    """
    X = frame[feature_columns]
    y = frame[config.label_column]

    try:
        X_train, X_valid, y_train, y_valid = train_test_split(
            X, y,
            train_size=config.train_fraction,
            stratify=y,
            random_state=random_seed
        )
    except ValueError as e:
        raise DataLoadError("dataset", f"Cannot partition: {e}", original_error=e)

    logger.info(f"Partitioned into {len(X_train)} training and {len(X_valid)} validation rows")
    return DatasetSplit(
        X_train=X_train.reset_index(drop=True),
        X_valid=X_valid.reset_index(drop=True),
        y_train=y_train.reset_index(drop=True),
        y_valid=y_valid.reset_index(drop=True),
        feature_columns=list(feature_columns)
    )


def prepare_dataset(path: str, config: DataConfig, random_seed: int = 42) -> DatasetSplit:
    """Load, clean and partition the labeled dataset"""
    frame = load_dataset(path, config)
    frame = remove_summary_rows(frame, config)
    frame, features = select_features(frame, config)
    return partition(frame, features, config, random_seed=random_seed)


def load_unlabeled(path: str, feature_columns: List[str],
                   config: DataConfig) -> Tuple[List[str], pd.DataFrame]:
    """
    Load the unlabeled test set aligned to the training features.

    Returns:
        Sample identifiers (``id_column`` values, or row positions when the
        column is absent) and the feature matrix in training column order

    Raises:
        DataLoadError: If a training feature is missing or incomplete, or
                       sample identifiers repeat
    """
    frame = read_csv(path, config)

    absent = [col for col in feature_columns if col not in frame.columns]
    if absent:
        raise DataLoadError(path, f"Missing feature columns: {absent[:5]}")

    X = frame[feature_columns]
    incomplete = X.columns[X.isna().any()].tolist()
    if incomplete:
        raise DataLoadError(path, f"Missing values in feature columns: {incomplete[:5]}")

    if config.id_column in frame.columns:
        id_values = frame[config.id_column].astype(str)
        duplicated = sorted(set(id_values[id_values.duplicated()]))
        if duplicated:
            raise DataLoadError(path, f"Duplicate {config.id_column} values: {duplicated[:5]}")
        ids = id_values.tolist()
    else:
        ids = [str(i) for i in range(1, len(frame) + 1)]

    return ids, X.reset_index(drop=True)
