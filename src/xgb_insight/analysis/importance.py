"""
Feature importance module for the XGBoost dataset exploration pipeline.

Reads the trained trees and reports how much each feature (and each split
threshold of a feature) contributed to the model:
- gain: total loss reduction of the splits, normalised to sum to 1
- cover: total hessian cover of the splits, normalised to sum to 1
- frequency: share of all splits using the feature
- n_splits: raw number of splits

Given the training matrix and labels, split records are augmented with the
number of observations satisfying the split condition (value < threshold)
and how many of those have a positive label. The matrix is read the way the
model saw it (see as_model_input), so the counts match the rows the trees
send down each split's "yes" branch.
"""
import re
import pandas as pd
import numpy as np
import logging
from typing import Any, List, Optional, Sequence, Tuple

from xgb_insight.exceptions import DimensionMismatchError
from xgb_insight.training_pipeline.train import as_model_input

logger = logging.getLogger(__name__)

_DEFAULT_NAME = re.compile(r"^f(\d+)$")

SPLIT_COLUMNS = ['feature', 'split', 'gain', 'cover', 'frequency', 'n_splits']
COVERAGE_COLUMNS = [
    'coverage_count', 'coverage_fraction',
    'positive_coverage_count', 'positive_coverage_fraction',
]
FEATURE_COLUMNS = ['feature', 'gain', 'cover', 'frequency']


def _as_booster(model: Any):
    return model.get_booster() if hasattr(model, 'get_booster') else model


def _resolve_feature_name(name: str, feature_names: List[str]) -> str:
    if name in feature_names:
        return name
    match = _DEFAULT_NAME.match(name)
    if match and int(match.group(1)) < len(feature_names):
        return feature_names[int(match.group(1))]
    raise ValueError(f"Model feature '{name}' cannot be mapped to the given feature names")


def _tree_splits(model: Any, feature_names: Sequence[str]) -> pd.DataFrame:
    """Every non-leaf node of every tree, with features mapped to labels."""
    booster = _as_booster(model)
    feature_names = list(feature_names)

    n_features = booster.num_features()
    if n_features != len(feature_names):
        raise ValueError(
            f"Model was trained on {n_features} features but {len(feature_names)} names were given"
        )

    trees = booster.trees_to_dataframe()
    splits = trees[trees['Feature'] != 'Leaf'].copy()
    splits['Feature'] = splits['Feature'].map(
        lambda name: _resolve_feature_name(name, feature_names)
    )

    return splits


def _normalise(values: pd.Series) -> pd.Series:
    total = values.sum()
    return values / total if total > 0 else values


def _sort_by_gain(df: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    return df.sort_values(
        ['gain'] + keys,
        ascending=[False] + [True] * len(keys),
        kind='mergesort'
    ).reset_index(drop=True)


def split_condition_counts(
    values: Sequence[float],
    threshold: float,
    label: Sequence[int],
    negate: bool = False
) -> Tuple[int, int]:
    """
    Count observations satisfying a split condition.

    The condition is the strict comparison value < threshold used by the
    tree. For a 0/1 indicator split at 1 this means "indicator is 0";
    negate=True counts the complement (value >= threshold, "indicator is 1").

    Args:
        values: Feature values, one per observation.
        threshold: Split threshold.
        label: Binary labels, one per observation.
        negate: Count value >= threshold instead.

    Returns:
        Tuple of (observations satisfying the condition,
        observations satisfying it with a positive label).

    Raises:
        DimensionMismatchError: If values and label lengths differ.

    Example:
        >>> split_condition_counts([0, 1, 0, 1], 1.0, [1, 1, 0, 0])
        (2, 1)
    """
    values = np.asarray(values, dtype=float)
    label = np.asarray(label)
    if len(values) != len(label):
        raise DimensionMismatchError(len(values), len(label))

    satisfied = values < threshold
    if negate:
        satisfied = ~satisfied

    return int(satisfied.sum()), int((satisfied & (label == 1)).sum())


def get_split_importance(
    model: Any,
    feature_names: Sequence[str],
    X: Optional[Any] = None,
    y: Optional[Sequence[int]] = None,
    negate: bool = False
) -> pd.DataFrame:
    """
    Importance per (feature, split threshold), sorted by descending gain.

    Args:
        model: Trained XGBClassifier or Booster.
        feature_names: Column labels of the training matrix, in order.
        X: Optional training matrix (EncodedMatrix, sparse or dense).
        y: Optional label vector; required together with X.
        negate: Evaluate coverage for value >= threshold instead of <.

    Returns:
        DataFrame with columns feature, split, gain, cover, frequency,
        n_splits, plus coverage_count, coverage_fraction,
        positive_coverage_count, positive_coverage_fraction when X and y
        are given.

    Raises:
        ValueError: If only one of X / y is given, or the names don't match
            the model.
        DimensionMismatchError: If X rows and y length differ.

    Example:
        >>> split_df = get_split_importance(model, encoded.feature_names, encoded, y)
        >>> print(split_df[['feature', 'split', 'gain']].head(3))
    """
    if (X is None) != (y is None):
        raise ValueError("X and y must be given together to compute coverage")

    feature_names = list(feature_names)
    splits = _tree_splits(model, feature_names)

    if splits.empty:
        logger.warning("Model contains no splits; importance table is empty")
        columns = SPLIT_COLUMNS + (COVERAGE_COLUMNS if X is not None else [])
        return pd.DataFrame(columns=columns)

    importance_df = (
        splits.groupby(['Feature', 'Split'], sort=False)
        .agg(gain=('Gain', 'sum'), cover=('Cover', 'sum'), n_splits=('Gain', 'size'))
        .reset_index()
        .rename(columns={'Feature': 'feature', 'Split': 'split'})
    )
    importance_df['gain'] = _normalise(importance_df['gain'])
    importance_df['cover'] = _normalise(importance_df['cover'])
    importance_df['frequency'] = importance_df['n_splits'] / importance_df['n_splits'].sum()
    importance_df = _sort_by_gain(importance_df[SPLIT_COLUMNS], ['feature', 'split'])

    if X is not None:
        importance_df = _add_coverage(importance_df, X, y, feature_names, negate)

    logger.info(
        f"Split importance extracted: {len(importance_df)} (feature, split) records "
        f"from {splits['Tree'].nunique()} trees"
    )

    return importance_df


def _add_coverage(
    importance_df: pd.DataFrame,
    X: Any,
    y: Sequence[int],
    feature_names: List[str],
    negate: bool
) -> pd.DataFrame:
    matrix = as_model_input(X)
    y = np.asarray(y)
    if matrix.shape[0] != len(y):
        raise DimensionMismatchError(matrix.shape[0], len(y))
    if matrix.shape[1] != len(feature_names):
        raise ValueError(
            f"Matrix has {matrix.shape[1]} columns but {len(feature_names)} names were given"
        )

    n_obs = len(y)
    counts = []
    for feature, split in zip(importance_df['feature'], importance_df['split']):
        values = matrix[:, feature_names.index(feature)]
        counts.append(split_condition_counts(values, split, y, negate=negate))

    importance_df = importance_df.copy()
    importance_df['coverage_count'] = [covered for covered, _ in counts]
    importance_df['positive_coverage_count'] = [positive for _, positive in counts]
    importance_df['coverage_fraction'] = importance_df['coverage_count'] / n_obs
    importance_df['positive_coverage_fraction'] = importance_df['positive_coverage_count'] / n_obs

    return importance_df[SPLIT_COLUMNS + COVERAGE_COLUMNS]


def get_feature_importance(model: Any, feature_names: Sequence[str]) -> pd.DataFrame:
    """
    Importance aggregated per feature, sorted by descending gain.

    Features never used in a split are omitted.

    Args:
        model: Trained XGBClassifier or Booster.
        feature_names: Column labels of the training matrix, in order.

    Returns:
        DataFrame with columns feature, gain, cover, frequency (each sums to 1).

    Example:
        >>> importance_df = get_feature_importance(model, encoded.feature_names)
        >>> print(importance_df.head())
    """
    splits = _tree_splits(model, feature_names)

    if splits.empty:
        logger.warning("Model contains no splits; importance table is empty")
        return pd.DataFrame(columns=FEATURE_COLUMNS)

    importance_df = (
        splits.groupby('Feature', sort=False)
        .agg(gain=('Gain', 'sum'), cover=('Cover', 'sum'), frequency=('Gain', 'size'))
        .reset_index()
        .rename(columns={'Feature': 'feature'})
    )
    for column in ('gain', 'cover', 'frequency'):
        importance_df[column] = _normalise(importance_df[column].astype(float))
    importance_df = _sort_by_gain(importance_df[FEATURE_COLUMNS], ['feature'])

    logger.info(f"Feature importance extracted for {len(importance_df)} features")

    return importance_df
