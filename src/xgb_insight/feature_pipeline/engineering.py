"""
Feature engineering module for the XGBoost dataset exploration pipeline.

Derives coarse and binary age features and removes the patient identifier.
New features are categorical so the encoder expands them into indicators.
"""
import pandas as pd
from typing import Optional
import logging

from xgb_insight import config
from xgb_insight.exceptions import require_columns

logger = logging.getLogger(__name__)


def create_age_discrete(
    df: pd.DataFrame,
    source_column: Optional[str] = None,
    bucket_width: Optional[int] = None
) -> pd.DataFrame:
    """
    Create a coarse age bucket feature.

    Feature created:
    - AgeDiscrete: Age // 10 as an unordered categorical (27 → 2, 63 → 6)

    Args:
        df: Input DataFrame with the numeric source column.
        source_column: Numeric column to bucket. If None, uses config.AGE_COLUMN.
        bucket_width: Bucket width. If None, uses config.AGE_BUCKET_WIDTH.

    Returns:
        DataFrame with AgeDiscrete feature.

    Raises:
        MissingColumnError: If the source column doesn't exist.

    Example:
        >>> df_eng = create_age_discrete(df)
        >>> print(sorted(df_eng['AgeDiscrete'].unique()))
        [2, 3, 4, 5, 6, 7]
    """
    if source_column is None:
        source_column = config.AGE_COLUMN
    if bucket_width is None:
        bucket_width = config.AGE_BUCKET_WIDTH

    require_columns(df, [source_column])
    df = df.copy()

    buckets = (df[source_column] // bucket_width).astype(int)
    df[config.AGE_DISCRETE_COLUMN] = pd.Categorical(buckets, categories=sorted(buckets.unique()))

    logger.info(
        f"Created {config.AGE_DISCRETE_COLUMN} feature "
        f"({df[config.AGE_DISCRETE_COLUMN].nunique()} buckets of width {bucket_width})"
    )

    return df


def create_age_category(
    df: pd.DataFrame,
    source_column: Optional[str] = None,
    cutoff: Optional[float] = None
) -> pd.DataFrame:
    """
    Create a binary age split feature.

    Feature created:
    - AgeCat: 'Old' if Age > 30, else 'Young'

    The cutoff is deliberately arbitrary; comparing its importance against
    AgeDiscrete and raw Age shows how the model treats redundant encodings
    of the same information.

    Args:
        df: Input DataFrame with the numeric source column.
        source_column: Numeric column to split. If None, uses config.AGE_COLUMN.
        cutoff: Threshold value. If None, uses config.AGE_CUTOFF.

    Returns:
        DataFrame with AgeCat feature.

    Raises:
        MissingColumnError: If the source column doesn't exist.
    """
    if source_column is None:
        source_column = config.AGE_COLUMN
    if cutoff is None:
        cutoff = config.AGE_CUTOFF

    require_columns(df, [source_column])
    df = df.copy()

    labels = df[source_column].gt(cutoff).map({
        True: config.AGE_CATEGORY_ABOVE,
        False: config.AGE_CATEGORY_BELOW,
    })
    df[config.AGE_CATEGORY_COLUMN] = pd.Categorical(
        labels, categories=[config.AGE_CATEGORY_ABOVE, config.AGE_CATEGORY_BELOW]
    )

    n_above = int((labels == config.AGE_CATEGORY_ABOVE).sum())
    logger.info(
        f"Created {config.AGE_CATEGORY_COLUMN} feature "
        f"({n_above:,} above {cutoff}, {len(df) - n_above:,} at or below)"
    )

    return df


def drop_identifier(df: pd.DataFrame, id_column: Optional[str] = None) -> pd.DataFrame:
    """
    Drop the identifier column, which carries no predictive information.

    Raises:
        MissingColumnError: If the identifier column doesn't exist.
    """
    if id_column is None:
        id_column = config.ID_COLUMN

    require_columns(df, [id_column])
    df = df.drop(columns=[id_column])

    logger.info(f"Dropped identifier column {id_column}")

    return df


def create_features(df: pd.DataFrame, source_column: Optional[str] = None) -> pd.DataFrame:
    """
    Execute full feature engineering pipeline.

    Orchestrates all feature creation steps:
    1. AgeDiscrete bucket
    2. AgeCat binary split
    3. Drop ID

    Args:
        df: Input DataFrame from the load module.
        source_column: Numeric column to derive features from.

    Returns:
        DataFrame with engineered features (84 rows × 6 columns for the bundled data).

    Example:
        >>> df_features = create_features(df)
        >>> print(df_features.columns.tolist())
        ['Treatment', 'Sex', 'Age', 'Improved', 'AgeDiscrete', 'AgeCat']
    """
    logger.info("Starting feature engineering pipeline")

    df = create_age_discrete(df, source_column=source_column)
    df = create_age_category(df, source_column=source_column)
    df = drop_identifier(df)

    logger.info(f"Feature engineering complete. Shape: {df.shape}")

    return df
