"""
Label extraction module for the XGBoost dataset exploration pipeline.

Turns the outcome column into the 0/1 vector the binary objective expects.
"""
import pandas as pd
import numpy as np
from typing import Any, Optional, Tuple
import logging

from xgb_insight import config
from xgb_insight.exceptions import require_columns

logger = logging.getLogger(__name__)


def extract_label(
    df: pd.DataFrame,
    outcome_column: Optional[str] = None,
    positive_value: Optional[Any] = None
) -> np.ndarray:
    """
    Build a binary label vector from the outcome column.

    Rule: 1 if the outcome equals positive_value, else 0. For the arthritis
    data only 'Marked' improvement counts as positive.

    Args:
        df: Input DataFrame with the outcome column.
        outcome_column: Column to read. If None, uses config.OUTCOME_COLUMN.
        positive_value: Value mapped to 1. If None, uses config.POSITIVE_OUTCOME.

    Returns:
        Integer numpy array of 0/1, same length as df.

    Raises:
        MissingColumnError: If the outcome column doesn't exist.

    Example:
        >>> y = extract_label(df)
        >>> print(y.sum())
        28
    """
    if outcome_column is None:
        outcome_column = config.OUTCOME_COLUMN
    if positive_value is None:
        positive_value = config.POSITIVE_OUTCOME

    require_columns(df, [outcome_column])

    # Compare as objects so a value outside a Categorical's levels yields 0s
    label = (df[outcome_column].astype(object) == positive_value).astype(int).to_numpy()

    n_positive = int(label.sum())
    if n_positive == 0:
        logger.warning(f"No rows have {outcome_column} == {positive_value!r}; label is all zeros")

    logger.info(
        f"Extracted label from {outcome_column} (positive = {positive_value!r}): "
        f"{n_positive:,} positive, {len(label) - n_positive:,} negative"
    )

    return label


def separate_label(
    df: pd.DataFrame,
    outcome_column: Optional[str] = None,
    positive_value: Optional[Any] = None
) -> Tuple[pd.DataFrame, np.ndarray]:
    """
    Split a DataFrame into features (outcome removed) and the label vector.

    Returns:
        Tuple of (features DataFrame without the outcome column, label array).
    """
    if outcome_column is None:
        outcome_column = config.OUTCOME_COLUMN

    label = extract_label(df, outcome_column, positive_value)
    features = df.drop(columns=[outcome_column])

    return features, label
