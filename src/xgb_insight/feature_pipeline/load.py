"""
Data loading module for the XGBoost dataset exploration pipeline.

Handles loading the bundled arthritis trial CSV and casting its columns to
the declared categorical / ordered categorical types.
"""
import pandas as pd
from pathlib import Path
from typing import Optional, Union
import logging

from xgb_insight import config
from xgb_insight.exceptions import require_columns

logger = logging.getLogger(__name__)


def load_arthritis_data(file_path: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """
    Load the arthritis treatment trial dataset.

    Columns:
    - ID: patient identifier
    - Treatment: Placebo / Treated
    - Sex: Female / Male
    - Age: age in years
    - Improved: ordered outcome None < Some < Marked

    Args:
        file_path: Path to the CSV file. If None, uses config.DATA_PATH.

    Returns:
        DataFrame with typed columns (84 rows × 5 columns for the bundled data).

    Raises:
        FileNotFoundError: If the CSV file doesn't exist.
        pd.errors.EmptyDataError: If the CSV file is empty.
        MissingColumnError: If a required column is absent.
        ValueError: If a categorical column holds an undeclared level.

    Example:
        >>> df = load_arthritis_data()
        >>> print(df.shape)
        (84, 5)
    """
    if file_path is None:
        file_path = config.DATA_PATH

    logger.info(f"Loading dataset from: {file_path}")

    try:
        # "None" is an outcome level here, not a missing value
        df = pd.read_csv(file_path, keep_default_na=False, na_values=[""])
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except pd.errors.EmptyDataError:
        logger.error(f"File is empty: {file_path}")
        raise

    require_columns(df, config.REQUIRED_COLUMNS)
    df = cast_column_types(df)

    logger.info(f"Loaded {len(df):,} rows × {len(df.columns)} columns")

    return df


def cast_column_types(df: pd.DataFrame) -> pd.DataFrame:
    """
    Cast categorical columns to pandas Categorical dtypes.

    Treatment and Sex become unordered categoricals; Improved becomes an
    ordered categorical (None < Some < Marked).

    Raises:
        ValueError: If a column holds a value outside its declared levels.
    """
    df = df.copy()

    for column, levels in config.CATEGORICAL_LEVELS.items():
        df[column] = _to_categorical(df[column], levels, ordered=False)

    df[config.OUTCOME_COLUMN] = _to_categorical(
        df[config.OUTCOME_COLUMN], config.OUTCOME_LEVELS, ordered=True
    )

    return df


def _to_categorical(series: pd.Series, levels: list, ordered: bool) -> pd.Series:
    unknown = sorted(set(series.dropna().astype(str)) - set(levels))
    if unknown:
        raise ValueError(
            f"Column '{series.name}' has undeclared levels {unknown}; expected {levels}"
        )
    return series.astype(pd.CategoricalDtype(categories=levels, ordered=ordered))
