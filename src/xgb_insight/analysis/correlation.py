"""
Correlation check module for the XGBoost dataset exploration pipeline.

Runs a chi-squared independence test between candidate features and the
label so the statistical association can be read next to the model's gain
ranking. Each value of a feature is treated as its own category.
"""
import pandas as pd
import numpy as np
import logging
from dataclasses import dataclass, asdict
from scipy import stats
from typing import List, Optional, Sequence

from xgb_insight import config
from xgb_insight.exceptions import DimensionMismatchError, require_columns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChiSquareResult:
    """Outcome of one chi-squared independence test."""
    feature: str
    statistic: float
    p_value: float
    dof: int
    low_expected_counts: bool


def chi_square_test(
    feature: Sequence,
    label: Sequence,
    name: Optional[str] = None,
    correction: bool = True
) -> ChiSquareResult:
    """
    Chi-squared test of independence between a feature and the label.

    Builds the contingency table with pandas.crosstab and delegates to
    scipy.stats.chi2_contingency. Yates' continuity correction applies to
    2×2 tables when correction=True. A warning is logged when any expected
    cell count is below config.CHI_SQUARE_MIN_EXPECTED, as the approximation
    may then be inaccurate.

    Args:
        feature: Feature values, one per observation.
        label: Label values, one per observation.
        name: Name to report. Defaults to the Series name or 'feature'.
        correction: Apply Yates' continuity correction to 2×2 tables.

    Returns:
        ChiSquareResult with the statistic, p-value and degrees of freedom.

    Raises:
        DimensionMismatchError: If feature and label lengths differ.

    Example:
        >>> result = chi_square_test(df['AgeCat'], y)
        >>> print(f"X-squared = {result.statistic:.4f}, p-value = {result.p_value:.4f}")
    """
    if name is None:
        name = getattr(feature, 'name', None) or 'feature'

    feature_values = np.asarray(feature, dtype=object)
    label_values = np.asarray(label)
    if len(feature_values) != len(label_values):
        raise DimensionMismatchError(len(feature_values), len(label_values))

    contingency = pd.crosstab(feature_values, label_values)
    statistic, p_value, dof, expected = stats.chi2_contingency(contingency, correction=correction)

    low_expected = bool((np.asarray(expected) < config.CHI_SQUARE_MIN_EXPECTED).any())
    if low_expected:
        logger.warning(
            f"Chi-squared approximation may be incorrect for {name}: "
            f"expected counts below {config.CHI_SQUARE_MIN_EXPECTED}"
        )

    result = ChiSquareResult(
        feature=str(name),
        statistic=float(statistic),
        p_value=float(p_value),
        dof=int(dof),
        low_expected_counts=low_expected
    )

    logger.info(
        f"Chi-squared test {name}: X-squared = {result.statistic:.4f}, "
        f"df = {result.dof}, p-value = {result.p_value:.4g}"
    )

    return result


def _source_gain(feature_importance: pd.DataFrame, column: str) -> float:
    """Total gain of the encoded columns derived from one source column."""
    prefix = f"{column}{config.ONE_HOT_SEPARATOR}"
    mask = feature_importance['feature'].map(
        lambda name: name == column or name.startswith(prefix)
    )
    return float(feature_importance.loc[mask, 'gain'].sum()) if len(feature_importance) else 0.0


def compare_with_importance(
    df: pd.DataFrame,
    label: Sequence,
    feature_importance: pd.DataFrame,
    columns: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Tabulate chi-squared results next to the model-derived gain ranking.

    Gain of a source column is the sum over its indicator columns, so
    Treatment covers Treatment=Placebo and Treatment=Treated.

    Args:
        df: DataFrame with the candidate source columns.
        label: Label vector, one per row of df.
        feature_importance: Output of get_feature_importance.
        columns: Source columns to compare. If None, uses config.CHI_SQUARE_COLUMNS.

    Returns:
        DataFrame with columns feature, gain, gain_rank, statistic, p_value,
        dof, low_expected_counts; sorted by descending gain.

    Raises:
        MissingColumnError: If a requested column is absent from df.
        DimensionMismatchError: If label length differs from df.
    """
    if columns is None:
        columns = config.CHI_SQUARE_COLUMNS

    require_columns(df, columns)
    if len(df) != len(label):
        raise DimensionMismatchError(len(df), len(label))

    records = []
    for column in columns:
        result = asdict(chi_square_test(df[column], label, name=column))
        result['gain'] = _source_gain(feature_importance, column)
        records.append(result)

    comparison = pd.DataFrame(records)
    comparison['gain_rank'] = comparison['gain'].rank(ascending=False, method='min').astype(int)
    comparison = comparison.sort_values(
        ['gain', 'statistic'], ascending=[False, False], kind='mergesort'
    ).reset_index(drop=True)

    return comparison[
        ['feature', 'gain', 'gain_rank', 'statistic', 'p_value', 'dof', 'low_expected_counts']
    ]
