"""
Analysis of the trained model: importance tables, chi-squared checks, plots.
"""
from xgb_insight.analysis.importance import (
    get_split_importance,
    get_feature_importance,
    split_condition_counts
)
from xgb_insight.analysis.correlation import (
    ChiSquareResult,
    chi_square_test,
    compare_with_importance
)
from xgb_insight.analysis.plotting import (
    cluster_importance,
    plot_importance,
    format_importance_table
)

__all__ = [
    'get_split_importance',
    'get_feature_importance',
    'split_condition_counts',
    'ChiSquareResult',
    'chi_square_test',
    'compare_with_importance',
    'cluster_importance',
    'plot_importance',
    'format_importance_table',
]
