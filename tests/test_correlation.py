"""
Correlation checker and reporting tests.

Run with: pytest tests/test_correlation.py -v
"""
import pytest
import pandas as pd
import numpy as np

from xgb_insight.exceptions import DimensionMismatchError, MissingColumnError
from xgb_insight.analysis.correlation import chi_square_test, compare_with_importance
from xgb_insight.analysis.importance import get_feature_importance
from xgb_insight.analysis.plotting import (
    cluster_importance,
    plot_importance,
    format_importance_table
)


@pytest.fixture(scope="module")
def feature_importance(trained_model, encoded):
    return get_feature_importance(trained_model, encoded.feature_names)


class TestChiSquare:
    """Tests for the chi-squared independence test."""

    def test_perfect_association(self):
        """Test a 2×2 table with complete association (Yates corrected)."""
        feature = pd.Series(["x"] * 10 + ["y"] * 10, name="Group")
        label = [1] * 10 + [0] * 10

        result = chi_square_test(feature, label)

        assert result.feature == "Group"
        assert result.statistic == pytest.approx(16.2)
        assert result.dof == 1
        assert result.p_value < 0.001
        assert not result.low_expected_counts

    def test_independence(self):
        """Test that a balanced table gives a zero statistic."""
        feature = ["x", "y"] * 10
        label = [1, 1, 0, 0] * 5

        result = chi_square_test(feature, label, name="Alternating")

        assert result.statistic == pytest.approx(0.0)
        assert result.p_value == pytest.approx(1.0)

    def test_uncorrected_statistic(self):
        """Test Pearson's statistic without continuity correction."""
        feature = ["x"] * 10 + ["y"] * 10
        label = [1] * 10 + [0] * 10
        assert chi_square_test(feature, label, correction=False).statistic == pytest.approx(20.0)

    def test_low_expected_counts_flagged(self):
        """Test that small tables are flagged as unreliable."""
        result = chi_square_test(["x", "x", "y", "y"], [1, 0, 1, 0])
        assert result.low_expected_counts

    def test_length_mismatch_raises(self):
        """Test that mismatched lengths raise DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError):
            chi_square_test(["x", "y", "x"], [1, 0])

    def test_treatment_associated_with_outcome(self, features_df, label):
        """Test that treatment is associated with marked improvement."""
        result = chi_square_test(features_df["Treatment"], label)
        assert result.p_value < 0.05, "Treatment should be associated with the label"


class TestCompareWithImportance:
    """Tests for the chi-squared vs gain comparison table."""

    def test_default_columns(self, features_df, label, feature_importance):
        """Test one row per candidate column, sorted by gain."""
        comparison = compare_with_importance(features_df, label, feature_importance)

        assert sorted(comparison["feature"]) == sorted(["Age", "AgeDiscrete", "AgeCat", "Treatment", "Sex"])
        assert np.all(np.diff(comparison["gain"].to_numpy()) <= 0)
        assert comparison["gain_rank"].min() == 1

    def test_gain_sums_indicator_columns(self, features_df, label, feature_importance):
        """Test that a source column's gain covers all its indicators."""
        comparison = compare_with_importance(
            features_df, label, feature_importance, columns=["Treatment"]
        )
        expected = feature_importance.loc[
            feature_importance["feature"].str.startswith("Treatment="), "gain"
        ].sum()
        assert comparison.loc[0, "gain"] == pytest.approx(expected)

    def test_age_prefix_does_not_capture_derived_columns(self, features_df, label, feature_importance):
        """Test that Age gain excludes AgeDiscrete / AgeCat indicators."""
        comparison = compare_with_importance(
            features_df, label, feature_importance, columns=["Age"]
        )
        expected = feature_importance.loc[feature_importance["feature"] == "Age", "gain"].sum()
        assert comparison.loc[0, "gain"] == pytest.approx(expected)

    def test_missing_column_raises(self, features_df, label, feature_importance):
        """Test that an unknown column raises MissingColumnError."""
        with pytest.raises(MissingColumnError):
            compare_with_importance(features_df, label, feature_importance, columns=["Weight"])

    def test_label_mismatch_raises(self, features_df, label, feature_importance):
        """Test that a short label raises DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError):
            compare_with_importance(features_df, label[:-1], feature_importance)


class TestReporting:
    """Tests for the clustered bar chart and text table."""

    def test_clusters_ranked_by_gain(self):
        """Test that cluster 1 holds the largest gains."""
        clusters = cluster_importance(np.array([0.5, 0.49, 0.1, 0.01]), n_clusters=2)
        assert clusters.tolist() == [1, 1, 2, 2]

    def test_single_cluster_for_constant_gain(self):
        """Test that identical gains collapse into one cluster."""
        assert cluster_importance(np.array([0.25, 0.25, 0.25])).tolist() == [1, 1, 1]

    def test_plot_saved(self, feature_importance, tmp_path):
        """Test that the chart is written to disk."""
        save_path = tmp_path / "importance.png"
        plot_df = plot_importance(feature_importance, save_path=save_path)

        assert save_path.exists()
        assert plot_df.loc[0, "cluster"] == 1, "Top feature should be in the first cluster"

    def test_plot_split_labels(self, trained_model, encoded, tmp_path):
        """Test that split tables are labelled with their condition."""
        from xgb_insight.analysis.importance import get_split_importance

        split_df = get_split_importance(trained_model, encoded.feature_names)
        plot_df = plot_importance(split_df, top_n=len(split_df))
        assert plot_df["label"].str.contains(" < ").all()

        indicator_labels = plot_df.loc[plot_df["feature"].str.contains("=", regex=False), "label"]
        assert not indicator_labels.empty
        assert indicator_labels.str.endswith(" < 1").all(), "Indicator splits should read '< 1'"

    def test_plot_empty_raises(self):
        """Test that an empty table cannot be plotted."""
        with pytest.raises(ValueError):
            plot_importance(pd.DataFrame(columns=["feature", "gain"]))

    def test_format_table(self, feature_importance):
        """Test the text rendering of the ranked table."""
        text = format_importance_table(feature_importance, top_n=3)
        assert feature_importance.loc[0, "feature"] in text
        assert len(text.splitlines()) == min(3, len(feature_importance)) + 1
