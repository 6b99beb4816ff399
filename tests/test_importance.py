"""
Importance reporter tests: ordering, coverage invariants, correlated features.

Run with: pytest tests/test_importance.py -v
"""
import pytest
import pandas as pd
import numpy as np
import xgboost as xgb

from xgb_insight.exceptions import DimensionMismatchError
from xgb_insight.analysis.importance import (
    get_split_importance,
    get_feature_importance,
    split_condition_counts
)
from xgb_insight.training_pipeline.train import TrainingConfig, as_model_input, train_model


@pytest.fixture(scope="module")
def split_importance(trained_model, encoded, label):
    """Split importance with coverage columns on the bundled data."""
    return get_split_importance(trained_model, encoded.feature_names, encoded, label)


@pytest.fixture(scope="module")
def correlated_data():
    """Two identical binary features A and B that predict the label, plus noise."""
    rng = np.random.default_rng(0)
    n = 400
    a = rng.integers(0, 2, size=n)
    noise = rng.integers(0, 2, size=n)
    flip = rng.random(n) < 0.1
    y = np.where(flip, 1 - a, a)
    X = np.column_stack([a, a, noise]).astype(float)
    return X, y, ["A", "B", "Noise"]


class TestSplitConditionCounts:
    """Tests for the strict less-than split condition."""

    def test_indicator_absent(self):
        """Test that '< 1' on an indicator counts zeros."""
        assert split_condition_counts([0, 1, 0, 1], 1.0, [1, 1, 0, 0]) == (2, 1)

    def test_negation_counts_present(self):
        """Test that negate counts value >= threshold."""
        assert split_condition_counts([0, 1, 0, 1], 1.0, [1, 1, 0, 0], negate=True) == (2, 1)
        assert split_condition_counts([0, 1, 1, 1], 1.0, [0, 1, 1, 0], negate=True) == (3, 2)

    def test_threshold_is_strict(self):
        """Test that a value equal to the threshold is not counted."""
        assert split_condition_counts([30, 31, 29], 30, [1, 1, 1]) == (1, 1)

    def test_length_mismatch_raises(self):
        """Test that mismatched lengths raise DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError):
            split_condition_counts([0, 1], 1.0, [1])


class TestSplitImportance:
    """Tests for per-split importance records."""

    def test_sorted_by_gain(self, split_importance):
        """Test that records are ordered by non-increasing gain."""
        gains = split_importance["gain"].to_numpy()
        assert len(gains) > 0, "Model should contain splits"
        assert np.all(np.diff(gains) <= 0), "Gain should be non-increasing"

    def test_shares_sum_to_one(self, split_importance):
        """Test that gain, cover and frequency are normalised."""
        for column in ("gain", "cover", "frequency"):
            assert split_importance[column].sum() == pytest.approx(1.0)

    def test_coverage_fraction_in_unit_interval(self, split_importance):
        """Test coverage fractions lie in [0, 1]."""
        for column in ("coverage_fraction", "positive_coverage_fraction"):
            assert split_importance[column].between(0, 1).all(), f"{column} outside [0, 1]"

    def test_positive_coverage_bounded_by_coverage(self, split_importance):
        """Test that positive coverage never exceeds coverage."""
        assert (split_importance["positive_coverage_count"] <= split_importance["coverage_count"]).all()

    def test_indicator_coverage_is_informative(self, split_importance, encoded, label):
        """Test that an indicator split at the 0/1 boundary covers only the rows where it is 0."""
        indicators = split_importance[split_importance["feature"].str.contains("=", regex=False)]
        assert not indicators.empty, "Model should split on at least one indicator"

        for _, row in indicators.iterrows():
            values = encoded.column(row["feature"])
            assert 0 < row["split"] <= 1, f"{row['feature']} split should sit between 0 and 1"
            assert row["coverage_count"] == (values == 0).sum()
            assert row["positive_coverage_count"] == ((values == 0) & (label == 1)).sum()
            assert 0 < row["coverage_count"] < len(label)

    def test_coverage_matches_model_routing(self, trained_model, split_importance, encoded):
        """Test that coverage equals the rows the first tree sends down its root's yes branch."""
        booster = trained_model.get_booster()
        tree = booster.trees_to_dataframe()
        tree = tree[tree["Tree"] == 0].set_index("ID")
        root = tree[tree["Node"] == 0].iloc[0]
        assert root["Feature"] != "Leaf", "First tree should split at its root"

        yes_branch = set()
        pending = [root["Yes"]]
        while pending:
            node_id = pending.pop()
            node = tree.loc[node_id]
            if node["Feature"] == "Leaf":
                yes_branch.add(int(node["Node"]))
            else:
                pending.extend([node["Yes"], node["No"]])

        leaves = booster.predict(xgb.DMatrix(as_model_input(encoded)), pred_leaf=True)
        routed_yes = int(np.isin(leaves[:, 0], list(yes_branch)).sum())

        feature = encoded.feature_names[int(root["Feature"][1:])]
        record = split_importance[
            (split_importance["feature"] == feature) & (split_importance["split"] == root["Split"])
        ]
        assert len(record) == 1
        assert record["coverage_count"].iloc[0] == routed_yes

    def test_negated_coverage_is_complement(self, trained_model, encoded, label, split_importance):
        """Test that negated coverage counts the remaining observations."""
        negated = get_split_importance(trained_model, encoded.feature_names, encoded, label, negate=True)
        merged = split_importance.merge(negated, on=["feature", "split"], suffixes=("", "_neg"))
        assert (merged["coverage_count"] + merged["coverage_count_neg"] == len(label)).all()
        assert (
            merged["positive_coverage_count"] + merged["positive_coverage_count_neg"] == label.sum()
        ).all()

    def test_features_use_encoded_labels(self, split_importance, encoded):
        """Test that record features are readable column labels."""
        assert set(split_importance["feature"]) <= set(encoded.feature_names)

    def test_without_data_has_no_coverage(self, trained_model, encoded):
        """Test that coverage columns appear only when X and y are given."""
        importance_df = get_split_importance(trained_model, encoded.feature_names)
        assert importance_df.columns.tolist() == ["feature", "split", "gain", "cover", "frequency", "n_splits"]

    def test_x_without_y_raises(self, trained_model, encoded):
        """Test that X and y must come together."""
        with pytest.raises(ValueError):
            get_split_importance(trained_model, encoded.feature_names, encoded)

    def test_label_mismatch_raises(self, trained_model, encoded, label):
        """Test that a short label vector raises DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError):
            get_split_importance(trained_model, encoded.feature_names, encoded, label[:-1])

    def test_wrong_feature_names_raise(self, trained_model, encoded):
        """Test that a name list of the wrong length is rejected."""
        with pytest.raises(ValueError):
            get_split_importance(trained_model, encoded.feature_names[:-1])


class TestFeatureImportance:
    """Tests for per-feature importance."""

    def test_aggregates_splits(self, trained_model, encoded, split_importance):
        """Test that feature gain equals the sum of its split gains."""
        feature_df = get_feature_importance(trained_model, encoded.feature_names)
        split_totals = split_importance.groupby("feature")["gain"].sum()

        assert feature_df["feature"].is_unique
        for feature, gain in zip(feature_df["feature"], feature_df["gain"]):
            assert gain == pytest.approx(split_totals[feature])

    def test_sorted_and_normalised(self, trained_model, encoded):
        """Test ordering and normalisation."""
        feature_df = get_feature_importance(trained_model, encoded.feature_names)
        assert np.all(np.diff(feature_df["gain"].to_numpy()) <= 0)
        assert feature_df["frequency"].sum() == pytest.approx(1.0)

    def test_correlated_features_concentrate_gain(self, correlated_data):
        """Test that boosting puts the gain of two identical features on one of them."""
        X, y, names = correlated_data
        model = train_model(X, y, TrainingConfig(max_depth=2, learning_rate=0.3, n_rounds=20))

        feature_df = get_feature_importance(model, names).set_index("feature")["gain"]
        gain_a = feature_df.get("A", 0.0)
        gain_b = feature_df.get("B", 0.0)

        assert gain_a + gain_b > 0.5, "The duplicated signal should dominate the model"
        assert max(gain_a, gain_b) / (gain_a + gain_b) >= 0.9, \
            "Gain should concentrate on one of the duplicated features"

    def test_default_model_names_map_to_labels(self, correlated_data):
        """Test that default f0/f1 model names map onto the given labels."""
        X, y, _ = correlated_data
        model = train_model(X, y, TrainingConfig(max_depth=1, n_rounds=2))
        feature_df = get_feature_importance(model, ["first", "second", "third"])
        assert set(feature_df["feature"]) <= {"first", "second", "third"}
        assert isinstance(feature_df, pd.DataFrame)
