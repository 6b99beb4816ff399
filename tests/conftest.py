"""
Shared fixtures for the XGBoost dataset exploration tests.
"""
import matplotlib

matplotlib.use("Agg")

import pytest

from xgb_insight import config
from xgb_insight.feature_pipeline import (
    load_arthritis_data,
    create_features,
    one_hot_encode,
    extract_label
)
from xgb_insight.training_pipeline.train import TrainingConfig, train_model


@pytest.fixture(scope="session")
def arthritis_df():
    """Bundled arthritis trial data, typed."""
    return load_arthritis_data()


@pytest.fixture(scope="session")
def features_df(arthritis_df):
    """Arthritis data after feature engineering (ID dropped, age features added)."""
    return create_features(arthritis_df)


@pytest.fixture(scope="session")
def encoded(features_df):
    """Full-rank-agnostic encoding: every observed level kept."""
    return one_hot_encode(features_df, config.OUTCOME_COLUMN, drop_first=False)


@pytest.fixture(scope="session")
def label(features_df):
    """Marked improvement as the positive class."""
    return extract_label(features_df, config.OUTCOME_COLUMN, config.POSITIVE_OUTCOME)


@pytest.fixture(scope="session")
def trained_model(encoded, label):
    """Model trained with the walkthrough parameters."""
    return train_model(encoded, label, TrainingConfig())
