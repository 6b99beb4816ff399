"""
Feature pipeline for the XGBoost dataset exploration walkthrough.

Public API for loading the dataset, engineering features, one-hot encoding,
and extracting the binary label.
"""
from xgb_insight.feature_pipeline.load import load_arthritis_data
from xgb_insight.feature_pipeline.engineering import (
    create_age_discrete,
    create_age_category,
    drop_identifier,
    create_features
)
from xgb_insight.feature_pipeline.encoding import EncodedMatrix, one_hot_encode
from xgb_insight.feature_pipeline.labels import extract_label, separate_label

__all__ = [
    'load_arthritis_data',
    'create_age_discrete',
    'create_age_category',
    'drop_identifier',
    'create_features',
    'EncodedMatrix',
    'one_hot_encode',
    'extract_label',
    'separate_label',
]
