"""
Configuration module for the XGBoost dataset exploration pipeline.

Contains all constants, file paths, column names, and model parameters used
throughout the feature engineering, training, and importance reporting stages.
"""
import os
from pathlib import Path
from typing import Dict, List

# ============================================================================
# FILE PATHS
# ============================================================================
PACKAGE_DIR = Path(__file__).parent
DATA_PATH = Path(os.getenv('XGB_INSIGHT_DATA_PATH', PACKAGE_DIR / "data" / "arthritis.csv"))
# Relative path: resolved against the working directory when outputs are written
OUTPUT_DIR = Path(os.getenv('XGB_INSIGHT_OUTPUT_DIR', "outputs"))

# Output artifact names (written under OUTPUT_DIR)
MODEL_FILENAME = "xgb_model.joblib"
SPLIT_IMPORTANCE_FILENAME = "split_importance.csv"
FEATURE_IMPORTANCE_FILENAME = "feature_importance.csv"
CHI_SQUARE_FILENAME = "chi_square.csv"
IMPORTANCE_PLOT_FILENAME = "importance.png"

# ============================================================================
# LOGGING
# ============================================================================
LOG_LEVEL = os.getenv('XGB_INSIGHT_LOG_LEVEL', 'INFO')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# ============================================================================
# DATASET DEFINITION
# ============================================================================
ID_COLUMN = "ID"
TREATMENT_COLUMN = "Treatment"
SEX_COLUMN = "Sex"
AGE_COLUMN = "Age"
OUTCOME_COLUMN = "Improved"

REQUIRED_COLUMNS: List[str] = [
    ID_COLUMN, TREATMENT_COLUMN, SEX_COLUMN, AGE_COLUMN, OUTCOME_COLUMN
]

# Unordered categoricals and their declared levels
CATEGORICAL_LEVELS: Dict[str, List[str]] = {
    TREATMENT_COLUMN: ["Placebo", "Treated"],
    SEX_COLUMN: ["Female", "Male"],
}

# Improved is an ordered factor: None < Some < Marked
OUTCOME_LEVELS: List[str] = ["None", "Some", "Marked"]

# ============================================================================
# TARGET DEFINITION
# ============================================================================
# Only a marked improvement counts as a positive outcome
POSITIVE_OUTCOME = "Marked"

# ============================================================================
# FEATURE ENGINEERING
# ============================================================================
AGE_DISCRETE_COLUMN = "AgeDiscrete"
AGE_BUCKET_WIDTH = 10

AGE_CATEGORY_COLUMN = "AgeCat"
AGE_CUTOFF = 30
AGE_CATEGORY_ABOVE = "Old"
AGE_CATEGORY_BELOW = "Young"

# ============================================================================
# CATEGORICAL ENCODING
# ============================================================================
# Separator between source column and level in indicator column labels
ONE_HOT_SEPARATOR = "="

# Keep every level by default so each level gets its own importance entry
ONE_HOT_DROP_FIRST = False

# ============================================================================
# TRAINING CONFIGURATION
# ============================================================================
RANDOM_STATE = 42
SUPPORTED_OBJECTIVES = ("binary:logistic",)

# Boosting parameters used throughout the walkthrough
XGB_PARAMS = {
    "max_depth": 4,
    "learning_rate": 1.0,
    "n_rounds": 10,
    "objective": "binary:logistic",
    "n_jobs": 2,
}

# Random forest comparison: one round of many subsampled parallel trees
RANDOM_FOREST_PARAMS = {
    "max_depth": 4,
    "learning_rate": 1.0,
    "n_rounds": 1,
    "num_parallel_tree": 1000,
    "subsample": 0.5,
    "colsample_bynode": 0.5,
}

# ============================================================================
# REPORTING
# ============================================================================
IMPORTANCE_TOP_N = 20
IMPORTANCE_N_CLUSTERS = 3

# Expected cell count below which the chi-squared approximation is unreliable
CHI_SQUARE_MIN_EXPECTED = 5

# Columns compared against the model's gain ranking
CHI_SQUARE_COLUMNS: List[str] = [
    AGE_COLUMN, AGE_DISCRETE_COLUMN, AGE_CATEGORY_COLUMN,
    TREATMENT_COLUMN, SEX_COLUMN,
]
