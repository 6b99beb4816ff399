"""
Model training module for the XGBoost dataset exploration pipeline.

Trains a boosted-tree binary classifier on the indicator matrix, densified
so that absent indicators are zeros rather than missing values.
A random-forest configuration of the same library is available for the
correlated-feature comparison.
"""
import numpy as np
import joblib
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from scipy import sparse
from typing import Any, Dict, Optional, Sequence, Union
from xgboost import XGBClassifier

from xgb_insight import config
from xgb_insight.exceptions import DimensionMismatchError
from xgb_insight.feature_pipeline.encoding import EncodedMatrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingConfig:
    """Caller-supplied training parameters, validated on construction."""
    max_depth: int = config.XGB_PARAMS["max_depth"]
    learning_rate: float = config.XGB_PARAMS["learning_rate"]
    n_rounds: int = config.XGB_PARAMS["n_rounds"]
    objective: str = config.XGB_PARAMS["objective"]
    n_jobs: int = config.XGB_PARAMS["n_jobs"]
    random_state: int = config.RANDOM_STATE
    num_parallel_tree: int = 1
    subsample: float = 1.0
    colsample_bynode: float = 1.0

    def __post_init__(self):
        if int(self.max_depth) != self.max_depth or self.max_depth < 1:
            raise ValueError(f"max_depth must be an integer >= 1, got {self.max_depth}")
        if not self.learning_rate > 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if int(self.n_rounds) != self.n_rounds or self.n_rounds < 1:
            raise ValueError(f"n_rounds must be an integer >= 1, got {self.n_rounds}")
        if self.objective not in config.SUPPORTED_OBJECTIVES:
            raise ValueError(
                f"Unsupported objective {self.objective!r}; expected one of {config.SUPPORTED_OBJECTIVES}"
            )
        if self.num_parallel_tree < 1:
            raise ValueError(f"num_parallel_tree must be >= 1, got {self.num_parallel_tree}")
        for name in ("subsample", "colsample_bynode"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")

    @classmethod
    def random_forest(cls, **overrides) -> "TrainingConfig":
        """One boosting round of many subsampled trees (a random forest)."""
        params = dict(config.RANDOM_FOREST_PARAMS)
        params.update(overrides)
        return cls(**params)

    def to_xgb_params(self) -> Dict[str, Any]:
        params = asdict(self)
        params["n_estimators"] = params.pop("n_rounds")
        return params


def check_dimensions(X: Any, y: Sequence) -> None:
    """
    Fail fast when the matrix row count differs from the label length.

    Raises:
        DimensionMismatchError: If X.shape[0] != len(y).
    """
    n_rows = X.shape[0]
    n_labels = len(y)
    if n_rows != n_labels:
        logger.error(f"Dimension mismatch: {n_rows} rows vs {n_labels} labels")
        raise DimensionMismatchError(n_rows, n_labels)


def as_model_input(X: Union[EncodedMatrix, sparse.spmatrix, np.ndarray]) -> np.ndarray:
    """
    Dense float array for training and prediction.

    Zeros left implicit in a sparse matrix would reach XGBoost as missing
    values; densifying keeps an indicator's 0 an observed value, so splits
    land on the 0/1 boundary.
    """
    if isinstance(X, EncodedMatrix):
        return X.to_array()
    if sparse.issparse(X):
        return X.toarray()
    return np.asarray(X, dtype=float)


def train_model(
    X: Union[EncodedMatrix, sparse.spmatrix, np.ndarray],
    y: Sequence,
    training_config: Optional[TrainingConfig] = None
) -> XGBClassifier:
    """
    Train an XGBoost binary classifier.

    The per-round training error is logged, mirroring the progress output of
    the native training loop.

    Args:
        X: Encoded feature matrix (EncodedMatrix, sparse or dense array);
            densified with as_model_input before fitting.
        y: Binary label vector (0/1).
        training_config: Training parameters. If None, uses config.XGB_PARAMS.

    Returns:
        Trained XGBoost classifier.

    Raises:
        DimensionMismatchError: If X rows and y length differ (checked before
            any XGBoost call).
        ValueError: If y contains values other than 0 and 1.

    Example:
        >>> model = train_model(encoded, y)
        >>> print(type(model))
        <class 'xgboost.sklearn.XGBClassifier'>
    """
    if training_config is None:
        training_config = TrainingConfig()

    check_dimensions(X.matrix if isinstance(X, EncodedMatrix) else X, y)
    matrix = as_model_input(X)

    y = np.asarray(y)
    unexpected = sorted(set(np.unique(y).tolist()) - {0, 1})
    if unexpected:
        raise ValueError(f"Label vector must be binary 0/1, found values {unexpected}")

    logger.info(
        f"Training XGBoost model on {matrix.shape[0]:,} rows × {matrix.shape[1]} features "
        f"(max_depth={training_config.max_depth}, learning_rate={training_config.learning_rate}, "
        f"n_rounds={training_config.n_rounds}, num_parallel_tree={training_config.num_parallel_tree})"
    )

    model = XGBClassifier(
        **training_config.to_xgb_params(),
        eval_metric="error",
        verbosity=0
    )
    model.fit(matrix, y, eval_set=[(matrix, y)], verbose=False)

    train_errors = model.evals_result()["validation_0"]["error"]
    for round_idx, error in enumerate(train_errors, start=1):
        logger.info(f"[{round_idx}] train-error: {error:.6f}")

    logger.info("✓ Model trained successfully")

    return model


def save_model(model: XGBClassifier, model_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Save trained model to disk.

    Args:
        model: Trained XGBoost model.
        model_path: Path to save model. If None, uses config.OUTPUT_DIR / config.MODEL_FILENAME.

    Returns:
        Path the model was written to.
    """
    if model_path is None:
        model_path = config.OUTPUT_DIR / config.MODEL_FILENAME
    model_path = Path(model_path)

    model_path.parent.mkdir(parents=True, exist_ok=True)

    joblib.dump(model, model_path)
    logger.info(f"✓ Model saved to: {model_path}")

    return model_path


def load_model(model_path: Union[str, Path]) -> XGBClassifier:
    """Load a model written by save_model."""
    try:
        model = joblib.load(model_path)
    except FileNotFoundError:
        logger.error(f"Model file not found: {model_path}")
        raise

    logger.info(f"Loaded model from: {model_path}")

    return model
