"""
Model evaluation module for the XGBoost dataset exploration pipeline.

The walkthrough fits and inspects on the same data, so these metrics
describe how well the model fits the training set, not how it generalises.
"""
import numpy as np
import logging
from sklearn.metrics import accuracy_score, log_loss, roc_auc_score
from typing import Any, Dict, Sequence

from xgb_insight.feature_pipeline.encoding import EncodedMatrix
from xgb_insight.training_pipeline.train import as_model_input, check_dimensions

logger = logging.getLogger(__name__)


def evaluate_training_fit(model: Any, X: Any, y: Sequence) -> Dict[str, float]:
    """
    Evaluate a trained model on its own training data.

    Metrics calculated:
    - error: Misclassification rate at a 0.5 threshold
    - accuracy: 1 - error
    - log_loss: Binary cross-entropy of predicted probabilities
    - roc_auc: Area Under ROC Curve (only when both classes are present)

    Args:
        model: Trained model with predict_proba().
        X: Feature matrix the model was trained on.
        y: Binary label vector.

    Returns:
        Dictionary of metric names and values.

    Example:
        >>> metrics = evaluate_training_fit(model, encoded, y)
        >>> print(f"train error: {metrics['error']:.4f}")
    """
    matrix = X.matrix if isinstance(X, EncodedMatrix) else X
    check_dimensions(matrix, y)
    y = np.asarray(y)

    y_prob = model.predict_proba(as_model_input(X))[:, 1]
    y_pred = (y_prob > 0.5).astype(int)

    accuracy = accuracy_score(y, y_pred)
    metrics = {
        'error': 1.0 - accuracy,
        'accuracy': accuracy,
        'log_loss': log_loss(y, y_prob, labels=[0, 1]),
    }
    if len(np.unique(y)) == 2:
        metrics['roc_auc'] = roc_auc_score(y, y_prob)
    else:
        logger.warning("Only one class present in labels; skipping ROC-AUC")

    logger.info("Training fit metrics:")
    for metric, value in metrics.items():
        logger.info(f"  {metric:20s}: {value:.4f}")

    return metrics
