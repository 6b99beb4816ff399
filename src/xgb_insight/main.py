"""
XGBoost Dataset Exploration - Pipeline Orchestrator

Runs the walkthrough end to end: load the arthritis trial data, engineer
age features, one-hot encode, train a boosted-tree model, report feature
importance, and check each candidate feature against the label with a
chi-squared test.

Usage:
    python run_pipeline.py
"""
import pandas as pd
import numpy as np
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union
from xgboost import XGBClassifier

from xgb_insight import config
from xgb_insight.feature_pipeline import (
    EncodedMatrix,
    load_arthritis_data,
    create_features,
    one_hot_encode,
    extract_label
)
from xgb_insight.training_pipeline.train import TrainingConfig, train_model, save_model
from xgb_insight.training_pipeline.evaluation import evaluate_training_fit
from xgb_insight.analysis import (
    get_split_importance,
    get_feature_importance,
    compare_with_importance,
    plot_importance,
    format_importance_table
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything the pipeline produced, stage by stage."""
    features: pd.DataFrame
    encoded: EncodedMatrix
    label: np.ndarray
    model: XGBClassifier
    metrics: Dict[str, float]
    split_importance: pd.DataFrame
    feature_importance: pd.DataFrame
    chi_square: pd.DataFrame


def run_pipeline(
    data_path: Optional[Union[str, Path]] = None,
    output_dir: Optional[Union[str, Path]] = None,
    training_config: Optional[TrainingConfig] = None,
    drop_first: Optional[bool] = None,
    save_outputs: bool = True
) -> PipelineResult:
    """
    Execute the complete exploration pipeline.

    Pipeline:
    1. Load dataset
    2. Engineer AgeDiscrete / AgeCat, drop ID
    3. One-hot encode features
    4. Extract label (Improved == 'Marked')
    5. Train model
    6. Report split and feature importance
    7. Chi-squared check against the gain ranking

    Args:
        data_path: Dataset CSV. If None, uses config.DATA_PATH.
        output_dir: Artifact directory. If None, uses config.OUTPUT_DIR.
        training_config: Training parameters. If None, uses config.XGB_PARAMS.
        drop_first: Level-dropping policy. If None, uses config.ONE_HOT_DROP_FIRST.
        save_outputs: If True, write tables, plot and model to output_dir.

    Returns:
        PipelineResult with every intermediate product.

    Example:
        >>> result = run_pipeline(save_outputs=False)
        >>> print(result.feature_importance.head())
    """
    if output_dir is None:
        output_dir = config.OUTPUT_DIR
    output_dir = Path(output_dir)
    if drop_first is None:
        drop_first = config.ONE_HOT_DROP_FIRST
    if training_config is None:
        training_config = TrainingConfig()

    logger.info("=" * 80)
    logger.info("XGBOOST DATASET EXPLORATION PIPELINE")
    logger.info("=" * 80)

    logger.info("\n[1/7] Loading dataset...")
    df = load_arthritis_data(data_path)

    logger.info("\n[2/7] Engineering features...")
    df_features = create_features(df)

    logger.info("\n[3/7] One-hot encoding...")
    encoded = one_hot_encode(df_features, config.OUTCOME_COLUMN, drop_first=drop_first)

    logger.info("\n[4/7] Extracting label...")
    label = extract_label(df_features, config.OUTCOME_COLUMN, config.POSITIVE_OUTCOME)

    logger.info("\n[5/7] Training model...")
    model = train_model(encoded, label, training_config)
    metrics = evaluate_training_fit(model, encoded, label)

    logger.info("\n[6/7] Extracting feature importance...")
    split_importance = get_split_importance(model, encoded.feature_names, encoded, label)
    feature_importance = get_feature_importance(model, encoded.feature_names)
    logger.info("Feature importance:\n" + format_importance_table(feature_importance))
    logger.info("Split importance:\n" + format_importance_table(split_importance))

    logger.info("\n[7/7] Chi-squared checks...")
    chi_square = compare_with_importance(df_features, label, feature_importance)
    logger.info("Chi-squared vs gain:\n" + format_importance_table(chi_square))

    if save_outputs:
        output_dir.mkdir(parents=True, exist_ok=True)
        split_importance.to_csv(output_dir / config.SPLIT_IMPORTANCE_FILENAME, index=False)
        feature_importance.to_csv(output_dir / config.FEATURE_IMPORTANCE_FILENAME, index=False)
        chi_square.to_csv(output_dir / config.CHI_SQUARE_FILENAME, index=False)
        if not feature_importance.empty:
            plot_importance(
                feature_importance,
                save_path=output_dir / config.IMPORTANCE_PLOT_FILENAME
            )
        save_model(model, output_dir / config.MODEL_FILENAME)
        logger.info(f"✓ Outputs written to: {output_dir}")
    else:
        logger.info("Skipping output save (save_outputs=False)")

    logger.info("\n" + "=" * 80)
    logger.info("✓ PIPELINE COMPLETE")
    logger.info("=" * 80)
    logger.info(f"Rows: {encoded.n_rows:,}")
    logger.info(f"Encoded features: {len(encoded.feature_names)}")
    if not feature_importance.empty:
        logger.info(f"Top feature: {feature_importance.loc[0, 'feature']}")

    return PipelineResult(
        features=df_features,
        encoded=encoded,
        label=label,
        model=model,
        metrics=metrics,
        split_importance=split_importance,
        feature_importance=feature_importance,
        chi_square=chi_square
    )
