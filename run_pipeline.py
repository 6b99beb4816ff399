"""
Command-line entry point for the XGBoost dataset exploration pipeline.

Usage:
    python run_pipeline.py                      # Run with walkthrough defaults
    python run_pipeline.py --drop-first         # Drop the first level of each categorical
    python run_pipeline.py --random-forest      # Compare with a random forest
    python run_pipeline.py --no-save            # Log results only
"""
import argparse
import logging
import sys

from xgb_insight import config
from xgb_insight.main import run_pipeline
from xgb_insight.training_pipeline.train import TrainingConfig

logger = logging.getLogger(__name__)


def build_training_config(args: argparse.Namespace) -> TrainingConfig:
    """Build the training configuration from parsed CLI arguments."""
    overrides = {
        name: value for name, value in (
            ('max_depth', args.max_depth),
            ('learning_rate', args.learning_rate),
            ('n_rounds', args.n_rounds),
        ) if value is not None
    }
    if args.random_forest:
        return TrainingConfig.random_forest(**overrides)
    return TrainingConfig(**overrides)


def main(argv=None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Explore feature importance in the arthritis trial data with XGBoost",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Walkthrough defaults (max_depth=4, learning_rate=1, 10 rounds)
  python run_pipeline.py

  # Shallower trees, more rounds
  python run_pipeline.py --max-depth 2 --n-rounds 50

  # Random forest comparison, results to a custom directory
  python run_pipeline.py --random-forest --output-dir outputs/rf
        """
    )
    parser.add_argument(
        '--data-path',
        default=None,
        help=f'Dataset CSV (default: {config.DATA_PATH})'
    )
    parser.add_argument(
        '--output-dir',
        default=None,
        help=f'Directory for tables, plot and model (default: {config.OUTPUT_DIR})'
    )
    parser.add_argument(
        '--max-depth',
        type=int,
        default=None,
        help=f"Maximum tree depth (default: {config.XGB_PARAMS['max_depth']})"
    )
    parser.add_argument(
        '--learning-rate',
        type=float,
        default=None,
        help=f"Learning rate (default: {config.XGB_PARAMS['learning_rate']})"
    )
    parser.add_argument(
        '--n-rounds',
        type=int,
        default=None,
        help=f"Number of boosting rounds (default: {config.XGB_PARAMS['n_rounds']})"
    )
    parser.add_argument(
        '--drop-first',
        action='store_true',
        default=None,
        help='Drop the first level of each categorical column when encoding'
    )
    parser.add_argument(
        '--random-forest',
        action='store_true',
        help='Train a random forest instead of a boosted model'
    )
    parser.add_argument(
        '--no-save',
        action='store_true',
        help='Do not write output artifacts'
    )

    args = parser.parse_args(argv)

    try:
        run_pipeline(
            data_path=args.data_path,
            output_dir=args.output_dir,
            training_config=build_training_config(args),
            drop_first=args.drop_first,
            save_outputs=not args.no_save
        )
    except (KeyError, ValueError, OSError) as e:
        logger.error(f"❌ Pipeline failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT
    )
    sys.exit(main())
