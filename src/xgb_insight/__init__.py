"""
Explore feature importance in a small tabular dataset with XGBoost.
"""

__version__ = "0.1.0"
