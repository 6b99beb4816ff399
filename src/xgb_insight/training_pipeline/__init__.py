"""
Training pipeline for the XGBoost dataset exploration walkthrough.

Contains modules for model training, persistence, and training-fit evaluation.
"""
