"""
Categorical encoding module for the XGBoost dataset exploration pipeline.

Expands categorical columns into a sparse binary indicator matrix whose
column labels read "Column=level" for human-readable importance reports.
"""
import pandas as pd
import numpy as np
from dataclasses import dataclass
from pandas.api.types import is_numeric_dtype
from scipy import sparse
from typing import List
import logging

from xgb_insight import config
from xgb_insight.exceptions import MissingColumnError, require_columns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedMatrix:
    """Sparse feature matrix plus the labels of its columns."""
    matrix: sparse.csr_matrix
    feature_names: List[str]
    index: pd.Index

    @property
    def shape(self):
        return self.matrix.shape

    @property
    def n_rows(self) -> int:
        return self.matrix.shape[0]

    def column_index(self, name: str) -> int:
        try:
            return self.feature_names.index(name)
        except ValueError:
            raise MissingColumnError(name, self.feature_names) from None

    def to_array(self) -> np.ndarray:
        """
        Dense float array with every zero stored as a real value.

        XGBoost reads the entries a CSR matrix leaves out as missing, so
        models are trained and queried on this array instead of the matrix.
        """
        return self.matrix.toarray()

    def column(self, name: str) -> np.ndarray:
        """Dense values of a single column (implicit entries are 0)."""
        return self.matrix[:, self.column_index(name)].toarray().ravel()

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.matrix.toarray(), columns=self.feature_names, index=self.index)


def one_hot_encode(
    df: pd.DataFrame,
    outcome_column: str,
    *,
    drop_first: bool
) -> EncodedMatrix:
    """
    One-hot encode every column except the outcome into a sparse matrix.

    Encodes:
    - Categorical / string columns → one indicator per observed level,
      e.g. Treatment → Treatment=Placebo, Treatment=Treated
    - Numeric columns → passed through unchanged (Age stays Age)

    Levels are taken from the observed values, so unused categories of a
    Categorical dtype never produce all-zero columns. With drop_first=False
    every row has exactly one indicator set per categorical column.

    Args:
        df: Input DataFrame with engineered features.
        outcome_column: Column excluded from the matrix (the label source).
        drop_first: Omit the first level of each categorical column to keep
            the encoding full-rank.

    Returns:
        EncodedMatrix with a CSR matrix (rows = observations).

    Raises:
        MissingColumnError: If the outcome column doesn't exist.
        ValueError: If any feature column has missing values.

    Example:
        >>> encoded = one_hot_encode(df_features, 'Improved', drop_first=False)
        >>> print(encoded.feature_names[:3])
        ['Age', 'Treatment=Placebo', 'Treatment=Treated']
    """
    require_columns(df, [outcome_column])

    features = df.drop(columns=[outcome_column])

    missing_cols = features.columns[features.isnull().any()].tolist()
    if missing_cols:
        raise ValueError(f"Missing values found in feature columns: {missing_cols}")

    categorical_cols = [
        col for col in features.columns
        if not is_numeric_dtype(features[col]) or isinstance(features[col].dtype, pd.CategoricalDtype)
    ]
    for col in categorical_cols:
        features[col] = features[col].astype("category").cat.remove_unused_categories()

    dummies = pd.get_dummies(
        features,
        columns=categorical_cols,
        prefix=categorical_cols,
        prefix_sep=config.ONE_HOT_SEPARATOR,
        dtype=np.float32,
        drop_first=drop_first
    )

    encoded = EncodedMatrix(
        matrix=sparse.csr_matrix(dummies.to_numpy(dtype=np.float32)),
        feature_names=[str(col) for col in dummies.columns],
        index=df.index
    )

    logger.info(
        f"Encoded {len(categorical_cols)} categorical columns "
        f"(drop_first={drop_first}). Shape: {encoded.shape}, "
        f"{encoded.matrix.nnz:,} non-zero entries"
    )

    return encoded
