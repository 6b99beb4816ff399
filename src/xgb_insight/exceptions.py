"""
Exceptions raised by the exploration pipeline.

Both subclass the built-in errors the pipeline stages already raise, so
callers catching KeyError / ValueError keep working.
"""
from typing import Iterable, Optional


class MissingColumnError(KeyError):
    """A stage referenced a column that is not present in the DataFrame."""

    def __init__(self, column: str, available: Optional[Iterable[str]] = None):
        self.column = column
        self.available = list(available) if available is not None else []
        message = f"Column '{column}' not found in DataFrame"
        if self.available:
            message += f" (available: {self.available})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError repr-quotes its message otherwise
        return self.args[0]


class DimensionMismatchError(ValueError):
    """Feature matrix rows and label vector length disagree."""

    def __init__(self, n_rows: int, n_labels: int):
        self.n_rows = n_rows
        self.n_labels = n_labels
        super().__init__(
            f"Feature matrix has {n_rows} rows but label vector has {n_labels} entries"
        )


def require_columns(df, columns: Iterable[str]) -> None:
    """Raise MissingColumnError for the first column absent from df."""
    for column in columns:
        if column not in df.columns:
            raise MissingColumnError(column, df.columns)
