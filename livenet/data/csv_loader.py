"""CSV loader producing a binary-classification :class:`Dataset`."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from ..core.errors import DataLoadError
from ..core.types import Dataset

logger = logging.getLogger(__name__)


def _read_frame(path: Path) -> pd.DataFrame:
    if not path.is_file():
        raise DataLoadError(f"CSV file not found: {path}")
    try:
        return pd.read_csv(path)
    except pd.errors.EmptyDataError as exc:
        raise DataLoadError(f"CSV file is empty: {path}") from exc
    except pd.errors.ParserError as exc:
        raise DataLoadError(f"CSV file is malformed: {path}: {exc}") from exc


def load_csv_dataset(path: str | Path, target_col: str | None = None) -> Dataset:
    """Load features and 0/1 labels from ``path``.

    The label column defaults to the last column. Every cell must be numeric
    and every label must be exactly ``0`` or ``1``.
    """

    path = Path(path)
    df = _read_frame(path)
    if df.empty or df.shape[1] < 2:
        raise DataLoadError(f"{path} needs at least one feature column, a label column and one row")
    target_col = target_col or str(df.columns[-1])
    if target_col not in df.columns:
        raise DataLoadError(f"Target column {target_col!r} not found in CSV")

    y_raw = df.pop(target_col)
    try:
        X = df.apply(pd.to_numeric, errors="raise").to_numpy(dtype=np.float64)
        y = pd.to_numeric(y_raw, errors="raise").to_numpy(dtype=np.float64)
    except (ValueError, TypeError) as exc:
        raise DataLoadError(f"{path} contains non-numeric values: {exc}") from exc

    if not np.all(np.isfinite(X)) or not np.all(np.isfinite(y)):
        raise DataLoadError(f"{path} contains missing or non-finite values")
    if not np.all(np.isin(y, (0.0, 1.0))):
        raise DataLoadError(f"labels in column {target_col!r} must be 0 or 1")

    logger.info("loaded %s: %d rows, %d features", path, X.shape[0], X.shape[1])
    return Dataset(X=X, y=y.reshape(-1, 1))


__all__ = ["load_csv_dataset"]
