"""Built-in and file-backed datasets."""

from __future__ import annotations

import os

import pandas as pd

# Student (1908): extra hours of sleep for 10 patients under two drugs.
_SLEEP_EXTRA = {
    1: (0.7, -1.6, -0.2, -1.2, -0.1, 3.4, 3.7, 0.8, 0.0, 2.0),
    2: (1.9, 0.8, 1.1, 0.1, -0.1, 4.4, 5.5, 1.6, 4.6, 3.4),
}


def sleep() -> pd.DataFrame:
    """Return the paired sleep-drug dataset.

    Returns:
        pandas.DataFrame: Columns ``extra`` (increase in hours of sleep),
        ``group`` (drug, 1 or 2) and ``ID`` (patient, 1-10). Each patient
        appears once per drug, so the two groups are paired by ``ID``.
    """
    rows = [
        {"extra": extra, "group": group, "ID": idx + 1}
        for group, values in _SLEEP_EXTRA.items()
        for idx, extra in enumerate(values)
    ]
    return pd.DataFrame.from_records(rows)


def load_table(path: str) -> pd.DataFrame:
    """Load a tabular dataset from CSV."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset not found: {path}")
    return pd.read_csv(path)
