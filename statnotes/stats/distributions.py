"""Density and quantile tables for the normal vs. Student's t note."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd
from scipy.stats import norm
from scipy.stats import t as student_t


def density_table(x: np.ndarray, dfs: Iterable[int] = (1, 5, 30)) -> pd.DataFrame:
    """Tabulate the standard normal pdf and Student's t pdfs over ``x``.

    Returns:
        pandas.DataFrame: Columns ``x``, ``normal``, and ``t(df=k)`` for each
        requested ``k``.
    """
    grid = np.asarray(x, dtype=float).reshape(-1)
    table = {"x": grid, "normal": norm.pdf(grid)}
    for df in dfs:
        if df <= 0:
            raise ValueError(f"degrees of freedom must be positive, got {df}.")
        table[f"t(df={df})"] = student_t.pdf(grid, df)
    return pd.DataFrame(table)


def critical_values(alpha: float = 0.05, dfs: Iterable[int] = (1, 2, 5, 10, 30, 100)) -> pd.DataFrame:
    """Two-sided critical values of t for each df, next to the normal value.

    The t critical value shrinks towards the normal one as df grows, which is
    why small samples need wider intervals.
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must lie in (0, 1), got {alpha}.")
    q = 1.0 - alpha / 2.0
    z = float(norm.ppf(q))
    rows = [
        {"df": int(df), "t_critical": float(student_t.ppf(q, df)), "z_critical": z}
        for df in dfs
    ]
    return pd.DataFrame.from_records(rows)
