"""Define standardized column names and column-role declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class ResultColumns:
    """Container for standardized column labels.

    These labels are used in every exported table so that report text, CSV
    output and figures agree on naming.

    Attributes:
        term: Model term name, e.g. ``(Intercept)`` or ``x:group[T.b]``.
        estimate: Point estimate of a coefficient.
        std_error: Standard error of the estimate.
        t_value: Estimate divided by its standard error.
        p_value: Two-sided p-value for the coefficient t statistic.
        lag: Mean pair separation distance in one variogram bin.
        n_pairs: Number of point pairs contributing to one bin.
        gamma: Semivariance estimate for one bin.
    """

    term: str = "Term"
    estimate: str = "Estimate"
    std_error: str = "Std. Error"
    t_value: str = "t value"
    p_value: str = "Pr(>|t|)"
    lag: str = "Lag distance"
    n_pairs: str = "Pairs"
    gamma: str = "Semivariance"


COLUMNS = ResultColumns()


@dataclass(frozen=True)
class SpatialRoles:
    """Declare which columns of a spatial table play which role.

    Attributes:
        coordinates: Names of the two coordinate columns, in ``(x, y)`` order.
        value: Name of the measured scalar column.
        group: Optional grouping key column.
    """

    coordinates: Tuple[str, str] = ("x", "y")
    value: str = "value"
    group: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.coordinates) != 2:
            raise ValueError(
                f"Exactly two coordinate columns are required, got {self.coordinates!r}."
            )
        roles = [*self.coordinates, self.value]
        if self.group is not None:
            roles.append(self.group)
        if len(set(roles)) != len(roles):
            raise ValueError(f"Column roles must be distinct, got {roles}.")

    def validate(self, frame: pd.DataFrame) -> None:
        """Raise ``KeyError`` if a declared column is absent from ``frame``."""
        required = [*self.coordinates, self.value]
        if self.group is not None:
            required.append(self.group)
        missing = [col for col in required if col not in frame.columns]
        if missing:
            raise KeyError(
                f"Missing spatial columns {missing}. "
                f"Available columns: {list(frame.columns)}"
            )
