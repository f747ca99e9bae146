"""Provide ordinary least-squares fits used in the regression notes.

This module supports:
- simple and multiple linear regression on continuous predictors,
- an optional categorical factor entering as a shifted intercept, a shifted
  slope, or a full interaction, and
- coefficient tables with standard errors and t-test p-values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import f as f_dist
from scipy.stats import t as student_t

from ..errors import DimensionMismatchError, InsufficientDataError
from ..schema import COLUMNS

GROUP_POLICIES: tuple[str, ...] = ("intercept", "slope", "interaction")


@dataclass(frozen=True, eq=False)
class LinearModelFit:
    """Container for OLS fit outputs.

    Arrays are aligned with ``terms``; ``residuals`` and ``fitted`` are aligned
    with the observations that entered the fit.
    """

    terms: Tuple[str, ...]
    coefficients: np.ndarray
    standard_errors: np.ndarray
    t_values: np.ndarray
    p_values: np.ndarray
    r_squared: float
    r_squared_adjusted: float
    residuals: np.ndarray
    fitted: np.ndarray
    df_residual: int
    sigma: float
    f_statistic: float
    f_p_value: float
    predictors: np.ndarray
    predictor_names: Tuple[str, ...]
    group_name: Optional[str] = None
    group_levels: Tuple = ()
    group_policy: Optional[str] = None
    groups: Optional[np.ndarray] = field(default=None)

    @property
    def n(self) -> int:
        return int(len(self.residuals))

    def coefficient(self, term: str) -> float:
        return float(self.coefficients[self.terms.index(term)])

    def coefficient_table(self) -> pd.DataFrame:
        """Return estimates, standard errors, t values, and p-values per term."""
        return pd.DataFrame(
            {
                COLUMNS.term: list(self.terms),
                COLUMNS.estimate: self.coefficients,
                COLUMNS.std_error: self.standard_errors,
                COLUMNS.t_value: self.t_values,
                COLUMNS.p_value: self.p_values,
            }
        )

    def predict(self, predictors, group=None) -> np.ndarray:
        """Evaluate the fitted model at new predictor values (and group labels)."""
        x, _ = _predictor_matrix(predictors)
        if x.shape[1] != len(self.predictor_names):
            raise DimensionMismatchError(
                f"Expected {len(self.predictor_names)} predictor columns, "
                f"got {x.shape[1]}."
            )
        labels = None
        if self.group_policy is not None:
            if group is None:
                raise ValueError("This model was fitted with a group; pass group=.")
            labels = np.asarray(group, dtype=object).reshape(-1)
            unknown = set(labels) - set(self.group_levels)
            if unknown:
                raise ValueError(f"Unknown group levels: {sorted(map(str, unknown))}")
        design, _ = _design_matrix(
            x,
            self.predictor_names,
            labels,
            self.group_name,
            self.group_levels,
            self.group_policy,
        )
        return design @ self.coefficients


def _predictor_matrix(predictors) -> Tuple[np.ndarray, Tuple[str, ...]]:
    if isinstance(predictors, pd.DataFrame):
        names = tuple(str(c) for c in predictors.columns)
        x = predictors.apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)
        return x, names
    if isinstance(predictors, pd.Series):
        name = str(predictors.name) if predictors.name is not None else "x"
        x = pd.to_numeric(predictors, errors="coerce").to_numpy(dtype=float)
        return x.reshape(-1, 1), (name,)

    x = np.asarray(predictors, dtype=float)
    if x.ndim == 1:
        return x.reshape(-1, 1), ("x",)
    if x.ndim != 2:
        raise ValueError("predictors must be 1-D or 2-D.")
    if x.shape[1] == 1:
        return x, ("x",)
    return x, tuple(f"x{i + 1}" for i in range(x.shape[1]))


def _design_matrix(
    x: np.ndarray,
    names: Sequence[str],
    labels: Optional[np.ndarray],
    group_name: Optional[str],
    levels: Sequence,
    policy: Optional[str],
) -> Tuple[np.ndarray, List[str]]:
    columns = [np.ones(len(x))]
    terms = ["(Intercept)"]
    for j, name in enumerate(names):
        columns.append(x[:, j])
        terms.append(name)

    if policy is None:
        return np.column_stack(columns), terms

    dummies = [
        (f"{group_name}[T.{level}]", np.array([g == level for g in labels], dtype=float))
        for level in levels[1:]
    ]
    if policy in ("intercept", "interaction"):
        for term, dummy in dummies:
            columns.append(dummy)
            terms.append(term)
    if policy in ("slope", "interaction"):
        for j, name in enumerate(names):
            for term, dummy in dummies:
                columns.append(x[:, j] * dummy)
                terms.append(f"{name}:{term}")
    return np.column_stack(columns), terms


def fit_linear_model(
    predictors,
    response,
    group=None,
    group_policy: Optional[str] = None,
) -> LinearModelFit:
    """Fit an ordinary least-squares linear model.

    Args:
        predictors (array-like | pandas.DataFrame | pandas.Series): Continuous
            predictor(s), one row per observation.
        response (array-like): Response values.
        group (array-like, optional): Categorical factor, one label per
            observation. Levels are treatment-coded against the first sorted
            level.
        group_policy (str, optional): How ``group`` enters the model, required
            whenever ``group`` is given:

            - ``"intercept"``: a separate intercept per level (parallel lines),
            - ``"slope"``: a common intercept with a separate slope per level,
            - ``"interaction"``: separate intercept and slope per level.

    Returns:
        LinearModelFit: Coefficients with standard errors, t values and
        p-values, R^2 and adjusted R^2, residuals (``response - fitted``),
        residual standard error, and the overall F test.

    Raises:
        DimensionMismatchError: If predictors, response, and group differ in
            length.
        InsufficientDataError: If there are no more finite observations than
            model terms.
        ValueError: If the policy is missing or unknown, the factor has fewer
            than two levels, or the design matrix is rank deficient.

    Note:
        Rows with a non-finite predictor or response are dropped before
        fitting.
    """
    x, names = _predictor_matrix(predictors)
    y = np.asarray(response, dtype=float).reshape(-1)
    if len(x) != len(y):
        raise DimensionMismatchError(
            f"predictors have {len(x)} rows but response has {len(y)} values."
        )

    labels = None
    group_name = None
    levels: tuple = ()
    if group is not None:
        if group_policy is None:
            raise ValueError(
                f"group_policy is required with a group; choose one of {list(GROUP_POLICIES)}."
            )
        if group_policy not in GROUP_POLICIES:
            raise ValueError(
                f"group_policy must be one of {list(GROUP_POLICIES)}. Got: {group_policy!r}"
            )
        group_name = str(getattr(group, "name", None) or "group")
        labels = np.asarray(group, dtype=object).reshape(-1)
        if len(labels) != len(y):
            raise DimensionMismatchError(
                f"group has {len(labels)} labels but response has {len(y)} values."
            )
    elif group_policy is not None:
        raise ValueError("group_policy was given without a group.")

    mask = np.isfinite(y) & np.all(np.isfinite(x), axis=1)
    x, y = x[mask], y[mask]
    if labels is not None:
        labels = labels[mask]
        levels = tuple(sorted(set(labels), key=str))
        if len(levels) < 2:
            raise ValueError(f"group needs at least two levels, found {list(levels)}.")

    design, terms = _design_matrix(x, names, labels, group_name, levels, group_policy)
    n, p = design.shape
    if n <= p:
        raise InsufficientDataError(
            f"Need more observations ({n}) than model terms ({p})."
        )
    if np.linalg.matrix_rank(design) < p:
        raise ValueError("Design matrix is rank deficient; terms are not estimable.")

    beta, *_ = np.linalg.lstsq(design, y, rcond=None)
    fitted = design @ beta
    resid = y - fitted

    dof = n - p
    sse = float(np.sum(resid**2))
    sst = float(np.sum((y - y.mean()) ** 2))
    mse = sse / dof
    cov = mse * np.linalg.inv(design.T @ design)
    se = np.sqrt(np.clip(np.diag(cov), 0.0, None))

    with np.errstate(divide="ignore", invalid="ignore"):
        t_vals = np.where(se > 0, beta / np.where(se > 0, se, 1.0), np.sign(beta) * np.inf)
    t_vals = np.where((se == 0) & (beta == 0), 0.0, t_vals)
    p_vals = 2.0 * student_t.sf(np.abs(t_vals), dof)

    if sst > 0:
        r2 = 1.0 - sse / sst
        r2_adj = 1.0 - (1.0 - r2) * (n - 1) / dof
    else:
        r2 = math.nan
        r2_adj = math.nan

    f_stat = math.nan
    f_p = math.nan
    if p > 1 and sst > 0:
        if sse > 0:
            f_stat = ((sst - sse) / (p - 1)) / mse
            f_p = float(f_dist.sf(f_stat, p - 1, dof))
        else:
            f_stat = math.inf
            f_p = 0.0

    return LinearModelFit(
        terms=tuple(terms),
        coefficients=np.asarray(beta, dtype=float),
        standard_errors=np.asarray(se, dtype=float),
        t_values=np.asarray(t_vals, dtype=float),
        p_values=np.asarray(p_vals, dtype=float),
        r_squared=float(r2),
        r_squared_adjusted=float(r2_adj),
        residuals=np.asarray(resid, dtype=float),
        fitted=np.asarray(fitted, dtype=float),
        df_residual=int(dof),
        sigma=float(math.sqrt(mse)),
        f_statistic=float(f_stat),
        f_p_value=float(f_p),
        predictors=x,
        predictor_names=tuple(names),
        group_name=group_name,
        group_levels=levels,
        group_policy=group_policy,
        groups=labels,
    )
