"""Residual diagnostics for fitted linear models."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy import stats as scipy_stats

from ..errors import DimensionMismatchError, InsufficientDataError
from .regression import LinearModelFit


@dataclass(frozen=True)
class HeteroscedasticityCheck:
    """Breusch-Pagan test outputs."""

    method: str
    statistic: float
    degrees_of_freedom: int
    p_value: float
    n: int


@dataclass(frozen=True)
class NormalityCheck:
    """Shapiro-Wilk test outputs."""

    method: str
    statistic: float
    p_value: float
    n: int


def diagnose_residuals(
    residuals, predicted, studentize: bool = True
) -> HeteroscedasticityCheck:
    """Test residuals for non-constant variance (Breusch-Pagan).

    Squared residuals are regressed, with an intercept, on ``predicted``. A
    large statistic (small p-value) signals heteroscedasticity.

    Args:
        residuals (array-like): Model residuals.
        predicted (array-like): Fitted values (1-D) or the original predictor
            matrix (2-D, one column per regressor).
        studentize (bool, optional): Use Koenker's studentized statistic
            ``n * R^2`` of the auxiliary regression (robust to non-normal
            errors). If ``False``, use the original ``ESS / 2`` on squared
            residuals scaled by ``SSR / n``. Defaults to ``True``.

    Returns:
        HeteroscedasticityCheck: Statistic, chi-squared degrees of freedom
        (number of regressors), and p-value.

    Raises:
        DimensionMismatchError: If ``residuals`` and ``predicted`` differ in
            length.
        InsufficientDataError: If fewer than three observations are given or
            there are no more observations than auxiliary terms.
    """
    e = np.asarray(residuals, dtype=float).reshape(-1)
    z = np.asarray(predicted, dtype=float)
    if z.ndim == 1:
        z = z.reshape(-1, 1)
    if len(z) != len(e):
        raise DimensionMismatchError(
            f"residuals have {len(e)} values but predicted has {len(z)} rows."
        )
    mask = np.isfinite(e) & np.all(np.isfinite(z), axis=1)
    e, z = e[mask], z[mask]
    n = int(len(e))
    k = int(z.shape[1])
    if n < 3 or n <= k + 1:
        raise InsufficientDataError(
            f"Breusch-Pagan test needs more than {max(2, k + 1)} observations, got {n}."
        )

    design = np.column_stack([np.ones(n), z])
    e2 = e**2
    if studentize:
        target = e2
    else:
        sigma2 = float(np.sum(e2) / n)
        target = e2 / sigma2 if sigma2 > 0 else np.zeros_like(e2)

    beta, *_ = np.linalg.lstsq(design, target, rcond=None)
    fitted = design @ beta
    sst = float(np.sum((target - target.mean()) ** 2))
    ess = float(np.sum((fitted - target.mean()) ** 2))

    if studentize:
        statistic = n * (ess / sst) if sst > 0 else 0.0
        method = "studentized Breusch-Pagan test"
    else:
        statistic = 0.5 * ess
        method = "Breusch-Pagan test"

    return HeteroscedasticityCheck(
        method=method,
        statistic=float(statistic),
        degrees_of_freedom=k,
        p_value=float(scipy_stats.chi2.sf(statistic, k)),
        n=n,
    )


def diagnose_fit(
    fit: LinearModelFit, use: str = "predictors", studentize: bool = True
) -> HeteroscedasticityCheck:
    """Run ``diagnose_residuals`` on a fitted model.

    ``use="predictors"`` regresses on the model's continuous predictors (the
    usual ``bptest`` form); ``use="fitted"`` regresses on fitted values.
    """
    if use == "fitted":
        return diagnose_residuals(fit.residuals, fit.fitted, studentize=studentize)
    if use == "predictors":
        return diagnose_residuals(fit.residuals, fit.predictors, studentize=studentize)
    raise ValueError(f"use must be 'fitted' or 'predictors'. Got: {use!r}")


def check_residual_normality(residuals) -> NormalityCheck:
    """Shapiro-Wilk test of residual normality.

    Raises:
        InsufficientDataError: If fewer than three finite residuals are given.
    """
    e = np.asarray(residuals, dtype=float).reshape(-1)
    e = e[np.isfinite(e)]
    if len(e) < 3:
        raise InsufficientDataError(
            f"Shapiro-Wilk test needs at least 3 residuals, got {len(e)}."
        )
    if np.ptp(e) == 0:
        return NormalityCheck(
            method="Shapiro-Wilk normality test",
            statistic=math.nan,
            p_value=math.nan,
            n=int(len(e)),
        )
    statistic, pvalue = scipy_stats.shapiro(e)
    return NormalityCheck(
        method="Shapiro-Wilk normality test",
        statistic=float(statistic),
        p_value=float(pvalue),
        n=int(len(e)),
    )


def qq_points(residuals) -> tuple[np.ndarray, np.ndarray]:
    """Return theoretical normal quantiles and ordered standardized residuals."""
    e = np.asarray(residuals, dtype=float).reshape(-1)
    e = np.sort(e[np.isfinite(e)])
    n = len(e)
    if n < 2:
        raise InsufficientDataError("Q-Q points need at least 2 residuals.")
    probs = (np.arange(1, n + 1) - 0.5) / n
    theoretical = scipy_stats.norm.ppf(probs)
    sd = float(np.std(e, ddof=1))
    standardized = (e - np.mean(e)) / sd if sd > 0 else np.zeros_like(e)
    return theoretical, standardized
