"""Theoretical semivariogram models and their least-squares fit.

Model forms, for lag ``h > 0`` with nugget ``c0``, partial sill ``c`` and
range parameter ``a``:

    spherical:    c0 + c * (1.5 h/a - 0.5 (h/a)^3)   for h < a, else c0 + c
    exponential:  c0 + c * (1 - exp(-h/a))
    gaussian:     c0 + c * (1 - exp(-(h/a)^2))
    nugget:       c0

The semivariance at ``h == 0`` is zero for every family. The total sill is
``c0 + c``. Exponential and gaussian models approach the sill asymptotically;
their practical ranges are ``3a`` and ``sqrt(3) a``.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Mapping, Optional

import numpy as np
import pandas as pd
from scipy.optimize import least_squares

from ..errors import DivisionUndefinedError, InsufficientDataError, NonConvergenceWarning
from ..schema import COLUMNS
from .variogram import EmpiricalVariogram

MODEL_FAMILIES: tuple[str, ...] = ("spherical", "exponential", "gaussian", "nugget")
WEIGHTINGS: tuple[str, ...] = ("ols", "npairs", "npairs_over_h2")
MIN_RANGE = 1e-9

_EFFECTIVE_RANGE_FACTOR = {
    "spherical": 1.0,
    "exponential": 3.0,
    "gaussian": math.sqrt(3.0),
    "nugget": 0.0,
}


@dataclass(frozen=True)
class VariogramFit:
    """Fitted semivariogram model.

    ``converged`` is ``False`` whenever the optimizer stopped for any reason
    other than meeting a convergence tolerance; parameters of such fits are
    the optimizer's last iterate and should not be trusted.
    """

    model_family: str
    nugget: float
    partial_sill: float
    sill: float
    range: float
    effective_range: float
    converged: bool
    status: int
    message: str
    n_evaluations: int
    cost: float
    weighting: str

    def predict(self, h) -> np.ndarray:
        return variogram_model(
            self.model_family, h, self.nugget, self.partial_sill, self.range
        )


def _check_family(family: str) -> None:
    if family not in MODEL_FAMILIES:
        raise ValueError(
            f"model_family must be one of {list(MODEL_FAMILIES)}. Got: {family!r}"
        )


def variogram_model(
    family: str, h, nugget: float, partial_sill: float = 0.0, range_: float = 1.0
) -> np.ndarray:
    """Evaluate a closed-form semivariogram model at lags ``h``."""
    _check_family(family)
    lag = np.asarray(h, dtype=float)
    if family == "nugget":
        gamma = np.full_like(lag, float(nugget))
    else:
        a = max(float(range_), MIN_RANGE)
        ratio = lag / a
        if family == "spherical":
            shape = np.where(ratio < 1.0, 1.5 * ratio - 0.5 * ratio**3, 1.0)
        elif family == "exponential":
            shape = 1.0 - np.exp(-ratio)
        else:
            shape = 1.0 - np.exp(-(ratio**2))
        gamma = float(nugget) + float(partial_sill) * shape
    return np.where(lag > 0, gamma, 0.0)


def effective_range(family: str, range_: float) -> float:
    _check_family(family)
    return float(_EFFECTIVE_RANGE_FACTOR[family] * range_)


def _empirical_arrays(empirical_points):
    if isinstance(empirical_points, EmpiricalVariogram):
        return (
            np.asarray(empirical_points.lag_distance, dtype=float),
            np.asarray(empirical_points.pair_count, dtype=float),
            np.asarray(empirical_points.gamma, dtype=float),
        )
    if isinstance(empirical_points, pd.DataFrame):
        counts = (
            empirical_points[COLUMNS.n_pairs]
            if COLUMNS.n_pairs in empirical_points.columns
            else np.ones(len(empirical_points))
        )
        return (
            empirical_points[COLUMNS.lag].to_numpy(dtype=float),
            np.asarray(counts, dtype=float),
            empirical_points[COLUMNS.gamma].to_numpy(dtype=float),
        )

    arr = np.asarray(empirical_points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] not in (2, 3):
        raise ValueError(
            "empirical_points must be rows of (distance, gamma) or "
            "(distance, pair_count, gamma)."
        )
    if arr.shape[1] == 2:
        return arr[:, 0], np.ones(len(arr)), arr[:, 1]
    return arr[:, 0], arr[:, 1], arr[:, 2]


def _weights(weighting: str, h: np.ndarray, counts: np.ndarray) -> np.ndarray:
    if weighting == "ols":
        return np.ones_like(h)
    if weighting == "npairs":
        return counts
    if np.any(h <= 0):
        raise DivisionUndefinedError(
            "npairs_over_h2 weighting needs strictly positive lag distances."
        )
    return counts / h**2


def _default_guess(h: np.ndarray, gamma: np.ndarray) -> dict:
    return {
        "nugget": float(max(np.min(gamma), 0.0)),
        "sill": float(max(np.max(gamma), 0.0)),
        "range": float(np.max(h) / 2.0),
    }


def fit_theoretical_model(
    empirical_points,
    model_family: str = "spherical",
    initial_guess: Optional[Mapping[str, float]] = None,
    weighting: str = "npairs_over_h2",
    max_evaluations: int = 2000,
) -> VariogramFit:
    """Fit a closed-form semivariogram model by nonlinear least squares.

    Args:
        empirical_points (EmpiricalVariogram | pandas.DataFrame | array-like):
            Empirical ``(distance, gamma)`` pairs, optionally with pair counts.
        model_family (str, optional): ``"spherical"`` (default),
            ``"exponential"``, ``"gaussian"``, or ``"nugget"``.
        initial_guess (Mapping[str, float], optional): Starting ``nugget``,
            total ``sill`` and ``range``. Derived from the data when omitted.
        weighting (str, optional): ``"ols"``, ``"npairs"``, or
            ``"npairs_over_h2"`` (pairs divided by squared lag, the default).
        max_evaluations (int, optional): Optimizer budget. Defaults to 2000.

    Returns:
        VariogramFit: Nugget, partial and total sill, range, and whether the
        optimizer converged.

    Raises:
        InsufficientDataError: If there are fewer finite points than model
            parameters.
        DivisionUndefinedError: If ``npairs_over_h2`` weighting meets a zero
            lag.
        ValueError: If the family, weighting, or initial guess is invalid.

    Note:
        Non-convergence is not raised. It is reported as ``converged=False``
        and announced with a ``NonConvergenceWarning`` so callers can retry
        with another initial guess or model family.
    """
    _check_family(model_family)
    if weighting not in WEIGHTINGS:
        raise ValueError(f"weighting must be one of {list(WEIGHTINGS)}. Got: {weighting!r}")

    h, counts, gamma = _empirical_arrays(empirical_points)
    finite = np.isfinite(h) & np.isfinite(counts) & np.isfinite(gamma)
    h, counts, gamma = h[finite], counts[finite], gamma[finite]
    n_params = 1 if model_family == "nugget" else 3
    if len(h) < n_params:
        raise InsufficientDataError(
            f"{model_family} model has {n_params} parameters but only {len(h)} "
            "empirical points were given."
        )
    sqrt_w = np.sqrt(_weights(weighting, h, counts))

    guess = dict(_default_guess(h, gamma))
    if initial_guess is not None:
        unknown = set(initial_guess) - {"nugget", "sill", "range"}
        if unknown:
            raise ValueError(f"Unknown initial_guess keys: {sorted(unknown)}")
        guess.update({k: float(v) for k, v in initial_guess.items()})
    if not all(np.isfinite(v) for v in guess.values()):
        raise ValueError(f"initial_guess values must be finite, got {guess}.")

    nugget0 = max(guess["nugget"], 0.0)
    if model_family == "nugget":
        x0 = np.array([nugget0])
        lower = np.array([0.0])
        upper = np.array([np.inf])
    else:
        x0 = np.array(
            [
                nugget0,
                max(guess["sill"] - nugget0, 0.0),
                max(guess["range"], MIN_RANGE),
            ]
        )
        lower = np.array([0.0, 0.0, MIN_RANGE])
        upper = np.array([np.inf, np.inf, np.inf])

    def residuals(params: np.ndarray) -> np.ndarray:
        if model_family == "nugget":
            model = variogram_model("nugget", h, params[0])
        else:
            model = variogram_model(model_family, h, params[0], params[1], params[2])
        return sqrt_w * (model - gamma)

    result = least_squares(
        residuals,
        x0,
        bounds=(lower, upper),
        method="trf",
        max_nfev=int(max_evaluations),
    )

    params = np.asarray(result.x, dtype=float)
    converged = bool(result.success) and bool(np.all(np.isfinite(params)))
    if model_family == "nugget":
        nugget, partial, range_ = float(params[0]), 0.0, 0.0
    else:
        nugget, partial, range_ = (float(v) for v in params)

    if not converged:
        warnings.warn(
            f"{model_family} variogram fit did not converge: {result.message}",
            NonConvergenceWarning,
            stacklevel=2,
        )

    return VariogramFit(
        model_family=model_family,
        nugget=nugget,
        partial_sill=partial,
        sill=nugget + partial,
        range=range_,
        effective_range=effective_range(model_family, range_),
        converged=converged,
        status=int(result.status),
        message=str(result.message),
        n_evaluations=int(result.nfev),
        cost=float(result.cost),
        weighting=weighting,
    )
