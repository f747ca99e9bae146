"""
Spatial dependence: empirical semivariograms and model fits.

Modules:
    variogram:
        Pairwise squared-difference accumulation into lag bins, with
        explicit handling of empty bins and column-role configuration.

    models:
        Spherical, exponential, gaussian, and pure-nugget models and their
        weighted nonlinear least-squares fit. Convergence is reported as a
        field of the fit result.
"""

from .models import (
    MODEL_FAMILIES,
    VariogramFit,
    effective_range,
    fit_theoretical_model,
    variogram_model,
)
from .variogram import (
    EmpiricalVariogram,
    default_lag_bins,
    empirical_variogram,
    empirical_variogram_from_frame,
    make_lag_bins,
)

__all__ = [
    "MODEL_FAMILIES",
    "VariogramFit",
    "effective_range",
    "fit_theoretical_model",
    "variogram_model",
    "EmpiricalVariogram",
    "default_lag_bins",
    "empirical_variogram",
    "empirical_variogram_from_frame",
    "make_lag_bins",
]
