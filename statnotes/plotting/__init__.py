"""
Illustrative figures for the statistics notes.

All plotting functions accept precomputed results and do not perform
statistical estimation beyond evaluating an already fitted model on a grid.

Modules:
    figures:
        Paired comparison, linear fit with group lines, residual
        diagnostics, normal vs. t densities, and semivariogram figures.

    style:
        rcParams, colors, axis cleanup, and multi-format save helpers.

Design Principles:
    1. No fitting in plotting code. Functions receive result objects or
       tables and simply render them.

    2. Input validation with explicit KeyError/ValueError for missing data.
"""

from .figures import (
    plot_distributions,
    plot_linear_fit,
    plot_paired_comparison,
    plot_residual_diagnostics,
    plot_variogram,
)
from .style import apply_global_style, save_figure_bundle, set_global_style

__all__ = [
    "plot_distributions",
    "plot_linear_fit",
    "plot_paired_comparison",
    "plot_residual_diagnostics",
    "plot_variogram",
    "apply_global_style",
    "save_figure_bundle",
    "set_global_style",
]
