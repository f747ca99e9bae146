"""Render the illustrative figure of each note from precomputed results."""

from __future__ import annotations

import os
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..spatial.models import VariogramFit
from ..spatial.variogram import EmpiricalVariogram
from ..stats.diagnostics import qq_points
from ..stats.regression import LinearModelFit
from .style import (
    MATH_LABELS,
    NEUTRAL_COLOR,
    OUTPUT_FORMATS,
    STYLE,
    clean_axis,
    color_for_group,
    save_figure_bundle,
    set_axis_labels,
    set_global_style,
)


def plot_paired_comparison(
    frame: pd.DataFrame,
    value: str,
    group: str,
    subject: str,
    output_dir: str = "output",
    formats: Sequence[str] = OUTPUT_FORMATS,
) -> str:
    """Plot each subject's value under both groups, joined by a line.

    Args:
        frame (pandas.DataFrame): Long-form table with one row per subject and
            group.
        value (str): Column holding the measured value.
        group (str): Column holding the two group labels.
        subject (str): Column identifying subjects across groups.
        output_dir (str, optional): Directory for the figure bundle.
        formats (Sequence[str], optional): File formats to write.

    Returns:
        str: Path to the file saved in the first of ``formats``.

    Raises:
        KeyError: If a named column is missing.
        ValueError: If ``frame`` is empty or has other than two groups.
    """
    missing = {value, group, subject} - set(frame.columns)
    if missing:
        raise KeyError(f"frame missing required columns: {missing}")
    if frame.empty:
        raise ValueError("frame is empty; nothing to plot")
    levels = sorted(frame[group].unique(), key=str)
    if len(levels) != 2:
        raise ValueError(f"Paired plot needs exactly two groups, found {len(levels)}.")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)

    wide = frame.pivot(index=subject, columns=group, values=value)
    positions = np.arange(len(levels))
    for _, row in wide.iterrows():
        ax.plot(
            positions,
            row[levels].to_numpy(dtype=float),
            color=NEUTRAL_COLOR,
            alpha=0.45,
            linewidth=STYLE.LINEWIDTH_THIN,
        )
    for idx, level in enumerate(levels):
        vals = wide[level].to_numpy(dtype=float)
        ax.scatter(
            np.full(len(vals), positions[idx]),
            vals,
            color=color_for_group(idx),
            zorder=3,
            label=f"{group} {level}",
        )
        ax.hlines(
            np.nanmean(vals),
            positions[idx] - 0.15,
            positions[idx] + 0.15,
            color=color_for_group(idx),
            linewidth=STYLE.LINEWIDTH,
        )

    clean_axis(ax)
    ax.set_xticks(positions)
    ax.set_xticklabels([str(level) for level in levels])
    ax.set_xlim(-0.5, len(levels) - 0.5)
    set_axis_labels(ax, x=group, y=value)
    ax.legend(loc="best")
    return save_figure_bundle(
        fig, os.path.join(output_dir, "paired_comparison.png"), formats=formats
    )


def plot_linear_fit(
    fit: LinearModelFit,
    output_dir: str = "output",
    formats: Sequence[str] = OUTPUT_FORMATS,
) -> str:
    """Scatter the observations and overlay fitted lines, one per group level.

    Only models with a single continuous predictor can be drawn.
    """
    if len(fit.predictor_names) != 1:
        raise ValueError("plot_linear_fit needs a model with one continuous predictor.")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)

    x = fit.predictors[:, 0]
    y = fit.fitted + fit.residuals
    grid = np.linspace(float(np.min(x)), float(np.max(x)), 100)

    if fit.group_policy is None:
        ax.scatter(x, y, color=color_for_group(0), alpha=STYLE.ALPHA_POINTS)
        ax.plot(grid, fit.predict(grid), color=NEUTRAL_COLOR, label="OLS fit")
    else:
        for idx, level in enumerate(fit.group_levels):
            mask = np.array([g == level for g in fit.groups], dtype=bool)
            color = color_for_group(idx)
            ax.scatter(x[mask], y[mask], color=color, alpha=STYLE.ALPHA_POINTS)
            ax.plot(
                grid,
                fit.predict(grid, group=[level] * len(grid)),
                color=color,
                label=f"{fit.group_name} {level}",
            )

    set_axis_labels(ax, x=fit.predictor_names[0], y=MATH_LABELS["y"])
    clean_axis(ax)
    ax.legend(loc="best")
    return save_figure_bundle(
        fig, os.path.join(output_dir, "linear_fit.png"), formats=formats
    )


def plot_residual_diagnostics(
    fit: LinearModelFit,
    output_dir: str = "output",
    formats: Sequence[str] = OUTPUT_FORMATS,
) -> str:
    """Two panels: residuals against fitted values, and a normal Q-Q plot."""
    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=STYLE.FIGSIZE_WIDE)

    ax1.scatter(fit.fitted, fit.residuals, color=color_for_group(0), alpha=STYLE.ALPHA_POINTS)
    ax1.axhline(0.0, color=NEUTRAL_COLOR, linewidth=STYLE.LINEWIDTH_THIN, linestyle="--")
    set_axis_labels(ax1, x=MATH_LABELS["fitted"], y=MATH_LABELS["residual"])
    clean_axis(ax1)

    theoretical, standardized = qq_points(fit.residuals)
    ax2.scatter(theoretical, standardized, color=color_for_group(0), alpha=STYLE.ALPHA_POINTS)
    lim = float(np.max(np.abs(theoretical)))
    ax2.plot([-lim, lim], [-lim, lim], color=NEUTRAL_COLOR, linewidth=STYLE.LINEWIDTH_THIN)
    set_axis_labels(
        ax2, x=MATH_LABELS["theoretical_quantile"], y=MATH_LABELS["sample_quantile"]
    )
    clean_axis(ax2, grid_axis="both")

    return save_figure_bundle(
        fig, os.path.join(output_dir, "residual_diagnostics.png"), formats=formats
    )


def plot_distributions(
    table: pd.DataFrame,
    output_dir: str = "output",
    formats: Sequence[str] = OUTPUT_FORMATS,
) -> str:
    """Overlay the normal density and each Student's t density of ``table``."""
    required = {"x", "normal"}
    missing = required - set(table.columns)
    if missing:
        raise KeyError(f"density table missing required columns: {missing}")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)

    ax.plot(table["x"], table["normal"], color=NEUTRAL_COLOR, label="normal")
    t_cols = [c for c in table.columns if c.startswith("t(")]
    for idx, col in enumerate(t_cols):
        ax.plot(
            table["x"],
            table[col],
            color=color_for_group(idx),
            linestyle="--",
            linewidth=STYLE.LINEWIDTH_THIN,
            label=col,
        )
    set_axis_labels(ax, x=MATH_LABELS["x"], y=MATH_LABELS["density"])
    clean_axis(ax)
    ax.legend(loc="upper right")
    return save_figure_bundle(
        fig, os.path.join(output_dir, "normal_vs_t.png"), formats=formats
    )


def plot_variogram(
    empirical: EmpiricalVariogram,
    fit: Optional[VariogramFit] = None,
    output_dir: str = "output",
    formats: Sequence[str] = OUTPUT_FORMATS,
) -> str:
    """Plot empirical semivariances, annotated with pair counts, and a fit."""
    if len(empirical) == 0:
        raise ValueError("empirical variogram is empty; nothing to plot")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)

    ax.scatter(
        empirical.lag_distance,
        empirical.gamma,
        color=color_for_group(0),
        zorder=3,
        label="empirical",
    )
    for h, n, g in empirical:
        ax.annotate(str(n), (h, g), textcoords="offset points", xytext=(4, 4), fontsize=8)

    if fit is not None:
        grid = np.linspace(0.0, float(np.max(empirical.bin_upper)), 200)
        label = f"{fit.model_family} fit" + ("" if fit.converged else " (not converged)")
        ax.plot(
            grid,
            fit.predict(grid),
            color=color_for_group(1) if fit.converged else NEUTRAL_COLOR,
            linestyle="-" if fit.converged else ":",
            label=label,
        )

    ax.set_xlim(left=0.0)
    ax.set_ylim(bottom=0.0)
    set_axis_labels(ax, x=MATH_LABELS["lag"], y=MATH_LABELS["gamma"])
    clean_axis(ax)
    ax.legend(loc="lower right")
    return save_figure_bundle(
        fig, os.path.join(output_dir, "variogram.png"), formats=formats
    )
