"""Shared figure style for the notes: rcParams, group colours, axis cleanup, saving."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    FONTSIZE: float = 11.0
    TITLE_FONTSIZE: float = 13.0
    LINEWIDTH: float = 1.8
    LINEWIDTH_THIN: float = 1.0
    MARKERSIZE: float = 5.0
    ALPHA_POINTS: float = 0.65
    GRID_ALPHA: float = 0.25
    FIGSIZE_SINGLE: tuple[float, float] = (6.5, 4.0)
    FIGSIZE_WIDE: tuple[float, float] = (11.0, 4.0)


STYLE = StyleConfig()

# Group colours follow sorted group labels, so "a" and drug 1 share a colour.
GROUP_COLORS = ("#1f77b4", "#d62728", "#2ca02c", "#ff7f0e", "#9467bd", "#8c564b")
NEUTRAL_COLOR = "#4A4A4A"

MATH_LABELS = {
    "x": r"$x$",
    "y": r"$y$",
    "fitted": r"Fitted values $\hat{y}$",
    "residual": r"Residual $y-\hat{y}$",
    "theoretical_quantile": r"Theoretical quantile $z$",
    "sample_quantile": r"Standardized residual",
    "density": r"Density $f(x)$",
    "lag": r"Lag distance $h$",
    "gamma": r"Semivariance $\gamma(h)$",
}


def apply_global_style(font_scale: float = 1.0) -> None:
    """Update Matplotlib rcParams for report figures, scaled by ``font_scale``."""
    size = STYLE.FONTSIZE * float(font_scale)
    rc = {
        "font.size": size,
        "axes.titlesize": STYLE.TITLE_FONTSIZE * float(font_scale),
        "axes.labelsize": size,
        "xtick.labelsize": size * 0.9,
        "ytick.labelsize": size * 0.9,
        "legend.fontsize": size * 0.9,
        "legend.frameon": False,
        "mathtext.fontset": "dejavusans",
        "axes.spines.top": False,
        "axes.spines.right": False,
        "axes.linewidth": STYLE.LINEWIDTH_THIN,
        "lines.linewidth": STYLE.LINEWIDTH,
        "lines.markersize": STYLE.MARKERSIZE,
        "savefig.dpi": FIGURE_DPI,
        "savefig.bbox": "tight",
    }
    plt.rcParams.update(rc)


def set_global_style() -> None:
    """Apply the report style the first time a figure is drawn."""
    if _STYLE_STATE["initialized"]:
        return
    apply_global_style()
    _STYLE_STATE["initialized"] = True


def color_for_group(index: int) -> str:
    if index < 0:
        return NEUTRAL_COLOR
    return GROUP_COLORS[index % len(GROUP_COLORS)]


def clean_axis(
    ax: Axes,
    *,
    grid_axis: str = "y",
    nbins_x: int = 6,
    nbins_y: int = 6,
) -> None:
    """Limit tick counts, hide top/right spines, and draw a light dotted grid."""
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins_x))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins_y))
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)
    ax.grid(False)
    if grid_axis in {"x", "y", "both"}:
        ax.grid(True, axis=grid_axis, alpha=STYLE.GRID_ALPHA, linestyle=":")


def set_axis_labels(ax: Axes, x: str | None = None, y: str | None = None) -> None:
    if x is not None:
        ax.set_xlabel(x)
    if y is not None:
        ax.set_ylabel(y)


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
) -> Path:
    """Write ``fig`` once per format next to an extensionless base path.

    Returns:
        pathlib.Path: Path of the file written for the first format.
    """
    if not formats:
        raise ValueError("At least one figure format is required.")
    base = Path(savepath_base)
    base.parent.mkdir(parents=True, exist_ok=True)
    written = [base.with_suffix(f".{ext}") for ext in formats]
    for path in written:
        fig.savefig(path, dpi=dpi)
    return written[0]


def save_figure_bundle(
    fig: Figure, fig_path: str, formats: Sequence[str] = OUTPUT_FORMATS
) -> str:
    """Save ``fig`` in every requested format, then close it.

    The extension of ``fig_path`` is replaced by each entry of ``formats``.
    """
    try:
        out = save_figure(fig, os.path.splitext(fig_path)[0], formats=formats)
    finally:
        plt.close(fig)
    return str(out)
