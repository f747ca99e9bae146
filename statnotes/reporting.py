"""Render statistical results as readable report text.

This module sits between the numerical core and the output layer. Each note
is assembled as a :class:`ReportSection`; a section whose computation fails
keeps the error message and drops every partial statistic, so no misleading
number reaches the report.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from .errors import StatNotesError
from .spatial.models import VariogramFit
from .spatial.variogram import EmpiricalVariogram
from .stats.descriptive import DescriptiveSummary
from .stats.diagnostics import HeteroscedasticityCheck, NormalityCheck
from .stats.regression import LinearModelFit
from .stats.ttest import GroupComparison

logger = logging.getLogger(__name__)

INDENT = "  "


def _round_standard_error(se: float) -> tuple[float, int]:
    """Round a standard error to 1 s.f. (2 when the leading digit is 1).

    Returns:
        tuple[float, int]: Rounded value and the decimal places used.

    Raises:
        ValueError: If ``se`` is non-finite or non-positive.
    """
    u = float(se)
    if not np.isfinite(u) or u <= 0:
        raise ValueError(f"Standard error must be finite and > 0, got {se!r}")

    exponent = int(np.floor(np.log10(abs(u))))
    leading = abs(u) / (10**exponent)
    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent
    return float(round(abs(u), ndigits)), int(max(0, ndigits))


def format_estimate(value: float, standard_error: float) -> str:
    """Format ``value ± se`` with the value rounded to the precision of its SE.

    Falls back to four significant figures when the standard error is zero or
    undefined.
    """
    v = float(value)
    se = float(standard_error)
    if not np.isfinite(v):
        return "NaN"
    if not np.isfinite(se) or se <= 0:
        return f"{v:.4g}"
    rounded_se, dp = _round_standard_error(se)
    return f"{v:.{dp}f} ± {rounded_se:.{dp}f}"


def format_p_value(value: float) -> str:
    """Format p-values consistently for reports and plot annotations."""
    if not np.isfinite(value):
        return "NaN"
    if value < 1e-3:
        return "<0.001"
    return f"{value:.3f}"


def _fmt(value: float, spec: str = ".4f") -> str:
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Inf" if v > 0 else "-Inf"
    return format(v, spec)


def render_summary(summary: DescriptiveSummary, label: str = "sample") -> str:
    return "\n".join(
        [
            f"Summary of {label} (n={summary.n})",
            f"{INDENT}mean = {format_estimate(summary.mean, summary.standard_error)}",
            f"{INDENT}variance (n-1) = {_fmt(summary.variance)}",
            f"{INDENT}standard deviation = {_fmt(summary.standard_deviation)}",
        ]
    )


_ALTERNATIVE_TEXT = {
    "two-sided": "not equal to",
    "less": "less than",
    "greater": "greater than",
}


def render_comparison(result: GroupComparison) -> str:
    """Render a t-test in the layout of a statistics console printout."""
    if result.method == "One Sample t-test":
        subject = "true mean"
        null_value = result.mean_b
        estimate_line = f"mean of x: {_fmt(result.mean_a)}"
    else:
        subject = "true mean difference" if result.paired else "true difference in means"
        null_value = 0.0
        estimate_line = (
            f"difference in means: "
            f"{format_estimate(result.difference_in_means, result.standard_error)} (± SE)"
        )
    lo, hi = result.conf_int
    return "\n".join(
        [
            result.method,
            f"{INDENT}t = {_fmt(result.statistic)}, "
            f"df = {_fmt(result.degrees_of_freedom, '.6g')}, "
            f"p-value = {format_p_value(result.p_value)}",
            f"{INDENT}alternative hypothesis: {subject} is "
            f"{_ALTERNATIVE_TEXT[result.alternative]} {null_value:g}",
            f"{INDENT}{result.conf_level * 100:g} percent confidence interval: "
            f"[{_fmt(lo)}, {_fmt(hi)}]",
            f"{INDENT}{estimate_line}",
        ]
    )


def render_linear_fit(fit: LinearModelFit) -> str:
    """Render the coefficient table and fit statistics of an OLS model."""
    table = fit.coefficient_table()
    width = max(len(t) for t in fit.terms)
    lines = [
        "Coefficients:",
        f"{INDENT}{'':<{width}}  {'Estimate':>10}  {'Std. Error':>10}  "
        f"{'t value':>8}  {'Pr(>|t|)':>8}",
    ]
    for _, row in table.iterrows():
        lines.append(
            f"{INDENT}{row.iloc[0]:<{width}}  {_fmt(row.iloc[1]):>10}  "
            f"{_fmt(row.iloc[2]):>10}  {_fmt(row.iloc[3], '.3f'):>8}  "
            f"{format_p_value(row.iloc[4]):>8}"
        )
    lines.append(
        f"Residual standard error: {_fmt(fit.sigma)} on {fit.df_residual} degrees of freedom"
    )
    lines.append(
        f"Multiple R-squared: {_fmt(fit.r_squared)}, "
        f"Adjusted R-squared: {_fmt(fit.r_squared_adjusted)}"
    )
    if not math.isnan(fit.f_statistic):
        lines.append(
            f"F-statistic: {_fmt(fit.f_statistic, '.4g')} on {len(fit.terms) - 1} and "
            f"{fit.df_residual} DF, p-value: {format_p_value(fit.f_p_value)}"
        )
    return "\n".join(lines)


def render_heteroscedasticity(check: HeteroscedasticityCheck) -> str:
    return "\n".join(
        [
            check.method,
            f"{INDENT}BP = {_fmt(check.statistic)}, df = {check.degrees_of_freedom}, "
            f"p-value = {format_p_value(check.p_value)}",
        ]
    )


def render_normality(check: NormalityCheck) -> str:
    return "\n".join(
        [
            check.method,
            f"{INDENT}W = {_fmt(check.statistic)}, p-value = {format_p_value(check.p_value)}",
        ]
    )


def render_variogram(empirical: EmpiricalVariogram) -> str:
    lines = [f"{INDENT}{'np':>6}  {'dist':>10}  {'gamma':>10}"]
    for h, n, g in empirical:
        lines.append(f"{INDENT}{n:>6d}  {h:>10.4f}  {g:>10.4f}")
    if empirical.omitted_bins:
        lines.append(f"{INDENT}empty bins omitted: {list(empirical.omitted_bins)}")
    return "\n".join(lines)


def render_variogram_fit(fit: VariogramFit) -> str:
    status = "converged" if fit.converged else f"NOT converged ({fit.message})"
    return "\n".join(
        [
            f"{fit.model_family} model, weighting {fit.weighting}: {status}",
            f"{INDENT}nugget = {_fmt(fit.nugget)}",
            f"{INDENT}partial sill = {_fmt(fit.partial_sill)}, sill = {_fmt(fit.sill)}",
            f"{INDENT}range = {_fmt(fit.range)} (effective range {_fmt(fit.effective_range)})",
        ]
    )


@dataclass
class ReportSection:
    """One note of the report: narrative, rendered results, tables, figures."""

    title: str
    narrative: str = ""
    blocks: List[str] = field(default_factory=list)
    tables: Dict[str, pd.DataFrame] = field(default_factory=dict)
    figures: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def add(self, text: str) -> None:
        self.blocks.append(text.rstrip())

    def render(self) -> str:
        parts = [self.title, "=" * len(self.title)]
        if self.narrative:
            parts.append(self.narrative.strip())
        if self.error is not None:
            parts.append(f"[section halted] {self.error}")
        else:
            parts.extend(self.blocks)
            parts.extend(f"Figure: {path}" for path in self.figures)
        return "\n\n".join(parts)


@dataclass
class Report:
    sections: List[ReportSection] = field(default_factory=list)

    @property
    def errors(self) -> List[tuple[str, str]]:
        return [(s.title, s.error) for s in self.sections if s.error is not None]

    def section(self, title: str) -> ReportSection:
        for s in self.sections:
            if s.title == title:
                return s
        raise KeyError(f"No report section titled {title!r}.")

    def render(self) -> str:
        return "\n\n\n".join(s.render() for s in self.sections) + "\n"


def build_section(
    title: str,
    compute: Callable[[ReportSection], None],
    narrative: str = "",
) -> ReportSection:
    """Run one note's computation into a fresh section.

    ``compute`` receives the section and fills it. A ``StatNotesError`` halts
    the section: its blocks, tables and figures are discarded and the error
    message is kept for the caller. Other exceptions propagate.
    """
    section = ReportSection(title=title, narrative=narrative)
    try:
        compute(section)
    except StatNotesError as exc:
        logger.warning("Section '%s' halted: %s", title, exc)
        section.blocks.clear()
        section.tables.clear()
        section.figures.clear()
        section.error = f"{type(exc).__name__}: {exc}"
    return section
