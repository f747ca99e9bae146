"""
Statistical routines behind the inference notes.

This subpackage provides the numerical core: descriptive statistics,
t-tests, ordinary least squares, residual diagnostics, and distribution
tables. All functions operate on arrays, pandas objects, or ``Sample``
instances and return frozen result objects; no plotting or report
formatting is included.

Modules:
    descriptive:
        Mean, Bessel-corrected variance, standard deviation, per-group
        summaries, and the biased vs. unbiased variance comparison.

    ttest:
        One-sample, paired, pooled, and Welch t-tests with one- or
        two-sided alternatives and confidence intervals.

    regression:
        OLS with an optional categorical factor entering as intercept,
        slope, or full interaction.

    diagnostics:
        Breusch-Pagan heteroscedasticity test, Shapiro-Wilk normality test,
        and Q-Q coordinates for residuals.

    distributions:
        Normal and Student's t density and critical-value tables.

Design Principle:
    This subpackage has no dependencies on plotting/ or reporting modules.
    Randomness never enters here; simulated inputs are drawn elsewhere from
    an explicitly passed generator.
"""

from .descriptive import (
    DescriptiveSummary,
    summarize,
    summarize_groups,
    variance_bias_table,
)
from .diagnostics import (
    HeteroscedasticityCheck,
    NormalityCheck,
    check_residual_normality,
    diagnose_fit,
    diagnose_residuals,
    qq_points,
)
from .distributions import critical_values, density_table
from .regression import GROUP_POLICIES, LinearModelFit, fit_linear_model
from .ttest import GroupComparison, compare_groups, compare_sample, one_sample_test

__all__ = [
    "DescriptiveSummary",
    "summarize",
    "summarize_groups",
    "variance_bias_table",
    "GroupComparison",
    "compare_groups",
    "compare_sample",
    "one_sample_test",
    "GROUP_POLICIES",
    "LinearModelFit",
    "fit_linear_model",
    "HeteroscedasticityCheck",
    "NormalityCheck",
    "check_residual_normality",
    "diagnose_fit",
    "diagnose_residuals",
    "qq_points",
    "critical_values",
    "density_table",
]
