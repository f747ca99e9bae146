"""Student's t-tests for one sample, paired samples, and independent groups.

scipy's ``ttest_1samp``, ``ttest_rel`` and ``ttest_ind`` supply the statistic,
p-value, degrees of freedom and interval. Samples without spread are handled
here first, since scipy reports NaN for them.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy import stats as scipy_stats

from ..errors import DimensionMismatchError
from ..sample import Sample, align_subjects, as_values

ALTERNATIVES: tuple[str, ...] = ("two-sided", "less", "greater")


@dataclass(frozen=True)
class GroupComparison:
    """Result of a t-test.

    ``difference_in_means`` is ``mean(a) - mean(b)`` for two samples (the mean
    of per-subject differences when paired) and ``mean(a) - mu`` for the
    one-sample test.
    """

    method: str
    alternative: str
    paired: bool
    difference_in_means: float
    standard_error: float
    degrees_of_freedom: float
    statistic: float
    p_value: float
    conf_level: float
    conf_int: Tuple[float, float]
    n_a: int
    n_b: int
    mean_a: float
    mean_b: float


def _check_arguments(alternative: str, conf_level: float) -> None:
    if alternative not in ALTERNATIVES:
        raise ValueError(
            f"alternative must be one of {list(ALTERNATIVES)}. Got: {alternative!r}"
        )
    if not 0.0 < conf_level < 1.0:
        raise ValueError(f"conf_level must lie in (0, 1), got {conf_level}.")


def _raw_values(data) -> np.ndarray:
    raw = data.values if isinstance(data, Sample) else data
    return np.asarray(raw, dtype=float).reshape(-1)


def _paired_inputs(sample_a, sample_b) -> Tuple[np.ndarray, np.ndarray]:
    if (
        isinstance(sample_a, Sample)
        and isinstance(sample_b, Sample)
        and sample_a.subjects is not None
        and sample_b.subjects is not None
    ):
        sample_b = align_subjects(sample_a, sample_b)
    a_raw = _raw_values(sample_a)
    b_raw = _raw_values(sample_b)
    if len(a_raw) != len(b_raw):
        raise DimensionMismatchError(
            f"Samples must have equal length for a paired test. "
            f"Sample A: {len(a_raw)}, sample B: {len(b_raw)}"
        )
    keep = np.isfinite(a_raw) & np.isfinite(b_raw)
    return a_raw[keep], b_raw[keep]


def _zero_spread_result(
    estimate: float, dof: float, alternative: str
) -> Tuple[float, float, Tuple[float, float]]:
    """Statistic, p-value and interval when the standard error is zero."""
    if estimate == 0:
        statistic = 0.0
    else:
        warnings.warn(
            "Data are essentially constant; t statistic is infinite.",
            RuntimeWarning,
            stacklevel=3,
        )
        statistic = math.copysign(math.inf, estimate)

    if alternative == "less":
        p_value = float(scipy_stats.t.cdf(statistic, dof))
        conf_int = (-math.inf, estimate)
    elif alternative == "greater":
        p_value = float(scipy_stats.t.sf(statistic, dof))
        conf_int = (estimate, math.inf)
    else:
        p_value = 1.0 if statistic == 0 else 0.0
        conf_int = (estimate, estimate)
    return statistic, p_value, conf_int


def _interval(result, conf_level: float) -> Tuple[float, float]:
    ci = result.confidence_interval(confidence_level=conf_level)
    return float(ci.low), float(ci.high)


def compare_groups(
    sample_a,
    sample_b,
    paired: bool = False,
    alternative: str = "two-sided",
    equal_var: bool = False,
    conf_level: float = 0.95,
) -> GroupComparison:
    """Compare the means of two samples with a t-test.

    Args:
        sample_a (Sample | array-like): First sample.
        sample_b (Sample | array-like): Second sample.
        paired (bool, optional): Test per-subject differences ``a - b``. When
            both inputs are ``Sample`` objects with subject IDs, ``sample_b``
            is reordered to match the subjects of ``sample_a``; otherwise
            position ``i`` of both samples must refer to the same subject.
            Defaults to ``False``.
        alternative (str, optional): ``"two-sided"`` (default), ``"less"``
            (mean of ``a`` below ``b``) or ``"greater"``.
        equal_var (bool, optional): For independent groups, pool the two
            variances instead of using the Welch adjustment. Defaults to
            ``False``.
        conf_level (float, optional): Confidence level of the interval for
            the mean difference. Defaults to ``0.95``.

    Returns:
        GroupComparison: Mean difference, standard error, degrees of freedom,
        t statistic, p-value, and confidence interval.

    Raises:
        DimensionMismatchError: If ``paired`` and the samples differ in length,
            or their subject IDs repeat or do not match.
        InsufficientDataError: If a sample has fewer than two usable
            observations.
        ValueError: If ``alternative`` or ``conf_level`` is not valid.

    Note:
        When the standard error is zero the statistic is ``0`` for a zero
        difference (p-value 1) and signed infinity otherwise (p-value 0).
    """
    _check_arguments(alternative, conf_level)

    if paired:
        a, b = _paired_inputs(sample_a, sample_b)
        diffs = as_values(a - b, min_n=2, label="paired differences")
        n_a = n_b = int(len(diffs))
        estimate = float(np.mean(diffs))
        se = float(np.std(diffs, ddof=1) / math.sqrt(n_a))
        dof = float(n_a - 1)
        method = "Paired t-test"
    else:
        a = as_values(sample_a, min_n=2, label="sample A")
        b = as_values(sample_b, min_n=2, label="sample B")
        n_a, n_b = int(len(a)), int(len(b))
        var_a = float(np.var(a, ddof=1))
        var_b = float(np.var(b, ddof=1))
        estimate = float(np.mean(a) - np.mean(b))
        dof = float(n_a + n_b - 2)
        if equal_var:
            pooled = ((n_a - 1) * var_a + (n_b - 1) * var_b) / dof
            se = math.sqrt(pooled * (1.0 / n_a + 1.0 / n_b))
            method = "Two Sample t-test"
        else:
            se = math.sqrt(var_a / n_a + var_b / n_b)
            method = "Welch Two Sample t-test"

    if se > 0:
        if paired:
            result = scipy_stats.ttest_rel(a, b, alternative=alternative)
        else:
            result = scipy_stats.ttest_ind(
                a, b, equal_var=equal_var, alternative=alternative
            )
        statistic = float(result.statistic)
        p_value = float(result.pvalue)
        dof = float(result.df)
        conf_int = _interval(result, conf_level)
    else:
        statistic, p_value, conf_int = _zero_spread_result(estimate, dof, alternative)

    return GroupComparison(
        method=method,
        alternative=alternative,
        paired=bool(paired),
        difference_in_means=estimate,
        standard_error=float(se),
        degrees_of_freedom=dof,
        statistic=statistic,
        p_value=p_value,
        conf_level=float(conf_level),
        conf_int=conf_int,
        n_a=n_a,
        n_b=n_b,
        mean_a=float(np.mean(a)),
        mean_b=float(np.mean(b)),
    )


def compare_sample(
    sample: Sample,
    paired: bool = False,
    alternative: str = "two-sided",
    equal_var: bool = False,
    conf_level: float = 0.95,
) -> GroupComparison:
    """Run ``compare_groups`` on the two groups of a labelled sample.

    Groups are taken in sorted label order. For paired tests the second group
    is reordered to match the subjects of the first.
    """
    if paired:
        first, second = sample.paired_split()
    else:
        parts = sample.split()
        if len(parts) != 2:
            raise ValueError(
                f"Two-group comparison needs exactly two groups, found {len(parts)}."
            )
        first, second = parts.values()
    return compare_groups(
        first,
        second,
        paired=paired,
        alternative=alternative,
        equal_var=equal_var,
        conf_level=conf_level,
    )


def one_sample_test(
    sample,
    mu: float = 0.0,
    alternative: str = "two-sided",
    conf_level: float = 0.95,
) -> GroupComparison:
    """Test whether a sample mean differs from a hypothesised value ``mu``.

    The interval is for the population mean, not for ``mean - mu``.
    """
    _check_arguments(alternative, conf_level)
    values = as_values(sample, min_n=2)
    n = int(len(values))
    mean = float(np.mean(values))
    estimate = mean - float(mu)
    se = float(np.std(values, ddof=1) / math.sqrt(n))
    dof = float(n - 1)
    if se > 0:
        result = scipy_stats.ttest_1samp(
            values, popmean=float(mu), alternative=alternative
        )
        statistic = float(result.statistic)
        p_value = float(result.pvalue)
        dof = float(result.df)
        conf_int = _interval(result, conf_level)
    else:
        statistic, p_value, (lo, hi) = _zero_spread_result(estimate, dof, alternative)
        conf_int = (lo + float(mu), hi + float(mu))
    return GroupComparison(
        method="One Sample t-test",
        alternative=alternative,
        paired=False,
        difference_in_means=estimate,
        standard_error=se,
        degrees_of_freedom=dof,
        statistic=statistic,
        p_value=p_value,
        conf_level=float(conf_level),
        conf_int=conf_int,
        n_a=n,
        n_b=0,
        mean_a=mean,
        mean_b=float(mu),
    )
