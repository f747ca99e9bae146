"""Descriptive statistics with Bessel-corrected variance.

This module supports the population-vs-sample and variance notes:
- sample mean, variance, and standard deviation,
- per-group summaries for the t-test notes, and
- a comparison of the biased and unbiased variance estimators.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from ..errors import InsufficientDataError
from ..sample import Sample, as_values


@dataclass(frozen=True)
class DescriptiveSummary:
    """Mean and spread of one sample."""

    n: int
    mean: float
    variance: float
    standard_deviation: float
    standard_error: float


def summarize(sample) -> DescriptiveSummary:
    """Compute mean, variance, and standard deviation of a sample.

    Args:
        sample (Sample | array-like): Observations. Non-finite values are
            dropped before computing.

    Returns:
        DescriptiveSummary: Sample size, mean, Bessel-corrected variance
        (divide by ``n - 1``), its square root, and the standard error of the
        mean.

    Raises:
        InsufficientDataError: If fewer than two finite observations remain;
            the sample variance is undefined for ``n < 2``.
    """
    values = as_values(sample, min_n=2)
    n = int(len(values))
    mean = float(np.mean(values))
    variance = float(np.sum((values - mean) ** 2) / (n - 1))
    variance = max(variance, 0.0)
    sd = math.sqrt(variance)
    return DescriptiveSummary(
        n=n,
        mean=mean,
        variance=variance,
        standard_deviation=sd,
        standard_error=sd / math.sqrt(n),
    )


def summarize_groups(sample: Sample) -> pd.DataFrame:
    """Summarize each group of a labelled sample.

    Groups with fewer than two observations are reported with NaN spread
    rather than dropped, so the table always lists every label.
    """
    rows = []
    for label, part in sample.split().items():
        try:
            s = summarize(part)
            row = {
                "group": label,
                "n": s.n,
                "mean": s.mean,
                "variance": s.variance,
                "sd": s.standard_deviation,
                "se": s.standard_error,
            }
        except InsufficientDataError:
            values = part.finite_values
            row = {
                "group": label,
                "n": int(len(values)),
                "mean": float(np.mean(values)) if len(values) else math.nan,
                "variance": math.nan,
                "sd": math.nan,
                "se": math.nan,
            }
        rows.append(row)
    return pd.DataFrame.from_records(rows)


def variance_bias_table(samples: np.ndarray, population_variance: float) -> pd.DataFrame:
    """Compare the divide-by-n and divide-by-(n-1) variance estimators.

    Args:
        samples (numpy.ndarray): 2-D array with one repeated sample per row.
        population_variance (float): True variance of the generating
            population.

    Returns:
        pandas.DataFrame: One row per estimator with its average over all
        repeats and the bias relative to ``population_variance``.

    Note:
        Averaged over many repeats, the ``n - 1`` estimator centres on the
        population variance while the ``n`` estimator falls short by a factor
        of ``(n - 1) / n``.
    """
    arr = np.asarray(samples, dtype=float)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise InsufficientDataError(
            "Need a 2-D array of repeated samples with at least two columns."
        )
    n = arr.shape[1]
    biased = np.var(arr, axis=1, ddof=0)
    unbiased = np.var(arr, axis=1, ddof=1)
    rows = []
    for label, est in (("divide by n", biased), ("divide by n-1", unbiased)):
        mean_est = float(np.mean(est))
        rows.append(
            {
                "estimator": label,
                "sample_size": n,
                "mean_estimate": mean_est,
                "population_variance": float(population_variance),
                "bias": mean_est - float(population_variance),
            }
        )
    return pd.DataFrame.from_records(rows)
