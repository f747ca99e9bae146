import math

import numpy as np
import pytest

from statnotes.errors import InsufficientDataError
from statnotes.stats import summarize, summarize_groups, variance_bias_table


def test_summarize_uses_bessel_correction():
    s = summarize([2, 4, 4, 4, 5, 5, 7, 9])
    assert s.n == 8
    assert s.mean == pytest.approx(5.0)
    # Squared deviations sum to 32; divided by n - 1 = 7
    assert s.variance == pytest.approx(32 / 7)
    assert s.standard_deviation == pytest.approx(math.sqrt(32 / 7))
    assert s.standard_error == pytest.approx(math.sqrt(32 / 7) / math.sqrt(8))


def test_summarize_drops_non_finite_values():
    s = summarize([1.0, np.nan, 3.0, np.inf])
    assert s.n == 2
    assert s.mean == pytest.approx(2.0)


@pytest.mark.parametrize("values", [[], [1.0], [np.nan, 2.0]])
def test_summarize_needs_two_observations(values):
    with pytest.raises(InsufficientDataError):
        summarize(values)


def test_summarize_groups_lists_every_label(sleep_sample):
    table = summarize_groups(sleep_sample)
    assert list(table["group"]) == [1, 2]
    assert table["n"].tolist() == [10, 10]
    assert table.loc[0, "mean"] == pytest.approx(0.75)
    assert table.loc[1, "mean"] == pytest.approx(2.33)


def test_variance_bias_table_shows_n_minus_one_is_unbiased(rng):
    samples = rng.normal(0.0, 2.0, size=(20000, 5))
    table = variance_bias_table(samples, population_variance=4.0).set_index("estimator")

    assert table.loc["divide by n-1", "mean_estimate"] == pytest.approx(4.0, abs=0.15)
    # Expected value of the biased estimator is (n - 1) / n * sigma^2 = 3.2
    assert table.loc["divide by n", "mean_estimate"] == pytest.approx(3.2, abs=0.15)
    assert table.loc["divide by n", "bias"] < table.loc["divide by n-1", "bias"]


def test_variance_bias_table_rejects_single_sample():
    with pytest.raises(InsufficientDataError):
        variance_bias_table(np.array([1.0, 2.0, 3.0]), population_variance=1.0)
