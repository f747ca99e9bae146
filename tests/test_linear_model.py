import numpy as np
import pandas as pd
import pytest

from statnotes.errors import DimensionMismatchError, InsufficientDataError
from statnotes.schema import COLUMNS
from statnotes.stats import fit_linear_model


def make_group_frame(rng, noise_sd=0.01):
    x = np.tile(np.linspace(0.0, 10.0, 20), 2)
    group = np.repeat(["a", "b"], 20)
    y = np.where(group == "a", 1.0 + 0.5 * x, 3.0 + 0.8 * x)
    y = y + rng.normal(0.0, noise_sd, size=len(x))
    return pd.DataFrame({"x": x, "y": y, "group": group})


def test_exact_line_is_recovered():
    x = np.arange(10.0)
    fit = fit_linear_model(x, 2.0 + 3.0 * x)

    assert fit.terms == ("(Intercept)", "x")
    assert fit.coefficient("(Intercept)") == pytest.approx(2.0)
    assert fit.coefficient("x") == pytest.approx(3.0)
    assert fit.r_squared == pytest.approx(1.0)
    assert np.allclose(fit.residuals, 0.0, atol=1e-9)


def test_residuals_are_response_minus_fitted(rng):
    x = np.linspace(0.0, 5.0, 30)
    y = 1.0 - 2.0 * x + rng.normal(0.0, 0.5, size=30)
    fit = fit_linear_model(x, y)

    assert np.allclose(fit.residuals, y - fit.fitted)
    assert fit.df_residual == 28


def test_adjusted_r_squared_formula(rng):
    x = rng.normal(size=(40, 2))
    y = 0.5 + x @ np.array([1.0, -0.3]) + rng.normal(0.0, 1.0, size=40)
    fit = fit_linear_model(x, y)

    n, p = 40, 3
    expected = 1.0 - (1.0 - fit.r_squared) * (n - 1) / (n - p)
    assert fit.terms == ("(Intercept)", "x1", "x2")
    assert fit.r_squared_adjusted == pytest.approx(expected)
    assert fit.r_squared_adjusted < fit.r_squared


@pytest.mark.parametrize(
    "policy, terms",
    [
        ("intercept", ("(Intercept)", "x", "group[T.b]")),
        ("slope", ("(Intercept)", "x", "x:group[T.b]")),
        ("interaction", ("(Intercept)", "x", "group[T.b]", "x:group[T.b]")),
    ],
)
def test_group_policy_term_names(rng, policy, terms):
    frame = make_group_frame(rng)
    fit = fit_linear_model(frame[["x"]], frame["y"], group=frame["group"], group_policy=policy)

    assert fit.terms == terms
    assert fit.group_levels == ("a", "b")


def test_interaction_recovers_group_lines(rng):
    frame = make_group_frame(rng)
    fit = fit_linear_model(
        frame[["x"]], frame["y"], group=frame["group"], group_policy="interaction"
    )

    assert fit.coefficient("(Intercept)") == pytest.approx(1.0, abs=0.05)
    assert fit.coefficient("x") == pytest.approx(0.5, abs=0.01)
    assert fit.coefficient("group[T.b]") == pytest.approx(2.0, abs=0.05)
    assert fit.coefficient("x:group[T.b]") == pytest.approx(0.3, abs=0.01)

    pred = fit.predict([0.0, 10.0], group=["b", "b"])
    assert pred == pytest.approx([3.0, 11.0], abs=0.1)


def test_coefficient_table_columns(rng):
    frame = make_group_frame(rng, noise_sd=0.5)
    fit = fit_linear_model(frame[["x"]], frame["y"], group=frame["group"], group_policy="intercept")
    table = fit.coefficient_table()

    assert list(table.columns) == [
        COLUMNS.term,
        COLUMNS.estimate,
        COLUMNS.std_error,
        COLUMNS.t_value,
        COLUMNS.p_value,
    ]
    assert np.allclose(table[COLUMNS.t_value], fit.coefficients / fit.standard_errors)
    assert ((table[COLUMNS.p_value] >= 0) & (table[COLUMNS.p_value] <= 1)).all()
    assert fit.f_p_value < 0.05


def test_group_requires_explicit_policy(rng):
    frame = make_group_frame(rng)
    with pytest.raises(ValueError, match="group_policy"):
        fit_linear_model(frame[["x"]], frame["y"], group=frame["group"])
    with pytest.raises(ValueError, match="group_policy"):
        fit_linear_model(frame[["x"]], frame["y"], group=frame["group"], group_policy="auto")
    with pytest.raises(ValueError):
        fit_linear_model(frame[["x"]], frame["y"], group_policy="intercept")


def test_single_level_group_raises():
    x = np.arange(6.0)
    with pytest.raises(ValueError, match="two levels"):
        fit_linear_model(x, x, group=["a"] * 6, group_policy="intercept")


def test_length_mismatch_raises():
    with pytest.raises(DimensionMismatchError):
        fit_linear_model([1.0, 2.0, 3.0], [1.0, 2.0])
    with pytest.raises(DimensionMismatchError):
        fit_linear_model([1.0, 2.0, 3.0], [1.0, 2.0, 3.0], group=["a", "b"], group_policy="slope")


def test_too_few_observations_raise():
    with pytest.raises(InsufficientDataError):
        fit_linear_model([1.0, 2.0], [1.0, 2.0])


def test_rank_deficient_design_raises():
    with pytest.raises(ValueError, match="rank deficient"):
        fit_linear_model([1.0, 1.0, 1.0, 1.0], [1.0, 2.0, 3.0, 4.0])


def test_non_finite_rows_are_dropped():
    x = np.array([0.0, 1.0, 2.0, np.nan, 4.0])
    y = np.array([1.0, 3.0, 5.0, 7.0, np.inf])
    fit = fit_linear_model(x, y)

    assert fit.n == 3
    assert fit.coefficient("x") == pytest.approx(2.0)
