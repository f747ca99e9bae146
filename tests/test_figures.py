import os

import numpy as np
import pandas as pd
import pytest

from statnotes.datasets import sleep
from statnotes.plotting import (
    plot_distributions,
    plot_linear_fit,
    plot_paired_comparison,
    plot_residual_diagnostics,
    plot_variogram,
)
from statnotes.simulation import simulate_linear_groups, simulate_spatial_field
from statnotes.spatial import EmpiricalVariogram, empirical_variogram_from_frame, fit_theoretical_model
from statnotes.schema import SpatialRoles
from statnotes.stats import density_table, fit_linear_model


def test_plot_paired_comparison(tmp_path):
    out = plot_paired_comparison(
        sleep(), value="extra", group="group", subject="ID", output_dir=str(tmp_path)
    )
    assert os.path.basename(out) == "paired_comparison.png"
    for ext in ("png", "pdf", "svg"):
        assert os.path.exists(os.path.join(tmp_path, f"paired_comparison.{ext}"))


def test_plot_paired_comparison_missing_column(tmp_path):
    with pytest.raises(KeyError):
        plot_paired_comparison(
            sleep(), value="hours", group="group", subject="ID", output_dir=str(tmp_path)
        )


def test_plot_linear_fit_with_groups(tmp_path, rng):
    frame = simulate_linear_groups(rng, n_per_group=15)
    fit = fit_linear_model(
        frame[["x"]], frame["y"], group=frame["group"], group_policy="interaction"
    )
    out = plot_linear_fit(fit, output_dir=str(tmp_path), formats=("png",))
    assert os.path.exists(out)

    diag = plot_residual_diagnostics(fit, output_dir=str(tmp_path), formats=("png",))
    assert os.path.exists(diag)


def test_plot_linear_fit_rejects_multiple_predictors(tmp_path, rng):
    x = rng.normal(size=(20, 2))
    fit = fit_linear_model(x, x.sum(axis=1) + rng.normal(size=20))
    with pytest.raises(ValueError):
        plot_linear_fit(fit, output_dir=str(tmp_path))


def test_plot_distributions(tmp_path):
    table = density_table(np.linspace(-4.0, 4.0, 81))
    out = plot_distributions(table, output_dir=str(tmp_path), formats=("png",))
    assert os.path.exists(out)

    with pytest.raises(KeyError):
        plot_distributions(pd.DataFrame({"x": [0.0]}), output_dir=str(tmp_path))


def test_plot_variogram_with_fit(tmp_path, rng):
    field = simulate_spatial_field(rng, n_points=60)
    ev = empirical_variogram_from_frame(field, SpatialRoles())
    fit = fit_theoretical_model(ev, model_family="spherical", weighting="npairs")
    out = plot_variogram(ev, fit, output_dir=str(tmp_path), formats=("png",))
    assert os.path.exists(out)


def test_plot_variogram_rejects_empty(tmp_path):
    empty = EmpiricalVariogram(
        lag_distance=np.array([]),
        pair_count=np.array([], dtype=int),
        gamma=np.array([]),
        bin_lower=np.array([]),
        bin_upper=np.array([]),
    )
    with pytest.raises(ValueError):
        plot_variogram(empty, output_dir=str(tmp_path))


def test_save_figure_returns_first_written_format(tmp_path):
    import matplotlib.pyplot as plt

    from statnotes.plotting.style import save_figure

    fig, ax = plt.subplots()
    ax.plot([0, 1], [0, 1])
    out = save_figure(fig, tmp_path / "line", formats=("svg", "pdf"))
    plt.close(fig)

    assert out == tmp_path / "line.svg"
    assert out.exists()
    assert (tmp_path / "line.pdf").exists()
    assert not (tmp_path / "line.png").exists()
