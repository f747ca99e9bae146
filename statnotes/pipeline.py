"""Assemble the statistics notes into one report.

Each note narrates one concept, computes its statistic from a built-in or
simulated dataset, and optionally renders its figure:

1. Population and sample: Bessel's correction for the sample variance.
2. Normal and Student's t distributions.
3. Paired and unpaired t-tests on the sleep-drug data.
4. Linear regression with a categorical group factor.
5. Model diagnostics: heteroscedasticity and residual normality.
6. Empirical semivariogram and theoretical model fit.

All simulated data are drawn in this order from one generator, so a given
seed always produces the same report.
"""

from __future__ import annotations

import logging
import os
import time

import numpy as np
import pandas as pd

from . import datasets
from .config import NotesConfig
from .output import save_report
from .plotting import (
    plot_distributions,
    plot_linear_fit,
    plot_paired_comparison,
    plot_residual_diagnostics,
    plot_variogram,
)
from .reporting import (
    Report,
    ReportSection,
    build_section,
    format_p_value,
    render_comparison,
    render_heteroscedasticity,
    render_linear_fit,
    render_normality,
    render_summary,
    render_variogram,
    render_variogram_fit,
)
from .sample import Sample
from .schema import SpatialRoles
from .simulation import (
    draw_samples,
    make_generator,
    simulate_heteroscedastic,
    simulate_linear_groups,
    simulate_spatial_field,
)
from .spatial import (
    empirical_variogram_from_frame,
    fit_theoretical_model,
    make_lag_bins,
)
from .stats import (
    check_residual_normality,
    compare_sample,
    critical_values,
    density_table,
    diagnose_fit,
    fit_linear_model,
    summarize,
    summarize_groups,
    variance_bias_table,
)

logger = logging.getLogger(__name__)

SPATIAL_ROLES = SpatialRoles(coordinates=("x", "y"), value="value")


def _decision(p_value: float, alpha: float) -> str:
    verdict = "reject" if p_value < alpha else "do not reject"
    return f"At alpha = {alpha:g}: {verdict} the null hypothesis (p = {format_p_value(p_value)})."


def _figure_dir(config: NotesConfig) -> str:
    return os.path.join(config.output_dir, "figures")


def population_section(config: NotesConfig, rng: np.random.Generator) -> ReportSection:
    def compute(section: ReportSection) -> None:
        samples = draw_samples(
            rng,
            mean=config.population_mean,
            sd=config.population_sd,
            sample_size=config.variance_sample_size,
            repeats=config.variance_repeats,
        )
        section.add(render_summary(summarize(samples[0]), label="the first sample"))
        table = variance_bias_table(samples, config.population_sd**2)
        section.tables["variance_estimators"] = table
        section.add(table.to_string(index=False, float_format=lambda v: f"{v:.4f}"))

    return build_section(
        "Population and sample",
        compute,
        narrative=(
            "A sample is a finite draw from a population. Averaged over many "
            "repeated samples, dividing the squared deviations by n-1 recovers "
            "the population variance, while dividing by n underestimates it."
        ),
    )


def distributions_section(config: NotesConfig) -> ReportSection:
    def compute(section: ReportSection) -> None:
        table = density_table(np.linspace(-4.0, 4.0, 161), dfs=(1, 5, 30))
        crit = critical_values(config.alpha)
        section.tables["critical_values"] = crit
        section.add(crit.to_string(index=False, float_format=lambda v: f"{v:.4f}"))
        if config.make_plots:
            section.figures.append(
                plot_distributions(
                    table, output_dir=_figure_dir(config), formats=config.figure_formats
                )
            )

    return build_section(
        "Normal and Student's t distributions",
        compute,
        narrative=(
            "Student's t distribution has heavier tails than the normal and "
            "approaches it as the degrees of freedom grow."
        ),
    )


def ttest_section(config: NotesConfig) -> ReportSection:
    def compute(section: ReportSection) -> None:
        frame = datasets.sleep()
        sample = Sample.from_frame(frame, value="extra", group="group", subject="ID")
        groups = summarize_groups(sample)
        section.tables["group_summary"] = groups
        section.add(groups.to_string(index=False, float_format=lambda v: f"{v:.4f}"))

        paired = compare_sample(sample, paired=True, conf_level=config.conf_level)
        section.add(render_comparison(paired))
        section.add(_decision(paired.p_value, config.alpha))

        unpaired = compare_sample(sample, paired=False, conf_level=config.conf_level)
        section.add(render_comparison(unpaired))
        section.add(_decision(unpaired.p_value, config.alpha))

        section.tables["tests"] = pd.DataFrame(
            [
                {
                    "method": r.method,
                    "difference_in_means": r.difference_in_means,
                    "standard_error": r.standard_error,
                    "df": r.degrees_of_freedom,
                    "t": r.statistic,
                    "p_value": r.p_value,
                    "ci_low": r.conf_int[0],
                    "ci_high": r.conf_int[1],
                }
                for r in (paired, unpaired)
            ]
        )
        if config.make_plots:
            section.figures.append(
                plot_paired_comparison(
                    frame,
                    value="extra",
                    group="group",
                    subject="ID",
                    output_dir=_figure_dir(config),
                    formats=config.figure_formats,
                )
            )

    return build_section(
        "Paired t-test: sleep data",
        compute,
        narrative=(
            "Each patient received both drugs, so the groups are paired by "
            "patient. Testing the per-patient differences removes between-patient "
            "variation that the unpaired Welch test has to carry."
        ),
    )


def regression_section(config: NotesConfig, rng: np.random.Generator) -> ReportSection:
    def compute(section: ReportSection) -> None:
        frame = simulate_linear_groups(rng, n_per_group=config.n_per_group)
        fit = fit_linear_model(
            frame[["x"]], frame["y"], group=frame["group"], group_policy=config.group_policy
        )
        section.tables["coefficients"] = fit.coefficient_table()
        section.add(f"Group factor enters as: {config.group_policy}")
        section.add(render_linear_fit(fit))
        if config.make_plots:
            section.figures.append(
                plot_linear_fit(
                    fit, output_dir=_figure_dir(config), formats=config.figure_formats
                )
            )

    return build_section(
        "Linear regression with a group factor",
        compute,
        narrative=(
            "Two noisy linear sequences are fitted with one model. The group "
            "factor can shift the intercept, the slope, or both."
        ),
    )


def diagnostics_section(config: NotesConfig, rng: np.random.Generator) -> ReportSection:
    def compute(section: ReportSection) -> None:
        frame = simulate_heteroscedastic(rng, n=config.heteroscedastic_n)
        fit = fit_linear_model(frame[["x"]], frame["y"])
        section.add(render_linear_fit(fit))

        bp = diagnose_fit(fit, use="fitted")
        section.add(render_heteroscedasticity(bp))
        section.add(_decision(bp.p_value, config.alpha))

        sw = check_residual_normality(fit.residuals)
        section.add(render_normality(sw))

        section.tables["residuals"] = pd.DataFrame(
            {"fitted": fit.fitted, "residual": fit.residuals}
        )
        if config.make_plots:
            section.figures.append(
                plot_residual_diagnostics(
                    fit, output_dir=_figure_dir(config), formats=config.figure_formats
                )
            )

    return build_section(
        "Model diagnostics",
        compute,
        narrative=(
            "OLS assumes residuals with constant variance. Here the noise grows "
            "with x; the Breusch-Pagan test regresses squared residuals on the "
            "fitted values to detect it."
        ),
    )


def variogram_section(config: NotesConfig, rng: np.random.Generator) -> ReportSection:
    def compute(section: ReportSection) -> None:
        field = simulate_spatial_field(
            rng,
            n_points=config.spatial_points,
            model_family=config.spatial_model,
            nugget=config.spatial_nugget,
            partial_sill=config.spatial_partial_sill,
            range_=config.spatial_range,
            extent=config.spatial_extent,
        )
        lag_bins = (
            make_lag_bins(config.lag_width, config.n_lags)
            if config.lag_width is not None
            else None
        )
        empirical = empirical_variogram_from_frame(field, SPATIAL_ROLES, lag_bins)
        section.tables["empirical_variogram"] = empirical.to_frame()
        section.add(render_variogram(empirical))

        fit = fit_theoretical_model(
            empirical,
            model_family=config.fit_family,
            initial_guess={
                "nugget": float(np.min(empirical.gamma)),
                "sill": float(np.max(empirical.gamma)),
                "range": float(np.max(empirical.lag_distance)) / 2.0,
            },
        )
        if not fit.converged:
            logger.warning("Variogram fit did not converge: %s", fit.message)
        section.tables["variogram_fit"] = pd.DataFrame(
            [
                {
                    "model": fit.model_family,
                    "nugget": fit.nugget,
                    "sill": fit.sill,
                    "range": fit.range,
                    "converged": fit.converged,
                }
            ]
        )
        section.add(render_variogram_fit(fit))
        if config.make_plots:
            section.figures.append(
                plot_variogram(
                    empirical,
                    fit,
                    output_dir=_figure_dir(config),
                    formats=config.figure_formats,
                )
            )

    return build_section(
        "Semivariogram",
        compute,
        narrative=(
            "Nearby locations tend to have similar values. The semivariogram "
            "averages half the squared difference of values for point pairs in "
            "each distance bin; a fitted model summarises it by nugget, sill "
            "and range."
        ),
    )


def run_notes(
    config: NotesConfig | None = None,
    rng: np.random.Generator | None = None,
    save: bool = True,
) -> Report:
    """Compute every note and optionally save the report and its tables.

    Args:
        config (NotesConfig, optional): Run settings. Defaults to
            ``NotesConfig()``.
        rng (numpy.random.Generator, optional): Generator to draw simulated
            data from. Created from ``config.seed`` when omitted.
        save (bool, optional): Write ``report.txt`` and CSV tables to
            ``config.output_dir``. Defaults to ``True``.

    Returns:
        Report: Sections in note order. Halted sections are listed in
        ``Report.errors``.
    """
    config = config or NotesConfig()
    if rng is None:
        rng = make_generator(config.seed)

    start_time = time.time()
    logger.info("Assembling notes with seed %s", config.seed)

    report = Report()
    steps = (
        lambda: population_section(config, rng),
        lambda: distributions_section(config),
        lambda: ttest_section(config),
        lambda: regression_section(config, rng),
        lambda: diagnostics_section(config, rng),
        lambda: variogram_section(config, rng),
    )
    for step in steps:
        step_start = time.time()
        section = step()
        report.sections.append(section)
        logger.info(
            "Section '%s' completed in %.2f seconds", section.title, time.time() - step_start
        )

    if report.errors:
        logger.warning("%d section(s) halted: %s", len(report.errors), report.errors)

    if save:
        save_report(report, config.output_dir)

    logger.info("Notes assembled in %.2f seconds", time.time() - start_time)
    return report
