"""End-to-end tests for assembling the notes."""

import os

import pytest

from main import main
from statnotes.config import NotesConfig
from statnotes.pipeline import run_notes

SECTION_TITLES = [
    "Population and sample",
    "Normal and Student's t distributions",
    "Paired t-test: sleep data",
    "Linear regression with a group factor",
    "Model diagnostics",
    "Semivariogram",
]


def small_config(output_dir, **overrides):
    values = {
        "output_dir": str(output_dir),
        "variance_repeats": 200,
        "n_per_group": 15,
        "heteroscedastic_n": 60,
        "spatial_points": 60,
        "make_plots": False,
    }
    values.update(overrides)
    return NotesConfig.from_mapping(values)


def test_run_notes_builds_every_section(tmp_path):
    report = run_notes(small_config(tmp_path))

    assert [s.title for s in report.sections] == SECTION_TITLES
    assert report.errors == []
    assert os.path.exists(tmp_path / "report.txt")
    assert os.path.exists(tmp_path / "paired_t_test_sleep_data__tests.csv")

    ttest = report.section("Paired t-test: sleep data")
    assert "Paired t-test" in ttest.render()
    assert "Welch Two Sample t-test" in ttest.render()


def test_same_seed_gives_identical_report(tmp_path):
    config = small_config(tmp_path, seed=7)
    first = run_notes(config, save=False).render()
    second = run_notes(config, save=False).render()
    assert first == second

    other = run_notes(small_config(tmp_path, seed=8), save=False).render()
    assert other != first


def test_failed_section_is_surfaced_without_stopping_the_rest(tmp_path):
    # Two observations cannot support an intercept and a slope
    report = run_notes(small_config(tmp_path, heteroscedastic_n=2), save=False)

    titles = [title for title, _ in report.errors]
    assert titles == ["Model diagnostics"]
    assert report.errors[0][1].startswith("InsufficientDataError")
    assert report.section("Semivariogram").error is None


def test_figures_are_written_when_enabled(tmp_path):
    report = run_notes(small_config(tmp_path, make_plots=True), save=False)

    figures = [path for section in report.sections for path in section.figures]
    assert len(figures) == 5
    assert all(os.path.exists(path) for path in figures)
    assert all(os.path.dirname(path) == str(tmp_path / "figures") for path in figures)


def test_reported_figure_paths_exist_for_pdf_only(tmp_path):
    config = small_config(tmp_path, make_plots=True, figure_formats=("pdf",))
    report = run_notes(config, save=False)

    figures = [path for section in report.sections for path in section.figures]
    assert len(figures) == 5
    assert all(path.endswith(".pdf") for path in figures)
    assert all(os.path.exists(path) for path in figures)
    assert not any((tmp_path / "figures").glob("*.png"))


def test_config_validation():
    with pytest.raises(ValueError):
        NotesConfig(alpha=1.5)
    with pytest.raises(ValueError):
        NotesConfig(group_policy="auto")
    with pytest.raises(KeyError):
        NotesConfig.from_mapping({"sead": 1})


def test_cli_runs_end_to_end(tmp_path):
    out = tmp_path / "out"
    code = main(
        [
            "--output-dir",
            str(out),
            "--no-plots",
            "--fit-family",
            "exponential",
            "--log-file",
            str(tmp_path / "notes.log"),
        ]
    )
    assert code == 0
    assert os.path.exists(out / "report.txt")
