"""Tests for report and table export."""

import os

import pandas as pd

from statnotes.errors import DivisionUndefinedError
from statnotes.output import save_report
from statnotes.reporting import Report, build_section


def _failing(section):
    section.tables["gamma"] = pd.DataFrame({"gamma": [0.1]})
    raise DivisionUndefinedError("empty bin")


def _working(section):
    section.add("all good")
    section.tables["Coefficients"] = pd.DataFrame({"Term": ["x"], "Estimate": [1.0]})


def test_save_report_writes_text_and_tables(tmp_path):
    report = Report(
        sections=[
            build_section("Linear regression", _working),
            build_section("Semivariogram", _failing),
        ]
    )
    paths = save_report(report, output_dir=str(tmp_path))

    assert os.path.exists(paths["report"])
    with open(paths["report"], encoding="utf-8") as handle:
        text = handle.read()
    assert "all good" in text
    assert "[section halted] DivisionUndefinedError: empty bin" in text

    table_path = paths["Linear regression/Coefficients"]
    assert os.path.basename(table_path) == "linear_regression__coefficients.csv"
    assert pd.read_csv(table_path)["Estimate"].tolist() == [1.0]
    # Halted sections export no tables
    assert not any(key.startswith("Semivariogram/") for key in paths)


def test_save_report_creates_missing_directory(tmp_path):
    target = tmp_path / "nested" / "out"
    paths = save_report(Report(), output_dir=str(target))
    assert os.path.isdir(target)
    assert os.path.exists(paths["report"])
