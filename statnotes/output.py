"""Write assembled reports and their tables to reproducible files.

This module is the output boundary between the in-memory report and the
artifacts a document renderer embeds.
"""

from __future__ import annotations

import os
import re
from typing import Dict

from .reporting import Report


def _slug(text: str) -> str:
    slug = re.sub(r"[^0-9a-zA-Z]+", "_", text).strip("_").lower()
    return slug or "section"


def save_report(report: Report, output_dir: str = "output") -> Dict[str, str]:
    """Save the rendered report text and every section table.

    Args:
        report (Report): Assembled report.
        output_dir (str): Directory where outputs are written.

    Returns:
        dict[str, str]: Mapping of artifact name to path. ``"report"`` points to
        ``report.txt``; tables are keyed ``"<section>/<table>"`` and written as
        ``<section>__<table>.csv``.

    Note:
        Halted sections write no tables; their error message is part of the
        report text.
    """
    os.makedirs(output_dir, exist_ok=True)

    paths: Dict[str, str] = {}
    report_path = os.path.join(output_dir, "report.txt")
    with open(report_path, "w", encoding="utf-8") as handle:
        handle.write(report.render())
    paths["report"] = report_path
    print(f"Saved report text to {report_path}")

    for section in report.sections:
        if section.error is not None:
            continue
        for name, table in section.tables.items():
            table_path = os.path.join(
                output_dir, f"{_slug(section.title)}__{_slug(name)}.csv"
            )
            table.to_csv(table_path, index=False)
            paths[f"{section.title}/{name}"] = table_path
            print(f"Saved table '{name}' to {table_path}")

    return paths
