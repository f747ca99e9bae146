#!/usr/bin/env python3
"""
Main script for assembling the statistics notes.
"""

# Pipeline overview (README-style):
# 1) Seed one random generator from the configured seed.
# 2) Population vs. sample: compare divide-by-n and divide-by-(n-1) variance.
# 3) Normal vs. Student's t densities and critical values.
# 4) Paired and Welch t-tests on the sleep-drug data.
# 5) OLS with a group factor, then residual diagnostics on heteroscedastic data.
# 6) Empirical semivariogram of a simulated field and a fitted model.
# 7) Write report.txt, per-section CSV tables, and figures to the output folder.

import argparse
import logging
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from statnotes.config import NotesConfig
from statnotes.pipeline import run_notes
from statnotes.simulation import DEFAULT_SEED
from statnotes.spatial.models import MODEL_FAMILIES
from statnotes.stats.regression import GROUP_POLICIES


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for the notes pipeline."""
    parser = argparse.ArgumentParser(
        description="Assemble the statistics notes into a report with tables and figures."
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help=f"Seed of the random generator (default: {DEFAULT_SEED}).",
    )
    parser.add_argument(
        "--output-dir",
        default="output",
        help="Output directory (default: output).",
    )
    parser.add_argument(
        "--alpha",
        type=float,
        default=None,
        help="Significance level for reported test decisions (default: 0.05).",
    )
    parser.add_argument(
        "--conf-level",
        type=float,
        default=None,
        help="Confidence level of t-test intervals (default: 0.95).",
    )
    parser.add_argument(
        "--group-policy",
        choices=GROUP_POLICIES,
        default=None,
        help="How the group factor enters the regression (default: interaction).",
    )
    parser.add_argument(
        "--fit-family",
        choices=MODEL_FAMILIES,
        default=None,
        help="Semivariogram model family to fit (default: spherical).",
    )
    parser.add_argument(
        "--n-lags",
        type=int,
        default=None,
        help="Number of semivariogram lag bins (default: 15).",
    )
    parser.add_argument(
        "--lag-width",
        type=float,
        default=None,
        help="Width of each lag bin; derived from the point extent when omitted.",
    )
    parser.add_argument(
        "--formats",
        nargs="+",
        default=None,
        help="Figure formats to write, e.g. png pdf svg (default: png).",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip figure generation.",
    )
    parser.add_argument(
        "--log-file",
        default="statnotes.log",
        help="Log file path (default: statnotes.log).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main execution function with step timing logs."""
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(args.log_file, mode="w"),
        ],
    )

    start_time = time.time()
    logging.info("Initializing statistics notes pipeline")

    config = NotesConfig.from_mapping(
        {
            "seed": args.seed,
            "output_dir": args.output_dir,
            "alpha": args.alpha,
            "conf_level": args.conf_level,
            "group_policy": args.group_policy,
            "fit_family": args.fit_family,
            "n_lags": args.n_lags,
            "lag_width": args.lag_width,
            "figure_formats": tuple(args.formats) if args.formats else None,
            "make_plots": not args.no_plots,
        }
    )
    logging.info("Configuration: %s", config.as_dict())

    step_start = time.time()
    report = run_notes(config)
    step_duration = time.time() - step_start
    logging.info("Notes computation completed in %.2f seconds", step_duration)

    for title, error in report.errors:
        logging.error("Section '%s' halted: %s", title, error)

    total_duration = time.time() - start_time
    logging.info(f"Total execution time: {total_duration:.2f} seconds")
    logging.info("Generated output files in %s", config.output_dir)
    for section in report.sections:
        for path in section.figures:
            logging.info("  - Figure: %s", path)

    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
