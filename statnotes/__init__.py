"""
A Python package of reproducible statistics notes.

Each note narrates one concept of statistical inference, computes it from a
built-in or simulated dataset, and renders a report section with tables and
figures.

Modules:
    - sample: Immutable numeric samples with group labels and subject IDs.
    - stats: Descriptive statistics, t-tests, OLS regression, residual
      diagnostics, and distribution tables.
    - spatial: Empirical semivariograms and theoretical model fits.
    - simulation: Seeded data generators for every note.
    - reporting: Rendering of results into report sections.
    - pipeline: Assembles every note into one report.
"""

__version__ = "1.0.0"

from .config import NotesConfig
from .datasets import load_table, sleep
from .errors import (
    DimensionMismatchError,
    DivisionUndefinedError,
    InsufficientDataError,
    NonConvergenceWarning,
    StatNotesError,
)
from .output import save_report
from .pipeline import run_notes
from .reporting import Report, ReportSection, build_section
from .sample import Sample
from .schema import COLUMNS, SpatialRoles
from .simulation import DEFAULT_SEED, make_generator
from .spatial import empirical_variogram, fit_theoretical_model
from .stats import (
    compare_groups,
    diagnose_residuals,
    fit_linear_model,
    summarize,
)

__all__ = [
    # Data
    "Sample",
    "SpatialRoles",
    "COLUMNS",
    "sleep",
    "load_table",
    # Errors
    "StatNotesError",
    "InsufficientDataError",
    "DimensionMismatchError",
    "DivisionUndefinedError",
    "NonConvergenceWarning",
    # Core operations
    "summarize",
    "compare_groups",
    "fit_linear_model",
    "diagnose_residuals",
    "empirical_variogram",
    "fit_theoretical_model",
    # Simulation
    "DEFAULT_SEED",
    "make_generator",
    # Reporting and pipeline
    "NotesConfig",
    "Report",
    "ReportSection",
    "build_section",
    "run_notes",
    "save_report",
]
