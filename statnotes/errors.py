"""Exception and warning types raised by the statistics core."""

from __future__ import annotations


class StatNotesError(ValueError):
    """Base class for errors that halt one statistical computation."""


class InsufficientDataError(StatNotesError):
    """Raised when a sample is too small for the requested statistic."""


class DimensionMismatchError(StatNotesError):
    """Raised when paired or aligned inputs have incompatible lengths."""


class DivisionUndefinedError(StatNotesError):
    """Raised when an estimator would divide by an empty count."""


class NonConvergenceWarning(UserWarning):
    """Emitted when a nonlinear fit stops without converging.

    The fit result still carries ``converged=False``; the warning only makes
    the failure visible in logs.
    """
