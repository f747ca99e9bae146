"""Run configuration for assembling the notes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Optional, Tuple

from .simulation import DEFAULT_SEED
from .spatial.models import MODEL_FAMILIES
from .stats.regression import GROUP_POLICIES


@dataclass(frozen=True)
class NotesConfig:
    """Settings for one run of the notes pipeline.

    Attributes:
        seed: Seed of the single random generator used for every simulation.
        output_dir: Directory receiving ``report.txt``, CSV tables and figures.
        alpha: Significance level for reported test decisions.
        conf_level: Confidence level of t-test intervals.
        make_plots: Render figures alongside the report.
        figure_formats: File formats written for each figure.
        population_mean, population_sd: Normal population sampled in the
            population-vs-sample note.
        variance_sample_size, variance_repeats: Size and number of repeated
            samples for the variance-estimator comparison.
        n_per_group: Observations per group in the regression note.
        group_policy: How the group factor enters the regression model.
        heteroscedastic_n: Observations in the diagnostics note.
        spatial_points: Number of simulated spatial locations.
        spatial_model, spatial_nugget, spatial_partial_sill, spatial_range,
            spatial_extent: Generating model of the simulated field.
        fit_family: Model family fitted to the empirical semivariogram.
        n_lags: Number of lag bins.
        lag_width: Width of each lag bin; ``None`` spreads ``n_lags`` bins over
            one third of the bounding-box diagonal.
    """

    seed: int = DEFAULT_SEED
    output_dir: str = "output"
    alpha: float = 0.05
    conf_level: float = 0.95
    make_plots: bool = True
    figure_formats: Tuple[str, ...] = ("png",)
    population_mean: float = 10.0
    population_sd: float = 2.0
    variance_sample_size: int = 5
    variance_repeats: int = 10000
    n_per_group: int = 30
    group_policy: str = "interaction"
    heteroscedastic_n: int = 100
    spatial_points: int = 150
    spatial_model: str = "spherical"
    spatial_nugget: float = 0.1
    spatial_partial_sill: float = 1.0
    spatial_range: float = 30.0
    spatial_extent: float = 100.0
    fit_family: str = "spherical"
    n_lags: int = 15
    lag_width: Optional[float] = None

    def __post_init__(self) -> None:
        if not 0.0 < self.alpha < 1.0:
            raise ValueError(f"alpha must lie in (0, 1), got {self.alpha}.")
        if not 0.0 < self.conf_level < 1.0:
            raise ValueError(f"conf_level must lie in (0, 1), got {self.conf_level}.")
        if self.group_policy not in GROUP_POLICIES:
            raise ValueError(
                f"group_policy must be one of {list(GROUP_POLICIES)}, got {self.group_policy!r}."
            )
        for name in ("spatial_model", "fit_family"):
            if getattr(self, name) not in MODEL_FAMILIES:
                raise ValueError(
                    f"{name} must be one of {list(MODEL_FAMILIES)}, got {getattr(self, name)!r}."
                )
        for name in (
            "variance_sample_size",
            "variance_repeats",
            "n_per_group",
            "heteroscedastic_n",
            "spatial_points",
            "n_lags",
        ):
            if int(getattr(self, name)) < 2:
                raise ValueError(f"{name} must be >= 2, got {getattr(self, name)}.")
        if self.lag_width is not None and self.lag_width <= 0:
            raise ValueError(f"lag_width must be positive, got {self.lag_width}.")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "NotesConfig":
        """Build a config from a mapping, ignoring ``None`` entries."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise KeyError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in values.items() if v is not None})

    def as_dict(self) -> dict:
        return asdict(self)
