"""Empirical semivariogram estimation over point locations.

For every unordered pair of points separated by a distance falling in a lag
bin ``(lo, hi]``, the squared difference of their values is accumulated; the
bin's semivariance is

    gamma = sum(squared_diff) / (2 * pair_count)

and its lag distance is the mean separation of the pairs it holds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist

from ..errors import DimensionMismatchError, DivisionUndefinedError, InsufficientDataError
from ..schema import COLUMNS, SpatialRoles

DEFAULT_N_LAGS = 15
DEFAULT_CUTOFF_FRACTION = 1.0 / 3.0


@dataclass(frozen=True, eq=False)
class EmpiricalVariogram:
    """Non-empty bins of an empirical semivariogram, in increasing lag order."""

    lag_distance: np.ndarray
    pair_count: np.ndarray
    gamma: np.ndarray
    bin_lower: np.ndarray
    bin_upper: np.ndarray
    omitted_bins: Tuple[int, ...] = ()

    def __len__(self) -> int:
        return int(len(self.gamma))

    def __iter__(self) -> Iterator[Tuple[float, int, float]]:
        for h, n, g in zip(self.lag_distance, self.pair_count, self.gamma):
            yield float(h), int(n), float(g)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "bin_lower": self.bin_lower,
                "bin_upper": self.bin_upper,
                COLUMNS.lag: self.lag_distance,
                COLUMNS.n_pairs: self.pair_count,
                COLUMNS.gamma: self.gamma,
            }
        )


def _as_points(points) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    if pts.ndim == 1:
        pts = pts.reshape(-1, 1)
    if pts.ndim != 2:
        raise ValueError("points must be a 1-D or 2-D array of coordinates.")
    return pts


def make_lag_bins(width: float, n_lags: int, start: float = 0.0) -> np.ndarray:
    """Return ``n_lags + 1`` equally spaced bin edges starting at ``start``."""
    if not np.isfinite(width) or width <= 0:
        raise ValueError(f"Lag width must be positive and finite, got {width}.")
    if n_lags < 1:
        raise ValueError(f"n_lags must be >= 1, got {n_lags}.")
    return float(start) + float(width) * np.arange(int(n_lags) + 1, dtype=float)


def default_lag_bins(points, n_lags: int = DEFAULT_N_LAGS) -> np.ndarray:
    """Bins covering one third of the bounding-box diagonal in ``n_lags`` steps."""
    pts = _as_points(points)
    if len(pts) < 2:
        raise InsufficientDataError("At least two points are needed to choose lag bins.")
    diagonal = float(np.linalg.norm(np.ptp(pts, axis=0)))
    if diagonal <= 0:
        raise DivisionUndefinedError("All points share one location; no lag is defined.")
    cutoff = diagonal * DEFAULT_CUTOFF_FRACTION
    return make_lag_bins(cutoff / n_lags, n_lags)


def empirical_variogram(
    points,
    values,
    lag_bins,
    empty_bins: str = "omit",
) -> EmpiricalVariogram:
    """Estimate the empirical semivariogram of ``values`` over ``points``.

    Args:
        points (array-like): Coordinates, shape ``(n, 2)`` (``(n,)`` or
            ``(n, 1)`` is accepted for points on a line).
        values (array-like): Measured value at each point, shape ``(n,)``.
        lag_bins (array-like): Strictly increasing, non-negative bin edges.
            Bin ``i`` holds pairs with ``edges[i] < distance <= edges[i + 1]``;
            pairs beyond the last edge are ignored.
        empty_bins (str, optional): ``"omit"`` drops bins without pairs and
            lists them in ``omitted_bins``; ``"raise"`` raises instead.
            Defaults to ``"omit"``.

    Returns:
        EmpiricalVariogram: ``(lag_distance, pair_count, gamma)`` per
        non-empty bin.

    Raises:
        DimensionMismatchError: If ``points`` and ``values`` differ in length.
        InsufficientDataError: If fewer than two points are given.
        DivisionUndefinedError: If a bin is empty and ``empty_bins="raise"``,
            or if every bin is empty.
        ValueError: If bin edges are invalid or ``empty_bins`` is unknown.
    """
    if empty_bins not in ("omit", "raise"):
        raise ValueError(f"empty_bins must be 'omit' or 'raise'. Got: {empty_bins!r}")

    pts = _as_points(points)
    vals = np.asarray(values, dtype=float).reshape(-1)
    if len(pts) != len(vals):
        raise DimensionMismatchError(
            f"{len(pts)} coordinate rows but {len(vals)} values."
        )
    finite = np.isfinite(vals) & np.all(np.isfinite(pts), axis=1)
    pts, vals = pts[finite], vals[finite]
    if len(vals) < 2:
        raise InsufficientDataError(
            f"Need at least two located values, got {len(vals)}."
        )

    edges = np.asarray(lag_bins, dtype=float).reshape(-1)
    if len(edges) < 2 or np.any(np.diff(edges) <= 0) or edges[0] < 0:
        raise ValueError("lag_bins must be at least two strictly increasing, non-negative edges.")

    distances = pdist(pts)
    sq_diff = pdist(vals.reshape(-1, 1), metric="sqeuclidean")
    bin_idx = np.digitize(distances, edges, right=True)

    lags, counts, gammas, lowers, uppers = [], [], [], [], []
    omitted = []
    for i in range(1, len(edges)):
        in_bin = bin_idx == i
        count = int(np.count_nonzero(in_bin))
        if count == 0:
            if empty_bins == "raise":
                raise DivisionUndefinedError(
                    f"Lag bin ({edges[i - 1]:g}, {edges[i]:g}] contains no point pairs."
                )
            omitted.append(i - 1)
            continue
        lags.append(float(np.mean(distances[in_bin])))
        counts.append(count)
        gammas.append(float(np.sum(sq_diff[in_bin]) / (2.0 * count)))
        lowers.append(float(edges[i - 1]))
        uppers.append(float(edges[i]))

    if not counts:
        raise DivisionUndefinedError("Every lag bin is empty; no semivariance is defined.")

    return EmpiricalVariogram(
        lag_distance=np.asarray(lags, dtype=float),
        pair_count=np.asarray(counts, dtype=int),
        gamma=np.asarray(gammas, dtype=float),
        bin_lower=np.asarray(lowers, dtype=float),
        bin_upper=np.asarray(uppers, dtype=float),
        omitted_bins=tuple(omitted),
    )


def empirical_variogram_from_frame(
    frame: pd.DataFrame,
    roles: SpatialRoles,
    lag_bins=None,
    empty_bins: str = "omit",
) -> EmpiricalVariogram:
    """Estimate the semivariogram from a table using declared column roles."""
    roles.validate(frame)
    points = frame[list(roles.coordinates)].apply(pd.to_numeric, errors="coerce")
    values = pd.to_numeric(frame[roles.value], errors="coerce")
    points_arr = points.to_numpy(dtype=float)
    if lag_bins is None:
        lag_bins = default_lag_bins(points_arr)
    return empirical_variogram(
        points_arr, values.to_numpy(dtype=float), lag_bins, empty_bins=empty_bins
    )
