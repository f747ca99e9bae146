"""Tests for empirical semivariogram binning and estimation."""

import numpy as np
import pandas as pd
import pytest

from statnotes.errors import DimensionMismatchError, DivisionUndefinedError, InsufficientDataError
from statnotes.schema import COLUMNS, SpatialRoles
from statnotes.spatial import (
    default_lag_bins,
    empirical_variogram,
    empirical_variogram_from_frame,
    make_lag_bins,
)


def test_constant_values_give_zero_semivariance(rng):
    points = rng.uniform(0.0, 50.0, size=(40, 2))
    values = np.full(40, 3.7)
    ev = empirical_variogram(points, values, make_lag_bins(5.0, 8))

    assert len(ev) > 0
    assert np.all(ev.gamma == 0.0)


def test_points_on_a_line():
    points = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
    values = np.array([0.0, 1.0, 2.0, 3.0])
    ev = empirical_variogram(points, values, [0.0, 1.5, 2.5, 3.5])

    assert ev.pair_count.tolist() == [3, 2, 1]
    assert ev.lag_distance == pytest.approx([1.0, 2.0, 3.0])
    # gamma = sum(squared_diff) / (2 * pairs)
    assert ev.gamma == pytest.approx([0.5, 2.0, 4.5])
    assert np.all(np.diff(ev.gamma) > 0)
    assert list(ev) == [(1.0, 3, 0.5), (2.0, 2, 2.0), (3.0, 1, 4.5)]


def test_bins_include_upper_edge_only():
    points = np.array([0.0, 1.0, 2.0])
    values = np.array([0.0, 1.0, 0.0])
    ev = empirical_variogram(points, values, [0.0, 1.0, 2.0])

    # Distances 1, 1 fall in (0, 1]; distance 2 in (1, 2]
    assert ev.pair_count.tolist() == [2, 1]
    assert ev.bin_upper.tolist() == [1.0, 2.0]


def test_coincident_points_are_not_binned():
    points = np.array([0.0, 0.0, 1.0])
    values = np.array([1.0, 5.0, 1.0])
    ev = empirical_variogram(points, values, [0.0, 1.5])

    assert ev.pair_count.tolist() == [2]


def test_empty_bins_are_omitted_or_raised():
    points = np.array([0.0, 1.0, 10.0])
    values = np.array([1.0, 2.0, 4.0])
    edges = [0.0, 2.0, 4.0, 6.0]

    ev = empirical_variogram(points, values, edges)
    assert len(ev) == 1
    assert ev.omitted_bins == (1, 2)

    with pytest.raises(DivisionUndefinedError):
        empirical_variogram(points, values, edges, empty_bins="raise")


def test_all_bins_empty_raises_in_either_mode():
    points = np.array([0.0, 1.0, 2.0])
    values = np.array([1.0, 2.0, 3.0])
    for mode in ("omit", "raise"):
        with pytest.raises(DivisionUndefinedError):
            empirical_variogram(points, values, [0.0, 0.5], empty_bins=mode)


def test_mismatched_points_and_values_raise():
    with pytest.raises(DimensionMismatchError):
        empirical_variogram(np.zeros((3, 2)), np.zeros(4), [0.0, 1.0])


def test_single_point_raises():
    with pytest.raises(InsufficientDataError):
        empirical_variogram(np.zeros((1, 2)), np.zeros(1), [0.0, 1.0])


@pytest.mark.parametrize("edges", [[1.0], [0.0, 2.0, 1.0], [-1.0, 1.0]])
def test_invalid_edges_raise(edges):
    with pytest.raises(ValueError):
        empirical_variogram(np.arange(4.0), np.arange(4.0), edges)


def test_unknown_empty_bins_mode_raises():
    with pytest.raises(ValueError):
        empirical_variogram(np.arange(4.0), np.arange(4.0), [0.0, 5.0], empty_bins="nan")


def test_default_lag_bins_cover_a_third_of_the_diagonal():
    points = np.array([[0.0, 0.0], [30.0, 40.0], [10.0, 5.0]])
    edges = default_lag_bins(points)

    assert len(edges) == 16
    assert edges[0] == 0.0
    assert edges[-1] == pytest.approx(50.0 / 3.0)


def test_from_frame_uses_declared_roles():
    frame = pd.DataFrame(
        {
            "easting": [0.0, 1.0, 2.0, 3.0],
            "northing": [0.0, 0.0, 0.0, 0.0],
            "z": [0.0, 1.0, 2.0, 3.0],
        }
    )
    roles = SpatialRoles(coordinates=("easting", "northing"), value="z")
    ev = empirical_variogram_from_frame(frame, roles, [0.0, 1.5, 2.5, 3.5])
    table = ev.to_frame()

    assert table[COLUMNS.n_pairs].tolist() == [3, 2, 1]
    assert set(table.columns) >= {COLUMNS.lag, COLUMNS.n_pairs, COLUMNS.gamma}


def test_from_frame_missing_column_raises():
    frame = pd.DataFrame({"x": [0.0, 1.0], "y": [0.0, 1.0]})
    with pytest.raises(KeyError):
        empirical_variogram_from_frame(frame, SpatialRoles(), [0.0, 2.0])


def test_spatial_roles_must_be_distinct():
    with pytest.raises(ValueError):
        SpatialRoles(coordinates=("x", "x"), value="value")
    with pytest.raises(ValueError):
        SpatialRoles(coordinates=("x", "y", "z"), value="value")
