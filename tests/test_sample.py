"""Tests for Sample construction, splitting and subject alignment."""

import numpy as np
import pandas as pd
import pytest

from statnotes.errors import DimensionMismatchError
from statnotes.sample import Sample
from statnotes.schema import COLUMNS, ResultColumns


def test_values_are_read_only():
    sample = Sample(values=[1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        sample.values[0] = 10.0


def test_group_length_mismatch_raises():
    with pytest.raises(DimensionMismatchError):
        Sample(values=[1.0, 2.0, 3.0], groups=["a", "b"])


def test_single_group_is_rejected():
    with pytest.raises(ValueError, match="two groups"):
        Sample(values=[1.0, 2.0], groups=["a", "a"])


def test_split_follows_sorted_labels():
    sample = Sample(values=[1.0, 2.0, 3.0, 4.0], groups=["b", "a", "b", "a"])
    parts = sample.split()

    assert list(parts) == ["a", "b"]
    np.testing.assert_array_equal(parts["a"].values, [2.0, 4.0])
    np.testing.assert_array_equal(parts["b"].values, [1.0, 3.0])


def test_paired_split_aligns_subjects():
    frame = pd.DataFrame(
        {
            "value": [1.0, 2.0, 3.0, 30.0, 10.0, 20.0],
            "arm": ["pre", "pre", "pre", "post", "post", "post"],
            "id": [1, 2, 3, 3, 1, 2],
        }
    )
    sample = Sample.from_frame(frame, value="value", group="arm", subject="id")
    post, pre = sample.paired_split()

    np.testing.assert_array_equal(post.subjects, [3, 1, 2])
    np.testing.assert_array_equal(pre.values, [3.0, 1.0, 2.0])


def test_paired_split_detects_size_mismatch():
    sample = Sample(values=[1.0, 2.0, 3.0], groups=["a", "a", "b"])
    with pytest.raises(DimensionMismatchError):
        sample.paired_split()


def test_from_frame_missing_column_raises():
    frame = pd.DataFrame({"value": [1.0, 2.0]})
    with pytest.raises(KeyError, match="group"):
        Sample.from_frame(frame, value="value", group="group")


def test_result_columns_are_frozen():
    assert COLUMNS == ResultColumns()
    with pytest.raises(Exception):
        COLUMNS.term = "Name"
