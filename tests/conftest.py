"""Pytest configuration for repository-relative imports and shared fixtures."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from statnotes.datasets import sleep  # noqa: E402
from statnotes.sample import Sample  # noqa: E402
from statnotes.simulation import DEFAULT_SEED, make_generator  # noqa: E402


@pytest.fixture
def rng():
    return make_generator(DEFAULT_SEED)


@pytest.fixture
def sleep_sample():
    return Sample.from_frame(sleep(), value="extra", group="group", subject="ID")
