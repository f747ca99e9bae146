import numpy as np
import pandas as pd
import pytest

from statnotes.simulation import (
    DEFAULT_SEED,
    draw_samples,
    make_generator,
    simulate_heteroscedastic,
    simulate_linear_groups,
    simulate_spatial_field,
)


def _draw_everything(seed):
    rng = make_generator(seed)
    return (
        draw_samples(rng, sample_size=4, repeats=3),
        simulate_linear_groups(rng, n_per_group=5),
        simulate_heteroscedastic(rng, n=10),
        simulate_spatial_field(rng, n_points=20),
    )


def test_same_seed_gives_identical_data():
    first = _draw_everything(DEFAULT_SEED)
    second = _draw_everything(DEFAULT_SEED)

    np.testing.assert_array_equal(first[0], second[0])
    for a, b in zip(first[1:], second[1:]):
        pd.testing.assert_frame_equal(a, b)


def test_different_seeds_differ():
    a = draw_samples(make_generator(1), sample_size=3, repeats=2)
    b = draw_samples(make_generator(2), sample_size=3, repeats=2)
    assert not np.array_equal(a, b)


def test_draw_samples_shape(rng):
    samples = draw_samples(rng, mean=10.0, sd=2.0, sample_size=5, repeats=7)
    assert samples.shape == (7, 5)
    with pytest.raises(ValueError):
        draw_samples(rng, sample_size=0)


def test_linear_groups_layout(rng):
    frame = simulate_linear_groups(rng, n_per_group=12, labels=("ctrl", "trt"))
    assert list(frame.columns) == ["x", "y", "group"]
    assert frame["group"].value_counts().to_dict() == {"ctrl": 12, "trt": 12}


def test_heteroscedastic_spread_grows_with_x(rng):
    frame = simulate_heteroscedastic(rng, n=400)
    resid = frame["y"] - (2.0 + 1.5 * frame["x"])
    low = resid[frame["x"] < 4].std()
    high = resid[frame["x"] > 7].std()
    assert high > 1.5 * low


def test_spatial_field_layout(rng):
    frame = simulate_spatial_field(rng, n_points=30, extent=50.0)
    assert list(frame.columns) == ["x", "y", "value"]
    assert len(frame) == 30
    assert frame[["x", "y"]].to_numpy().min() >= 0.0
    assert frame[["x", "y"]].to_numpy().max() <= 50.0
    assert np.isfinite(frame["value"]).all()
