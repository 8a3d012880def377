import random
import statistics

import pytest

from playbackkit.dither import (
    GaussianDitherer,
    HighPassDitherer,
    TriangularDitherer,
    find_ditherer,
)


@pytest.mark.parametrize(
    "cls", [TriangularDitherer, GaussianDitherer, HighPassDitherer]
)
def test_find_ditherer_by_name(cls):
    assert find_ditherer(cls.NAME) is cls


@pytest.mark.parametrize("name", [None, "", "none", "TPDF"])
def test_find_ditherer_unknown(name):
    assert find_ditherer(name) is None


def test_str_is_name():
    assert str(TriangularDitherer()) == "tpdf"
    assert str(GaussianDitherer()) == "gpdf"
    assert str(HighPassDitherer()) == "tpdf_hp"


def test_triangular_within_two_lsb():
    d = TriangularDitherer(random.Random(1))
    values = [d.noise() for _ in range(5000)]
    assert all(-1.0 <= v <= 1.0 for v in values)
    assert abs(statistics.fmean(values)) < 0.05


def test_gaussian_statistics():
    d = GaussianDitherer(random.Random(2))
    values = [d.noise() for _ in range(5000)]
    assert abs(statistics.fmean(values)) < 0.05
    assert statistics.pstdev(values) == pytest.approx(0.5, abs=0.05)


def test_seeded_ditherers_are_reproducible():
    a = TriangularDitherer(random.Random(7))
    b = TriangularDitherer(random.Random(7))
    assert [a.noise() for _ in range(10)] == [b.noise() for _ in range(10)]


def test_high_pass_bounds():
    d = HighPassDitherer(random.Random(3))
    values = [d.noise() for _ in range(5000)]
    assert all(-1.0 <= v <= 1.0 for v in values)
    assert all(-0.5 <= v <= 0.5 for v in values[:2])


@pytest.mark.parametrize("channel", [0, 1])
def test_high_pass_telescopes_per_channel(channel):
    d = HighPassDitherer(random.Random(4))
    values = [d.noise() for _ in range(1000)]
    total = sum(values[channel::2])
    assert abs(total) <= 0.5 + 1e-9