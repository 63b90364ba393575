"""Shared fixtures for the VectorPath test suite."""

import math

import pytest

from vectorpath.core import types as vp


@pytest.fixture
def square() -> vp.PathShape:
    """Counter-clockwise 10x10 square at the origin."""
    return vp.PathShape.rectangle(0, 0, 10, 10)


@pytest.fixture
def horizontal_line() -> vp.PathShape:
    """Open centerline from (0, 0) to (100, 0)."""
    return vp.PathShape.from_points([(0, 0), (100, 0)])


@pytest.fixture
def circle_samples() -> list:
    """64 samples around a circle of radius 50, last sample repeating the first."""
    pts = [(50 * math.cos(2 * math.pi * i / 64), 50 * math.sin(2 * math.pi * i / 64))
           for i in range(64)]
    return pts + [pts[0]]
