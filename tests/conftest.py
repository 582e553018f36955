"""Shared fixtures for the flock tests."""

import numpy as np
import pytest

from boids.environment import BoundingBox, Environment, Obstacle
from boids.flock import Flock, FlockParams
from boids.geometry import BoxGeometry


def make_environment(obstacle=None, size=15.0, offset=0.5):
    return Environment(BoundingBox(BoxGeometry(size, size, size), offset), obstacle)


def make_flock(positions, velocities, obstacle=None, **params):
    return Flock(
        np.asarray(positions, dtype=np.float64),
        np.asarray(velocities, dtype=np.float64),
        FlockParams(**params),
        make_environment(obstacle),
    )


def facing_triangle(z: float) -> np.ndarray:
    """A single triangle in the plane at `z`, front face toward +z."""
    return np.array([[
        [-1.0, -1.0, z],
        [1.0, -1.0, z],
        [0.0, 1.0, z],
    ]])


@pytest.fixture
def environment():
    return make_environment()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
