"""Flocking simulation core."""

from .boid import Boid
from .environment import BoundingBox, Obstacle, Environment
from .flock import Flock, FlockParams
from .simulation import Simulation, default_settings

__all__ = [
    "Boid", "BoundingBox", "Obstacle", "Environment",
    "Flock", "FlockParams", "Simulation", "default_settings",
]
