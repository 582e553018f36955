"""Rendering components for the 3D flock."""

from .bounds import BoundsRenderer
from .meshes import ObstacleRenderer, BoidRenderer
from .text import TextRenderer

__all__ = ["BoundsRenderer", "ObstacleRenderer", "BoidRenderer", "TextRenderer"]
