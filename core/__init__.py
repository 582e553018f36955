"""Render surfaces, scene registry and errors."""

from .errors import BoidsError, ConfigError, MissingSurfaceError
from .scene import Scene
from .surface import RenderSurface, HeadlessSurface

__all__ = [
    "BoidsError", "ConfigError", "MissingSurfaceError",
    "Scene", "RenderSurface", "HeadlessSurface",
]
