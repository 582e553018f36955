"""Read-only geometry the flock steers against: a soft bounding box and an obstacle."""

import numpy as np
from typing import Optional

from core.errors import ConfigError
from .geometry import BoxGeometry, ray_intersect_triangles
from .vecmath import normalize


class BoundingBox:
    """
    Soft reflective walls.

    An axis only flips when the boid is past the wall on that side and still
    moving outward, so a boid that is already turning back is left alone.
    """

    def __init__(self, geometry: BoxGeometry, offset: float = 0.5):
        limits = geometry.half_extents - offset
        if np.any(limits <= 0):
            raise ConfigError(f"Wall offset {offset} leaves no room inside {geometry.parameters}")
        self.geometry = geometry
        self.offset = offset
        self.limits = limits

    def turn_vector(self, position: np.ndarray, velocity: np.ndarray) -> np.ndarray:
        """Per-axis multiplier: -1 where the boid is leaving, 1 elsewhere."""
        turn = np.ones(3)
        for axis in range(3):
            bound = self.limits[axis]
            if position[axis] < -bound and velocity[axis] < 0:
                turn[axis] = -1.0
            if bound < position[axis] and 0 < velocity[axis]:
                turn[axis] = -1.0
        return turn

    def reflect(self, position: np.ndarray, velocity: np.ndarray) -> np.ndarray:
        """Flip outward velocity components in place. Returns the turn vector."""
        turn = self.turn_vector(position, velocity)
        velocity *= turn
        return turn

    def contains(self, position: np.ndarray) -> bool:
        return bool(np.all(np.abs(position) <= self.limits))


class Obstacle:
    """Triangle-mesh obstacle queried by ray casting."""

    def __init__(self, triangles: np.ndarray, trigger_distance: float = 0.5,
                 double_sided: bool = False):
        triangles = np.ascontiguousarray(triangles, dtype=np.float64)
        if triangles.ndim != 3 or triangles.shape[1:] != (3, 3):
            raise ConfigError(f"Obstacle needs an (m, 3, 3) triangle array, got {triangles.shape}")
        if trigger_distance <= 0:
            raise ConfigError(f"trigger_distance must be positive, got {trigger_distance}")
        self.triangles = triangles
        self.trigger_distance = trigger_distance
        self.double_sided = double_sided

    def raycast(self, origin: np.ndarray, direction: np.ndarray) -> Optional[float]:
        """Distance to the nearest hit along a unit direction, or None."""
        dist = ray_intersect_triangles(
            np.asarray(origin, dtype=np.float64),
            np.asarray(direction, dtype=np.float64),
            self.triangles,
            self.double_sided
        )
        if dist < 0.0:
            return None
        return float(dist)

    def avoid(self, position: np.ndarray, velocity: np.ndarray) -> bool:
        """
        Reverse velocity in place if the forward ray hits within the trigger distance.

        Returns True when the velocity was reversed.
        """
        direction = normalize(velocity)
        if not direction.any():
            return False

        dist = self.raycast(position, direction)
        if dist is not None and dist < self.trigger_distance:
            velocity *= -1.0
            return True
        return False


class Environment:
    """The bounding box and obstacle a flock lives in."""

    def __init__(self, bounding: BoundingBox, obstacle: Optional[Obstacle] = None):
        self.bounding = bounding
        self.obstacle = obstacle

    @classmethod
    def from_scene(cls, scene, bounding_name: str = "bounding", obstacle_name: str = "obstacle",
                   offset: float = 0.5, trigger_distance: float = 0.5,
                   double_sided: bool = False) -> "Environment":
        """
        Resolve both surfaces by name.

        Raises MissingSurfaceError if either one has not been added yet.
        """
        box = scene.get_mesh(bounding_name)
        triangles = scene.get_mesh(obstacle_name)
        return cls(
            BoundingBox(box, offset),
            Obstacle(triangles, trigger_distance, double_sided)
        )

    def avoid_obstacle(self, position: np.ndarray, velocity: np.ndarray) -> bool:
        if self.obstacle is None:
            return False
        return self.obstacle.avoid(position, velocity)

    def reflect(self, position: np.ndarray, velocity: np.ndarray) -> np.ndarray:
        return self.bounding.reflect(position, velocity)
