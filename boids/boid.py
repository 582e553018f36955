"""Individual boid entity with position, velocity, and heading state."""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from .vecmath import quat_identity


@dataclass
class Boid:
    """
    A single boid (bird-oid object) in the simulation.

    When a Flock creates its boids, the array fields are row views into the
    flock's storage, so in-place writes (``+=``, ``[:] =``) show up on both
    sides. Rebinding a field breaks that link; use slice assignment instead.

    Attributes:
        position: 3D world-space position
        velocity: 3D velocity, moved by `velocity` every frame
        prev_direction: Unit heading from the previous frame
        orientation: Accumulated rotation as a (w, x, y, z) quaternion
        handle: Drawable handle owned by the render surface, if any
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    prev_direction: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    orientation: np.ndarray = field(default_factory=quat_identity)
    handle: Optional[int] = None

    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))
