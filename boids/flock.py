"""Flock state and the per-frame flocking update: steering, clamping, collisions, orientation."""

import math
import numpy as np
from dataclasses import dataclass
from numba import njit
from typing import List, Optional, Tuple

from core.errors import ConfigError
from .boid import Boid
from .environment import Environment
from .geometry import ray_intersect_triangles
from .vecmath import clamp_components, normalize, quat_from_axis_angle, quat_multiply, quat_normalize


UPDATE_MODES = ("sequential", "snapshot")

# Below this length a cross product counts as a vanished turn axis
AXIS_EPSILON = 1e-12


# ============================================================================
# NUMBA JIT-COMPILED STEERING RULES
# ============================================================================
#
# Each rule reads neighbor state from `read_pos` / `read_vel` and writes only
# velocities[i]. In sequential mode the read arrays are the live arrays, so a
# boid sees the already-updated state of boids processed before it.

@njit(cache=True)
def in_sight_numba(positions: np.ndarray, i: int, j: int, sight_radius: float) -> bool:
    """True if j is a different boid than i and closer than sight_radius."""
    if i == j:
        return False
    dx = positions[i, 0] - positions[j, 0]
    dy = positions[i, 1] - positions[j, 1]
    dz = positions[i, 2] - positions[j, 2]
    return math.sqrt(dx * dx + dy * dy + dz * dz) < sight_radius


@njit(cache=True)
def align_numba(
    read_pos: np.ndarray,
    read_vel: np.ndarray,
    velocities: np.ndarray,
    i: int,
    sight_radius: float,
    scale: float
) -> int:
    """Add the scaled mean velocity of in-sight neighbors. Returns the neighbor count."""
    ax, ay, az = 0.0, 0.0, 0.0
    n = 0
    for j in range(read_pos.shape[0]):
        if not in_sight_numba(read_pos, i, j, sight_radius):
            continue
        ax += read_vel[j, 0]
        ay += read_vel[j, 1]
        az += read_vel[j, 2]
        n += 1

    if n > 0:
        velocities[i, 0] += ax / n * scale
        velocities[i, 1] += ay / n * scale
        velocities[i, 2] += az / n * scale
    return n


@njit(cache=True)
def cohesion_numba(
    read_pos: np.ndarray,
    velocities: np.ndarray,
    i: int,
    sight_radius: float,
    scale: float
) -> int:
    """Steer toward the centroid of in-sight neighbors. Returns the neighbor count."""
    cx, cy, cz = 0.0, 0.0, 0.0
    n = 0
    for j in range(read_pos.shape[0]):
        if not in_sight_numba(read_pos, i, j, sight_radius):
            continue
        cx += read_pos[j, 0]
        cy += read_pos[j, 1]
        cz += read_pos[j, 2]
        n += 1

    if n > 0:
        velocities[i, 0] += (cx / n - read_pos[i, 0]) * scale
        velocities[i, 1] += (cy / n - read_pos[i, 1]) * scale
        velocities[i, 2] += (cz / n - read_pos[i, 2]) * scale
    return n


@njit(cache=True)
def separation_numba(
    read_pos: np.ndarray,
    velocities: np.ndarray,
    i: int,
    sight_radius: float,
    separation_radius: float,
    scale: float
) -> int:
    """
    Push away from every neighbor closer than separation_radius.

    Contributions are summed, not averaged, so crowding compounds the push.
    Returns the number of neighbors fled from.
    """
    n = 0
    for j in range(read_pos.shape[0]):
        if not in_sight_numba(read_pos, i, j, sight_radius):
            continue
        dx = read_pos[i, 0] - read_pos[j, 0]
        dy = read_pos[i, 1] - read_pos[j, 1]
        dz = read_pos[i, 2] - read_pos[j, 2]
        if math.sqrt(dx * dx + dy * dy + dz * dz) < separation_radius:
            velocities[i, 0] += dx * scale
            velocities[i, 1] += dy * scale
            velocities[i, 2] += dz * scale
            n += 1
    return n


# ============================================================================
# PARAMETERS
# ============================================================================

@dataclass
class FlockParams:
    """Tunable weights, constant for the length of a run."""
    speed_limit: float = 0.08
    align_scale: float = 0.5
    cohesion_scale: float = 0.1
    separation_scale: float = 0.6
    sight_radius: float = 1.8
    separation_radius: float = 1.0
    heading_nudge: float = 0.001
    initial_heading: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    update_mode: str = "sequential"

    def __post_init__(self):
        if self.speed_limit <= 0:
            raise ConfigError(f"speed_limit must be positive, got {self.speed_limit}")
        for name in ("align_scale", "cohesion_scale", "separation_scale"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be in [0, 1], got {value}")
        if not 0.0 < self.separation_radius < self.sight_radius:
            raise ConfigError(
                f"separation_radius ({self.separation_radius}) must be positive and "
                f"below sight_radius ({self.sight_radius})"
            )
        if self.update_mode not in UPDATE_MODES:
            raise ConfigError(f"update_mode must be one of {UPDATE_MODES}, got '{self.update_mode}'")
        if not np.any(np.asarray(self.initial_heading, dtype=np.float64)):
            raise ConfigError(f"initial_heading must be non-zero, got {self.initial_heading}")

    @classmethod
    def from_config(cls, flock_config: dict) -> "FlockParams":
        return cls(
            speed_limit=flock_config["speed_limit"],
            align_scale=flock_config["align_scale"],
            cohesion_scale=flock_config["cohesion_scale"],
            separation_scale=flock_config["separation_scale"],
            sight_radius=flock_config["sight_radius"],
            separation_radius=flock_config["separation_radius"],
            heading_nudge=flock_config.get("heading_nudge", 0.001),
            initial_heading=tuple(flock_config.get("initial_heading", (0.0, 1.0, 0.0))),
            update_mode=flock_config.get("update_mode", "sequential"),
        )


# ============================================================================
# FLOCK CLASS
# ============================================================================

class Flock:
    """
    A fixed population of boids plus the rules that move them.

    State lives in (n, 3) / (n, 4) arrays; `boids` exposes per-boid views
    into the same storage.
    """

    def __init__(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        params: FlockParams,
        environment: Environment,
        prev_directions: Optional[np.ndarray] = None,
        orientations: Optional[np.ndarray] = None
    ):
        self.positions = np.array(positions, dtype=np.float64).reshape(-1, 3)
        self.velocities = np.array(velocities, dtype=np.float64).reshape(-1, 3)
        if self.positions.shape != self.velocities.shape:
            raise ConfigError(
                f"positions {self.positions.shape} and velocities {self.velocities.shape} differ"
            )
        self.num_boids = self.positions.shape[0]
        self.params = params
        self.environment = environment

        if prev_directions is None:
            heading = normalize(np.asarray(params.initial_heading, dtype=np.float64))
            prev_directions = np.tile(heading, (self.num_boids, 1))
        self.prev_directions = np.array(prev_directions, dtype=np.float64).reshape(-1, 3)

        if orientations is None:
            orientations = np.tile([1.0, 0.0, 0.0, 0.0], (self.num_boids, 1))
        self.orientations = np.array(orientations, dtype=np.float64).reshape(-1, 4)

        self.boids: List[Boid] = [
            Boid(
                position=self.positions[i],
                velocity=self.velocities[i],
                prev_direction=self.prev_directions[i],
                orientation=self.orientations[i],
            )
            for i in range(self.num_boids)
        ]

        # Frame counters
        self.frame = 0
        self.obstacle_hits = 0
        self.wall_reflections = 0

        # Live arrays by default; update() swaps in copies in snapshot mode
        self._read_pos = self.positions
        self._read_vel = self.velocities

    @classmethod
    def random(
        cls,
        count: int,
        params: FlockParams,
        environment: Environment,
        rng: Optional[np.random.Generator] = None,
        spawn_extent: float = 3.0
    ) -> "Flock":
        """
        Spawn `count` boids uniformly in a cube of half-extent `spawn_extent`,
        with each velocity component uniform in [-speed_limit, speed_limit].
        """
        if count < 0:
            raise ConfigError(f"count must be >= 0, got {count}")
        rng = rng if rng is not None else np.random.default_rng()
        positions = rng.uniform(-spawn_extent, spawn_extent, size=(count, 3))
        velocities = rng.uniform(-params.speed_limit, params.speed_limit, size=(count, 3))
        return cls(positions, velocities, params, environment)

    def __len__(self):
        return self.num_boids

    # ------------------------------------------------------------------
    # Steering rules
    # ------------------------------------------------------------------

    def in_sight(self, i: int, j: int) -> bool:
        return bool(in_sight_numba(self._read_pos, i, j, self.params.sight_radius))

    def neighbors(self, i: int) -> List[int]:
        return [j for j in range(self.num_boids) if self.in_sight(i, j)]

    def align(self, i: int) -> int:
        p = self.params
        return align_numba(
            self._read_pos, self._read_vel, self.velocities, i,
            p.sight_radius, p.align_scale * p.speed_limit
        )

    def cohesion(self, i: int) -> int:
        p = self.params
        return cohesion_numba(
            self._read_pos, self.velocities, i,
            p.sight_radius, p.cohesion_scale * p.speed_limit
        )

    def separation(self, i: int) -> int:
        p = self.params
        return separation_numba(
            self._read_pos, self.velocities, i,
            p.sight_radius, p.separation_radius, p.separation_scale * p.speed_limit
        )

    def clamp_velocity(self, i: int):
        """Per-axis clamp; the Euclidean speed may still exceed speed_limit."""
        limit = self.params.speed_limit
        clamp_components(self.velocities[i], -limit, limit)

    # ------------------------------------------------------------------
    # Environment, integration, orientation
    # ------------------------------------------------------------------

    def avoid_obstacle(self, i: int) -> bool:
        hit = self.environment.avoid_obstacle(self.positions[i], self.velocities[i])
        if hit:
            self.obstacle_hits += 1
        return hit

    def reflect(self, i: int) -> np.ndarray:
        turn = self.environment.reflect(self.positions[i], self.velocities[i])
        self.wall_reflections += int(np.count_nonzero(turn < 0))
        return turn

    def integrate(self, i: int):
        self.positions[i] += self.velocities[i]

    def _turn(self, i: int):
        """Heading, cosine, angle and unit axis (or None) from prev_direction to velocity."""
        prev = self.prev_directions[i]
        direction = normalize(self.velocities[i])
        cos_angle = float(np.clip(np.dot(direction, prev), -1.0, 1.0))
        angle = math.acos(cos_angle)
        axis = np.cross(prev, direction)
        length = np.linalg.norm(axis)
        if length < AXIS_EPSILON:
            return direction, cos_angle, angle, None
        return direction, cos_angle, angle, axis / length

    def rotate(self, i: int) -> bool:
        """
        Turn the boid's orientation from its previous heading to its current one.

        The incremental rotation is premultiplied, i.e. applied in world space on
        top of the existing orientation. Returns True if a rotation was applied.
        """
        direction, cos_angle, angle, axis = self._turn(i)

        if axis is None:
            if direction.any() and cos_angle > 0.0:
                # Same heading as last frame
                self.prev_directions[i] = direction
                return False

            # Opposite heading or no velocity: nudge once and retry
            self.velocities[i, 0] += self.params.heading_nudge
            direction, cos_angle, angle, axis = self._turn(i)
            if axis is None:
                return False

        q = quat_from_axis_angle(axis, angle)
        self.orientations[i] = quat_normalize(quat_multiply(q, self.orientations[i]))
        self.prev_directions[i] = direction
        return True

    # ------------------------------------------------------------------
    # Frame update
    # ------------------------------------------------------------------

    def update_boid(self, i: int):
        """Steer, clamp, collide, integrate, then rotate boid i."""
        self.align(i)
        self.cohesion(i)
        self.separation(i)
        self.clamp_velocity(i)
        self.avoid_obstacle(i)
        self.reflect(i)
        self.integrate(i)
        self.rotate(i)

    def set_update_mode(self, mode: str):
        """Switch between sequential and snapshot updates, effective next frame."""
        if mode not in UPDATE_MODES:
            raise ConfigError(f"update_mode must be one of {UPDATE_MODES}, got '{mode}'")
        self.params.update_mode = mode

    def update(self):
        """Advance every boid by one frame, in index order."""
        if self.params.update_mode == "snapshot":
            self._read_pos = self.positions.copy()
            self._read_vel = self.velocities.copy()
        else:
            self._read_pos = self.positions
            self._read_vel = self.velocities

        try:
            for i in range(self.num_boids):
                self.update_boid(i)
        finally:
            self._read_pos = self.positions
            self._read_vel = self.velocities

        self.frame += 1

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def mean_speed(self) -> float:
        if self.num_boids == 0:
            return 0.0
        return float(np.linalg.norm(self.velocities, axis=1).mean())

    def within_speed_limit(self) -> bool:
        """True if every velocity component is inside [-speed_limit, speed_limit]."""
        return bool(np.all(np.abs(self.velocities) <= self.params.speed_limit))

    def warmup(self):
        """Compile the steering and ray-cast kernels on throwaway data."""
        pos = np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]])
        vel = np.array([[0.01, 0.0, 0.0], [0.0, 0.01, 0.0]])
        align_numba(pos, vel, vel, 0, 1.8, 0.04)
        cohesion_numba(pos, vel, 0, 1.8, 0.008)
        separation_numba(pos, vel, 0, 1.8, 1.0, 0.048)
        tri = np.array([[[-1.0, -1.0, 1.0], [1.0, -1.0, 1.0], [0.0, 1.0, 1.0]]])
        ray_intersect_triangles(pos[0], np.array([0.0, 0.0, 1.0]), tri, False)
