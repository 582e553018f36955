"""Wires the flock to a render surface: geometry setup, the per-frame step, and teardown."""

import copy
import numpy as np
from typing import Optional

from config import boids as config
from core.surface import RenderSurface
from .environment import Environment
from .flock import UPDATE_MODES, Flock, FlockParams
from .geometry import BoxGeometry, icosahedron_geometry


def default_settings() -> dict:
    """Fresh copies of the config dicts, safe to modify."""
    return {
        "flock": copy.deepcopy(config.FLOCK),
        "environment": copy.deepcopy(config.ENVIRONMENT),
        "seed": None,
    }


class Simulation:
    """
    Runs one flock inside one render surface.

    `setup()` creates the bounding box and obstacle, then `start()` resolves
    them by name and schedules `step()` on the surface. `start()` refuses to
    schedule anything while either surface is missing.
    """

    def __init__(self, surface: RenderSurface, settings: dict = None,
                 rng: Optional[np.random.Generator] = None):
        self.surface = surface
        self.settings = settings or default_settings()
        if rng is None:
            rng = np.random.default_rng(self.settings.get("seed"))
        self.rng = rng

        self.params = FlockParams.from_config(self.settings["flock"])
        self.environment: Optional[Environment] = None
        self.flock: Optional[Flock] = None
        self.disposed = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def create_geometry(self):
        """Add the bounding box and the obstacle to the surface's scene."""
        env = self.settings["environment"]
        scene = self.surface.scene
        scene.add(env["bounding_name"], BoxGeometry(*env["bounding_size"]))
        scene.add(
            env["obstacle_name"],
            icosahedron_geometry(env["obstacle_radius"], env["obstacle_detail"])
        )

    def start(self):
        """Resolve the environment, spawn the flock and schedule the frame callback."""
        env = self.settings["environment"]
        self.environment = Environment.from_scene(
            self.surface.scene,
            bounding_name=env["bounding_name"],
            obstacle_name=env["obstacle_name"],
            offset=env["wall_offset"],
            trigger_distance=env["obstacle_trigger"],
            double_sided=env.get("obstacle_double_sided", False),
        )

        flock_cfg = self.settings["flock"]
        self.flock = Flock.random(
            flock_cfg["count"],
            self.params,
            self.environment,
            rng=self.rng,
            spawn_extent=flock_cfg["spawn_extent"],
        )
        self.flock.warmup()

        for boid in self.flock.boids:
            boid.handle = self.surface.scene.add_drawable(boid)

        print(f"[Flock] {len(self.flock)} boids, {self.params.update_mode} update, "
              f"obstacle {self.environment.obstacle.triangles.shape[0]} triangles")
        self.surface.add_command("toggle_mode", self.toggle_update_mode)
        self.surface.request_animation_frame(self.step)

    def setup(self):
        self.create_geometry()
        self.start()

    def toggle_update_mode(self) -> str:
        """Flip the flock to the other update mode."""
        current = UPDATE_MODES.index(self.flock.params.update_mode)
        mode = UPDATE_MODES[(current + 1) % len(UPDATE_MODES)]
        self.flock.set_update_mode(mode)
        print(f"[Flock] {mode} update")
        return mode

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def step(self):
        """One frame: update every boid, then draw."""
        self.flock.update()
        stats = self.stats()
        self.surface.set_status(
            f"Frame: {stats['frame']}  |  Mean speed: {stats['mean_speed']:.3f}  |  "
            f"Obstacle hits: {stats['obstacle_hits']}  |  Outside walls: {stats['outside_walls']}"
        )
        self.surface.render()

    def stats(self) -> dict:
        flock = self.flock
        return {
            "frame": flock.frame,
            "boids": len(flock),
            "mean_speed": flock.mean_speed(),
            "max_speed": max((boid.speed() for boid in flock.boids), default=0.0),
            "within_speed_limit": flock.within_speed_limit(),
            "obstacle_hits": flock.obstacle_hits,
            "wall_reflections": flock.wall_reflections,
            "outside_walls": sum(
                not self.environment.bounding.contains(boid.position) for boid in flock.boids
            ),
        }

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def dispose(self):
        """Release drawable handles and the surface. Safe to call more than once."""
        if self.disposed:
            return
        if self.flock is not None:
            for boid in self.flock.boids:
                if boid.handle is not None:
                    self.surface.scene.remove_drawable(boid.handle)
                    boid.handle = None
        self.surface.dispose()
        self.disposed = True
