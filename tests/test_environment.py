"""Tests for the soft bounding box and the obstacle."""

import numpy as np
import pytest

from boids.environment import BoundingBox, Environment, Obstacle
from boids.geometry import BoxGeometry, icosahedron_geometry
from core.errors import ConfigError, MissingSurfaceError
from core.scene import Scene

from conftest import facing_triangle


class TestBoundingBox:

    def setup_method(self):
        self.box = BoundingBox(BoxGeometry(15, 15, 15), offset=0.5)

    def test_limits_are_inset(self):
        assert np.allclose(self.box.limits, [7.0, 7.0, 7.0])

    def test_outward_past_positive_wall_flips(self):
        velocity = np.array([0.05, 0.01, -0.02])
        self.box.reflect(np.array([7.2, 0.0, 0.0]), velocity)
        assert np.allclose(velocity, [-0.05, 0.01, -0.02])

    def test_outward_past_negative_wall_flips(self):
        velocity = np.array([0.01, -0.05, 0.0])
        turn = self.box.reflect(np.array([0.0, -7.2, 0.0]), velocity)
        assert np.allclose(turn, [1.0, -1.0, 1.0])
        assert np.allclose(velocity, [0.01, 0.05, 0.0])

    def test_inward_past_wall_is_left_alone(self):
        velocity = np.array([-0.05, 0.0, 0.0])
        self.box.reflect(np.array([7.5, 0.0, 0.0]), velocity)
        assert np.allclose(velocity, [-0.05, 0.0, 0.0])

    def test_outward_inside_wall_is_left_alone(self):
        velocity = np.array([0.05, 0.05, 0.05])
        self.box.reflect(np.array([6.9, 6.9, 6.9]), velocity)
        assert np.allclose(velocity, [0.05, 0.05, 0.05])

    def test_axes_are_independent(self):
        velocity = np.array([0.05, 0.05, -0.05])
        self.box.reflect(np.array([7.5, 7.5, 7.5]), velocity)
        assert np.allclose(velocity, [-0.05, -0.05, -0.05])

    def test_contains(self):
        assert self.box.contains(np.zeros(3))
        assert not self.box.contains(np.array([0.0, 7.5, 0.0]))

    def test_offset_too_large(self):
        with pytest.raises(ConfigError):
            BoundingBox(BoxGeometry(1, 1, 1), offset=0.5)


class TestObstacle:

    def test_raycast_distance(self):
        obstacle = Obstacle(facing_triangle(0.7))
        assert obstacle.raycast(np.array([0.0, 0.0, 1.0]), np.array([0.0, 0.0, -1.0])) == pytest.approx(0.3)

    def test_raycast_miss_is_none(self):
        obstacle = Obstacle(facing_triangle(0.7))
        assert obstacle.raycast(np.array([0.0, 0.0, 1.0]), np.array([1.0, 0.0, 0.0])) is None

    def test_avoid_reverses_exactly(self):
        obstacle = Obstacle(facing_triangle(0.7), trigger_distance=0.5)
        velocity = np.array([0.0, 0.0, -0.08])
        assert obstacle.avoid(np.array([0.0, 0.0, 1.0]), velocity)
        assert np.array_equal(velocity, [0.0, 0.0, 0.08])

    def test_avoid_uses_velocity_direction_not_magnitude(self):
        obstacle = Obstacle(facing_triangle(0.7), trigger_distance=0.5)
        velocity = np.array([0.0, 0.0, -0.001])
        assert obstacle.avoid(np.array([0.0, 0.0, 1.0]), velocity)

    def test_zero_velocity_never_triggers(self):
        obstacle = Obstacle(facing_triangle(0.7), trigger_distance=0.5)
        velocity = np.zeros(3)
        assert not obstacle.avoid(np.array([0.0, 0.0, 1.0]), velocity)

    def test_boid_heading_into_sphere(self):
        obstacle = Obstacle(icosahedron_geometry(1.8, 8), trigger_distance=0.5)
        velocity = np.array([-0.08, 0.0, 0.0])
        assert obstacle.avoid(np.array([2.1, 0.0, 0.0]), velocity)
        assert velocity[0] > 0

    def test_boid_heading_away_from_sphere(self):
        obstacle = Obstacle(icosahedron_geometry(1.8, 8), trigger_distance=0.5)
        velocity = np.array([0.08, 0.0, 0.0])
        assert not obstacle.avoid(np.array([2.1, 0.0, 0.0]), velocity)

    def test_bad_triangle_shape(self):
        with pytest.raises(ConfigError):
            Obstacle(np.zeros((4, 3)))


class TestEnvironmentFromScene:

    def test_resolves_named_surfaces(self):
        scene = Scene()
        scene.add("bounding", BoxGeometry(15, 15, 15))
        scene.add("obstacle", facing_triangle(0.0))
        env = Environment.from_scene(scene)
        assert np.allclose(env.bounding.limits, 7.0)
        assert env.obstacle.triangles.shape == (1, 3, 3)

    def test_missing_obstacle_is_fatal(self):
        scene = Scene()
        scene.add("bounding", BoxGeometry(15, 15, 15))
        with pytest.raises(MissingSurfaceError, match="obstacle"):
            Environment.from_scene(scene)

    def test_no_obstacle_means_no_avoidance(self):
        env = Environment(BoundingBox(BoxGeometry(15, 15, 15)))
        velocity = np.array([0.0, 0.0, -0.08])
        assert not env.avoid_obstacle(np.zeros(3), velocity)
