"""Orbital camera looking at the centre of the bounding box."""

import math
import numpy as np
from OpenGL.GL import *
from OpenGL.GLU import *
from config import boids as config


class Camera:
    """Orbit camera with smooth zoom. Always looks at the origin; no panning."""

    def __init__(self, settings: dict = None):
        self.settings = settings or config.CAMERA
        self.radius = self.settings["initial_radius"]
        self.target_radius = self.radius
        self.theta = self.settings["initial_theta"]
        self.phi = self.settings["initial_phi"]
        self.target = np.zeros(3)
        self.zoom_smoothing = 8.0

    def get_direction(self) -> np.ndarray:
        """Get the normalized direction vector from target to camera."""
        theta_rad = math.radians(self.theta)
        phi_rad = math.radians(self.phi)
        x = math.cos(phi_rad) * math.cos(theta_rad)
        y = math.sin(phi_rad)
        z = math.cos(phi_rad) * math.sin(theta_rad)
        return np.array([x, y, z])

    def get_position(self) -> np.ndarray:
        """Get the camera's world position."""
        return self.target + self.radius * self.get_direction()

    def _clamp_radius(self, radius: float) -> float:
        return max(self.settings["min_radius"], min(self.settings["max_radius"], radius))

    def rotate(self, d_theta: float, d_phi: float):
        """Rotate the camera by the given angles in degrees."""
        self.theta = (self.theta + d_theta) % 360
        self.phi = max(
            self.settings["min_phi"],
            min(self.settings["max_phi"], self.phi + d_phi)
        )

    def zoom(self, delta: float):
        """Immediately zoom by the given amount."""
        self.radius = self._clamp_radius(self.radius + delta)
        self.target_radius = self.radius

    def zoom_smooth(self, delta: float):
        """Smoothly zoom by the given amount."""
        self.target_radius = self._clamp_radius(self.target_radius + delta)

    def update(self, dt: float):
        """Ease the radius toward its target (called each frame)."""
        self.radius += (self.target_radius - self.radius) * min(1.0, self.zoom_smoothing * dt)
        self.radius = self._clamp_radius(self.radius)

    def apply(self):
        """Apply the camera transformation to the OpenGL modelview matrix."""
        pos = self.get_position()
        glLoadIdentity()
        gluLookAt(
            pos[0], pos[1], pos[2],
            self.target[0], self.target[1], self.target[2],
            0, 1, 0
        )
