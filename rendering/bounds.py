"""Wireframe rendering of the bounding box."""

from OpenGL.GL import *
from config import boids as config


class BoundsRenderer:
    """Draws the bounding box's 12 edges as unlit lines."""

    def __init__(self, surface_name: str = "bounding"):
        self.surface_name = surface_name
        self.color = config.COLORS["bounds"]

    def draw(self, scene):
        """
        Draw the box registered under `surface_name`.

        Args:
            scene: Scene holding the named BoxGeometry; nothing is drawn if absent
        """
        if not scene.has(self.surface_name):
            return
        edges = scene.get_mesh(self.surface_name).edges()

        glDisable(GL_LIGHTING)
        glBegin(GL_LINES)
        glColor3f(*self.color)
        for start, end in edges:
            glVertex3f(*start)
            glVertex3f(*end)
        glEnd()
        glEnable(GL_LIGHTING)
