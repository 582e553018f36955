"""Lit triangle rendering for the obstacle and the boid cones."""

import numpy as np
from OpenGL.GL import *

from config import boids as config
from boids.geometry import cone_geometry, face_normals
from boids.vecmath import quat_to_matrix


def _draw_triangles(triangles: np.ndarray, normals: np.ndarray):
    glBegin(GL_TRIANGLES)
    for tri, normal in zip(triangles, normals):
        glNormal3f(*normal)
        glVertex3f(*tri[0])
        glVertex3f(*tri[1])
        glVertex3f(*tri[2])
    glEnd()


class ObstacleRenderer:
    """Draws the obstacle mesh, compiled once into a display list."""

    def __init__(self, surface_name: str = "obstacle"):
        self.surface_name = surface_name
        self.color = config.COLORS["obstacle"]
        self._display_list = None
        self._source = None

    def _compile(self, triangles: np.ndarray):
        if self._display_list is not None:
            glDeleteLists(self._display_list, 1)
        self._display_list = glGenLists(1)
        glNewList(self._display_list, GL_COMPILE)
        _draw_triangles(triangles, face_normals(triangles))
        glEndList()
        self._source = triangles

    def draw(self, scene):
        if not scene.has(self.surface_name):
            return
        triangles = scene.get_mesh(self.surface_name)
        if triangles is not self._source:
            self._compile(triangles)

        glColor3f(*self.color)
        glCallList(self._display_list)


class BoidRenderer:
    """Draws each boid as a cone, translated to its position and rotated by its orientation."""

    def __init__(self, mesh: dict = None):
        mesh = mesh or config.BOID_MESH
        self.color = config.COLORS["boid"]
        self.triangles = cone_geometry(mesh["radius"], mesh["height"], mesh["segments"])
        self.normals = face_normals(self.triangles)

    def draw(self, boids):
        glColor3f(*self.color)
        for boid in boids:
            glPushMatrix()
            glTranslatef(*boid.position)
            glMultMatrixf(quat_to_matrix(boid.orientation))
            _draw_triangles(self.triangles, self.normals)
            glPopMatrix()
