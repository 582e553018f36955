"""Windowed render surface: pygame event loop plus OpenGL drawing."""

import pygame
from pygame.locals import *
from OpenGL.GL import *
from OpenGL.GLU import *

from config import boids as config
from .camera import Camera
from .input_handler import InputHandler
from .surface import RenderSurface
from rendering import BoundsRenderer, ObstacleRenderer, BoidRenderer, TextRenderer


class Application(RenderSurface):
    """Main application managing the window, the frame loop and rendering."""

    def __init__(self, window: dict = None, settings: dict = None):
        super().__init__()
        window = window or config.WINDOW
        self.width = window["width"]
        self.height = window["height"]
        self.settings = settings or {}

        pygame.init()
        pygame.display.set_mode((self.width, self.height), DOUBLEBUF | OPENGL)
        pygame.display.set_caption(window["title"])

        # Core components
        self.camera = Camera()
        self.input_handler = InputHandler(self.camera, self)

        # Rendering components
        self.bounds_renderer = BoundsRenderer(
            self.settings.get("bounding_name", config.ENVIRONMENT["bounding_name"])
        )
        self.obstacle_renderer = ObstacleRenderer(
            self.settings.get("obstacle_name", config.ENVIRONMENT["obstacle_name"])
        )
        self.boid_renderer = BoidRenderer()
        self.text_renderer = TextRenderer()

        # State
        self.clock = pygame.time.Clock()
        self.running = True
        self.fps = 0

        self._setup_gl()

    def _setup_gl(self):
        """Initialize OpenGL settings."""
        glClearColor(*config.COLORS["background"])
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_CULL_FACE)

        glEnable(GL_LIGHTING)
        glEnable(GL_LIGHT0)
        glEnable(GL_COLOR_MATERIAL)
        glColorMaterial(GL_FRONT, GL_AMBIENT_AND_DIFFUSE)
        glLightfv(GL_LIGHT0, GL_AMBIENT, (0.05, 0.05, 0.05, 1.0))
        glLightfv(GL_LIGHT0, GL_DIFFUSE, (0.7, 0.7, 0.7, 1.0))

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(
            config.CAMERA["fov"],
            self.width / self.height,
            config.CAMERA["near_clip"],
            config.CAMERA["far_clip"]
        )
        glMatrixMode(GL_MODELVIEW)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if not self.input_handler.handle_event(event):
                self.running = False

    def render(self):
        """Draw the current scene."""
        super().render()
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self.camera.apply()

        # Directional light in world space
        glLightfv(GL_LIGHT0, GL_POSITION, (10.0, 8.0, 15.0, 0.0))

        self.bounds_renderer.draw(self.scene)
        self.obstacle_renderer.draw(self.scene)
        self.boid_renderer.draw(self.scene.drawables())

        screen_size = (self.width, self.height)
        self.text_renderer.draw_text(
            f"Boids: {self.scene.drawable_count}  |  FPS: {self.fps:.0f}",
            10, 10, screen_size
        )
        if self.status:
            self.text_renderer.draw_text(self.status, 10, 35, screen_size)
        if self.paused:
            self.text_renderer.draw_text("Paused (SPACE to resume)", 10, 60, screen_size)

        pygame.display.flip()

    def run(self):
        """Main application loop; the display refresh drives the frame callback."""
        while self.running and not self.disposed:
            dt = self.clock.tick(60) / 1000.0
            self.fps = self.clock.get_fps()

            self._handle_events()
            self.input_handler.handle_continuous_input(dt)
            self.camera.update(dt)

            if not self.tick():
                # Nothing scheduled: keep the window responsive
                self.render()

        self.dispose()

    def dispose(self):
        if self.disposed:
            return
        super().dispose()
        self.running = False
        pygame.quit()
