"""Keyboard and mouse controls: orbit the camera, pause the flock, switch its update mode."""

import pygame
from pygame.locals import *
from config import boids as config

from .camera import Camera
from .surface import RenderSurface


class InputHandler:
    """
    Routes pygame input to the orbit camera and the render surface.

    Camera keys are polled every frame; the simulation keys act once per
    key press:
        SPACE  pause / resume the frame callback
        M      run the surface's "toggle_mode" command
    """

    def __init__(self, camera: Camera, surface: RenderSurface):
        self.camera = camera
        self.surface = surface
        self.mouse_dragging = False
        self.last_mouse_pos = (0, 0)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Handle one event. Returns False once the window should close."""
        if event.type == QUIT:
            return False
        if event.type == KEYDOWN:
            return self._handle_key(event.key)
        if event.type == MOUSEBUTTONDOWN and event.button == 1:
            self.mouse_dragging = True
            self.last_mouse_pos = event.pos
        elif event.type == MOUSEBUTTONUP and event.button == 1:
            self.mouse_dragging = False
        elif event.type == MOUSEMOTION and self.mouse_dragging:
            self._drag(event.pos)
        elif event.type == MOUSEWHEEL:
            self.camera.zoom_smooth(-event.y * config.CAMERA["keyboard_zoom_speed"] * 0.2)
        return True

    def _handle_key(self, key: int) -> bool:
        if key == K_ESCAPE:
            return False
        if key == K_SPACE:
            self.surface.toggle_pause()
        elif key == K_m:
            if not self.surface.run_command("toggle_mode"):
                print("[App] No update mode to switch")
        return True

    def _drag(self, pos):
        dx = pos[0] - self.last_mouse_pos[0]
        dy = pos[1] - self.last_mouse_pos[1]
        sensitivity = config.CAMERA["mouse_sensitivity"]
        self.camera.rotate(dx * sensitivity, -dy * sensitivity)
        self.last_mouse_pos = pos

    def handle_continuous_input(self, dt: float):
        """Apply held camera keys, scaled by the frame time."""
        keys = pygame.key.get_pressed()
        rot = config.CAMERA["keyboard_rotate_speed"] * dt
        zoom = config.CAMERA["keyboard_zoom_speed"] * dt

        yaw = (keys[K_d] - keys[K_a]) * rot
        pitch = (keys[K_w] - keys[K_s]) * rot
        if yaw or pitch:
            self.camera.rotate(yaw, pitch)
        if keys[K_q] != keys[K_e]:
            self.camera.zoom(zoom if keys[K_e] else -zoom)
