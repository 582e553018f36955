"""Tests for the keyboard and mouse controls, driven with synthetic pygame events."""

import pygame
from pygame.locals import (
    K_ESCAPE, K_SPACE, K_m, KEYDOWN, MOUSEBUTTONDOWN, MOUSEBUTTONUP, MOUSEMOTION, MOUSEWHEEL, QUIT,
)

from boids.simulation import Simulation, default_settings
from config import boids as config
from core.camera import Camera
from core.input_handler import InputHandler
from core.surface import HeadlessSurface


def key(k):
    return pygame.event.Event(KEYDOWN, key=k)


def running_simulation(count=4):
    surface = HeadlessSurface()
    settings = default_settings()
    settings["seed"] = 3
    settings["flock"]["count"] = count
    sim = Simulation(surface, settings)
    sim.setup()
    return surface, sim


class TestQuit:

    def test_quit_and_escape_close_the_window(self):
        handler = InputHandler(Camera(), HeadlessSurface())
        assert not handler.handle_event(pygame.event.Event(QUIT))
        assert not handler.handle_event(key(K_ESCAPE))


class TestSimulationKeys:

    def test_space_pauses_and_resumes(self):
        surface, sim = running_simulation()
        handler = InputHandler(Camera(), surface)

        assert handler.handle_event(key(K_SPACE))
        assert surface.paused
        assert not surface.tick()

        handler.handle_event(key(K_SPACE))
        assert not surface.paused
        assert surface.frame_callback == sim.step

    def test_m_switches_update_mode(self):
        surface, sim = running_simulation()
        handler = InputHandler(Camera(), surface)
        handler.handle_event(key(K_m))
        assert sim.flock.params.update_mode == "snapshot"
        handler.handle_event(key(K_m))
        assert sim.flock.params.update_mode == "sequential"

    def test_m_without_simulation(self, capsys):
        handler = InputHandler(Camera(), HeadlessSurface())
        assert handler.handle_event(key(K_m))
        assert "No update mode" in capsys.readouterr().out


class TestCameraInput:

    def test_wheel_zooms_smoothly(self):
        camera = Camera()
        handler = InputHandler(camera, HeadlessSurface())
        handler.handle_event(pygame.event.Event(MOUSEWHEEL, x=0, y=1))
        expected = config.CAMERA["initial_radius"] - config.CAMERA["keyboard_zoom_speed"] * 0.2
        assert camera.target_radius == expected
        assert camera.radius == config.CAMERA["initial_radius"]

    def test_drag_rotates_camera(self):
        camera = Camera()
        handler = InputHandler(camera, HeadlessSurface())
        handler.handle_event(pygame.event.Event(MOUSEBUTTONDOWN, button=1, pos=(100, 100)))
        handler.handle_event(pygame.event.Event(MOUSEMOTION, pos=(110, 100), rel=(10, 0), buttons=(1, 0, 0)))
        assert camera.theta == (config.CAMERA["initial_theta"] + 10 * config.CAMERA["mouse_sensitivity"]) % 360

        handler.handle_event(pygame.event.Event(MOUSEBUTTONUP, button=1, pos=(110, 100)))
        theta = camera.theta
        handler.handle_event(pygame.event.Event(MOUSEMOTION, pos=(150, 100), rel=(40, 0), buttons=(0, 0, 0)))
        assert camera.theta == theta
