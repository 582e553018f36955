"""Tests for the scene registry and the headless render surface."""

import pytest

from core.errors import MissingSurfaceError
from core.scene import Scene
from core.surface import HeadlessSurface


class TestScene:

    def test_add_and_lookup(self):
        scene = Scene()
        scene.add("bounding", "box")
        assert scene.has("bounding")
        assert scene.get_mesh("bounding") == "box"

    def test_missing_lookup_raises(self):
        with pytest.raises(MissingSurfaceError) as exc:
            Scene().get_mesh("obstacle")
        assert exc.value.name == "obstacle"
        assert isinstance(exc.value, KeyError)

    def test_drawable_handles_are_unique(self):
        scene = Scene()
        handles = {scene.add_drawable(object()) for _ in range(5)}
        assert len(handles) == 5
        assert scene.drawable_count == 5

    def test_remove_drawable(self):
        scene = Scene()
        handle = scene.add_drawable("cone")
        assert scene.remove_drawable(handle)
        assert not scene.remove_drawable(handle)
        assert scene.drawables() == []


class TestHeadlessSurface:

    def test_runs_callback_until_frame_limit(self):
        surface = HeadlessSurface(max_frames=4)
        calls = []

        def step():
            calls.append(1)
            surface.render()

        surface.request_animation_frame(step)
        surface.run()
        assert len(calls) == 4
        assert surface.disposed

    def test_run_without_callback_stops(self):
        surface = HeadlessSurface(max_frames=10)
        surface.run()
        assert surface.frames_rendered == 0

    def test_cancel_stops_ticking(self):
        surface = HeadlessSurface()
        surface.request_animation_frame(surface.render)
        assert surface.tick()
        surface.cancel_animation_frame()
        assert not surface.tick()

    def test_dispose_is_idempotent(self):
        surface = HeadlessSurface()
        surface.scene.add("bounding", "box")
        surface.dispose()
        surface.dispose()
        assert surface.disposed
        assert not surface.scene.has("bounding")
        assert not surface.tick()

    def test_report_line(self, capsys):
        surface = HeadlessSurface(max_frames=2, report_every=2)
        surface.set_status("ok")
        surface.request_animation_frame(surface.render)
        surface.run()
        assert "[Headless] Frame 2  ok" in capsys.readouterr().out

    def test_toggle_pause_keeps_the_callback(self, capsys):
        surface = HeadlessSurface()
        surface.request_animation_frame(surface.render)
        assert surface.toggle_pause()
        assert surface.frame_callback is None
        assert not surface.toggle_pause()
        assert surface.tick()
        out = capsys.readouterr().out
        assert "[App] Paused" in out
        assert "[App] Running" in out

    def test_toggle_pause_with_nothing_scheduled(self):
        surface = HeadlessSurface()
        assert not surface.toggle_pause()
        assert not surface.paused

    def test_commands(self):
        surface = HeadlessSurface()
        calls = []
        surface.add_command("toggle_mode", lambda: calls.append(1))
        assert surface.run_command("toggle_mode")
        assert not surface.run_command("reset")
        surface.dispose()
        assert not surface.run_command("toggle_mode")
        assert calls == [1]
