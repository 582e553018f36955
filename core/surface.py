"""Render surface API shared by the windowed application and the headless runner."""

from typing import Any, Callable, Dict, Optional

from .scene import Scene


class RenderSurface:
    """
    Owns the scene and drives a single per-frame callback.

    Subclasses implement `render()` and `run()`; this base handles the
    callback registration, pausing, named commands bound to controls,
    named surface lookup, and idempotent disposal.
    """

    def __init__(self):
        self.scene = Scene()
        self.frame_callback: Optional[Callable[[], None]] = None
        self._paused_callback: Optional[Callable[[], None]] = None
        self.commands: Dict[str, Callable[[], None]] = {}
        self.status = ""
        self.frames_rendered = 0
        self.disposed = False

    def request_animation_frame(self, callback: Callable[[], None]):
        """Run `callback` once per frame until cancelled or disposed."""
        self.frame_callback = callback

    def cancel_animation_frame(self):
        self.frame_callback = None

    @property
    def paused(self) -> bool:
        return self._paused_callback is not None

    def toggle_pause(self) -> bool:
        """Cancel the frame callback, or reschedule the one cancelled last. Returns the new paused state."""
        if self._paused_callback is not None:
            self.request_animation_frame(self._paused_callback)
            self._paused_callback = None
            print("[App] Running")
        elif self.frame_callback is not None:
            self._paused_callback = self.frame_callback
            self.cancel_animation_frame()
            print("[App] Paused")
        return self.paused

    def add_command(self, name: str, callback: Callable[[], None]):
        self.commands[name] = callback

    def run_command(self, name: str) -> bool:
        """Run a named command. Returns False if nothing is registered under `name`."""
        callback = self.commands.get(name)
        if callback is None or self.disposed:
            return False
        callback()
        return True

    def get_mesh(self, name: str) -> Any:
        return self.scene.get_mesh(name)

    def set_status(self, text: str):
        self.status = text

    def tick(self) -> bool:
        """Run the registered callback once. Returns False when nothing is scheduled."""
        if self.disposed or self.frame_callback is None:
            return False
        self.frame_callback()
        return True

    def render(self):
        self.frames_rendered += 1

    def run(self):
        raise NotImplementedError

    def dispose(self):
        if self.disposed:
            return
        self.cancel_animation_frame()
        self.scene.clear()
        self._paused_callback = None
        self.commands.clear()
        self.disposed = True


class HeadlessSurface(RenderSurface):
    """A surface with no window; `run()` stops after `max_frames` frames."""

    def __init__(self, max_frames: Optional[int] = None, report_every: int = 0):
        super().__init__()
        self.max_frames = max_frames
        self.report_every = report_every

    def render(self):
        super().render()
        if self.report_every and self.frames_rendered % self.report_every == 0:
            print(f"[Headless] Frame {self.frames_rendered}  {self.status}")

    def run(self):
        while self.max_frames is None or self.frames_rendered < self.max_frames:
            if not self.tick():
                break
        self.dispose()
