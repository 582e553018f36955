"""Named surface registry and drawable bookkeeping shared by every render surface."""

from typing import Any, Dict, List

from .errors import MissingSurfaceError


class Scene:
    """
    Holds the static geometry the simulation looks up by name, plus the
    drawables (one per boid) the renderer iterates over.
    """

    def __init__(self):
        self._surfaces: Dict[str, Any] = {}
        self._drawables: Dict[int, Any] = {}
        self._next_handle = 0

    def add(self, name: str, surface: Any):
        if name in self._surfaces:
            print(f"[Scene] Replacing surface '{name}'")
        self._surfaces[name] = surface

    def has(self, name: str) -> bool:
        return name in self._surfaces

    def get_mesh(self, name: str) -> Any:
        """Look up a surface by name. Raises MissingSurfaceError if absent."""
        try:
            return self._surfaces[name]
        except KeyError:
            raise MissingSurfaceError(name) from None

    # ------------------------------------------------------------------
    # Drawables
    # ------------------------------------------------------------------

    def add_drawable(self, drawable: Any) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._drawables[handle] = drawable
        return handle

    def remove_drawable(self, handle: int) -> bool:
        return self._drawables.pop(handle, None) is not None

    def drawables(self) -> List[Any]:
        return list(self._drawables.values())

    @property
    def drawable_count(self) -> int:
        return len(self._drawables)

    def clear(self):
        self._surfaces.clear()
        self._drawables.clear()
