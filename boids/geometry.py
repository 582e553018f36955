"""Static geometry: the bounding box, the icosphere obstacle, the boid cone, and ray casting."""

import math
import numpy as np
from dataclasses import dataclass
from numba import njit


# ============================================================================
# PRIMITIVES
# ============================================================================

@dataclass(frozen=True)
class BoxGeometry:
    """Axis-aligned box centred on the origin."""
    width: float
    height: float
    depth: float

    @property
    def parameters(self) -> dict:
        return {"width": self.width, "height": self.height, "depth": self.depth}

    @property
    def half_extents(self) -> np.ndarray:
        return np.array([self.width, self.height, self.depth]) / 2.0

    def corners(self) -> np.ndarray:
        """The 8 corners, indexed by bit pattern (x, y, z) -> (1, 2, 4)."""
        hx, hy, hz = self.half_extents
        return np.array([
            [hx if i & 1 else -hx, hy if i & 2 else -hy, hz if i & 4 else -hz]
            for i in range(8)
        ])

    def edges(self) -> np.ndarray:
        """The 12 edges as a (12, 2, 3) array of line segments."""
        c = self.corners()
        pairs = [
            (0, 1), (2, 3), (4, 5), (6, 7),   # along x
            (0, 2), (1, 3), (4, 6), (5, 7),   # along y
            (0, 4), (1, 5), (2, 6), (3, 7),   # along z
        ]
        return np.array([[c[a], c[b]] for a, b in pairs])


_T = (1.0 + math.sqrt(5.0)) / 2.0

ICOSAHEDRON_VERTICES = np.array([
    [-1, _T, 0], [1, _T, 0], [-1, -_T, 0], [1, -_T, 0],
    [0, -1, _T], [0, 1, _T], [0, -1, -_T], [0, 1, -_T],
    [_T, 0, -1], [_T, 0, 1], [-_T, 0, -1], [-_T, 0, 1],
], dtype=np.float64)

ICOSAHEDRON_FACES = np.array([
    [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
    [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
    [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
    [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
], dtype=np.int64)


def _subdivide_face(a: np.ndarray, b: np.ndarray, c: np.ndarray, detail: int) -> list:
    """Split one triangle into (detail + 1)^2 triangles, keeping its winding."""
    cols = detail + 1
    grid = []
    for i in range(cols + 1):
        aj = a + (c - a) * (i / cols)
        bj = b + (c - b) * (i / cols)
        rows = cols - i
        row = []
        for j in range(rows + 1):
            if j == 0 and i == cols:
                row.append(aj)
            else:
                row.append(aj + (bj - aj) * (j / rows))
        grid.append(row)

    triangles = []
    for i in range(cols):
        for j in range(2 * (cols - i) - 1):
            k = j // 2
            if j % 2 == 0:
                triangles.append((grid[i][k + 1], grid[i + 1][k], grid[i][k]))
            else:
                triangles.append((grid[i][k + 1], grid[i + 1][k + 1], grid[i + 1][k]))
    return triangles


def icosahedron_geometry(radius: float, detail: int = 0) -> np.ndarray:
    """
    Build an icosphere as an (m, 3, 3) array of triangles.

    Each of the 20 icosahedron faces is split into (detail + 1)^2 triangles
    and every vertex is pushed out to `radius`. Faces wind counter-clockwise
    when seen from outside.
    """
    if detail < 0:
        raise ValueError(f"detail must be >= 0, got {detail}")

    triangles = []
    for ia, ib, ic in ICOSAHEDRON_FACES:
        triangles.extend(_subdivide_face(
            ICOSAHEDRON_VERTICES[ia], ICOSAHEDRON_VERTICES[ib], ICOSAHEDRON_VERTICES[ic], detail
        ))

    tris = np.array(triangles, dtype=np.float64)
    lengths = np.linalg.norm(tris, axis=2, keepdims=True)
    return tris / lengths * radius


def cone_geometry(radius: float, height: float, segments: int = 4) -> np.ndarray:
    """
    Build a cone centred on the origin with its apex on +y.

    Returns (2 * segments, 3, 3) triangles: the sides, then the base cap.
    """
    apex = np.array([0.0, height / 2.0, 0.0])
    centre = np.array([0.0, -height / 2.0, 0.0])
    ring = [
        np.array([radius * math.sin(theta), -height / 2.0, radius * math.cos(theta)])
        for theta in np.linspace(0.0, 2.0 * math.pi, segments, endpoint=False)
    ]

    sides = [(ring[i], ring[(i + 1) % segments], apex) for i in range(segments)]
    cap = [(centre, ring[(i + 1) % segments], ring[i]) for i in range(segments)]
    return np.array(sides + cap, dtype=np.float64)


def face_normals(triangles: np.ndarray) -> np.ndarray:
    """Unit normals for an (m, 3, 3) triangle array."""
    n = np.cross(triangles[:, 1] - triangles[:, 0], triangles[:, 2] - triangles[:, 0])
    lengths = np.linalg.norm(n, axis=1, keepdims=True)
    lengths[lengths == 0.0] = 1.0
    return n / lengths


# ============================================================================
# NUMBA JIT-COMPILED RAY CASTING
# ============================================================================

@njit(cache=True)
def ray_intersect_triangles(
    origin: np.ndarray,
    direction: np.ndarray,
    triangles: np.ndarray,
    double_sided: bool
) -> float:
    """
    Nearest Moller-Trumbore hit distance along the ray, or -1.0 on a miss.

    `direction` must be a unit vector for the distance to be in world units.
    With `double_sided` False, triangles facing away from the ray are skipped.
    """
    eps = 1e-12
    nearest = -1.0
    ox, oy, oz = origin[0], origin[1], origin[2]
    dx, dy, dz = direction[0], direction[1], direction[2]

    for t in range(triangles.shape[0]):
        ax, ay, az = triangles[t, 0, 0], triangles[t, 0, 1], triangles[t, 0, 2]
        e1x = triangles[t, 1, 0] - ax
        e1y = triangles[t, 1, 1] - ay
        e1z = triangles[t, 1, 2] - az
        e2x = triangles[t, 2, 0] - ax
        e2y = triangles[t, 2, 1] - ay
        e2z = triangles[t, 2, 2] - az

        # p = d x e2
        px = dy * e2z - dz * e2y
        py = dz * e2x - dx * e2z
        pz = dx * e2y - dy * e2x

        det = e1x * px + e1y * py + e1z * pz
        if double_sided:
            if abs(det) < eps:
                continue
        elif det < eps:
            continue

        inv_det = 1.0 / det
        sx = ox - ax
        sy = oy - ay
        sz = oz - az

        u = (sx * px + sy * py + sz * pz) * inv_det
        if u < 0.0 or u > 1.0:
            continue

        # q = s x e1
        qx = sy * e1z - sz * e1y
        qy = sz * e1x - sx * e1z
        qz = sx * e1y - sy * e1x

        v = (dx * qx + dy * qy + dz * qz) * inv_det
        if v < 0.0 or u + v > 1.0:
            continue

        dist = (e2x * qx + e2y * qy + e2z * qz) * inv_det
        if dist >= 0.0 and (nearest < 0.0 or dist < nearest):
            nearest = dist

    return nearest
