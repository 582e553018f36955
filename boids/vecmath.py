"""Vector and quaternion helpers. Quaternions are (w, x, y, z) float64 arrays."""

import math
import numpy as np


def normalize(v: np.ndarray) -> np.ndarray:
    """Return v scaled to unit length, or the zero vector if v has no length."""
    length = np.linalg.norm(v)
    if length == 0.0:
        return np.zeros(3)
    return v / length


def clamp_components(v: np.ndarray, lo: float, hi: float) -> np.ndarray:
    """Clamp each component of v into [lo, hi] in place."""
    np.clip(v, lo, hi, out=v)
    return v


def quat_identity() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation of `angle` radians about `axis`, which must be a unit vector."""
    half = angle * 0.5
    s = math.sin(half)
    return np.array([math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s])


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (apply b first, then a)."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array([
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    ])


def quat_normalize(q: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(q)
    if length == 0.0:
        return quat_identity()
    return q / length


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by quaternion q."""
    p = np.array([0.0, v[0], v[1], v[2]])
    conj = np.array([q[0], -q[1], -q[2], -q[3]])
    return quat_multiply(quat_multiply(q, p), conj)[1:]


def quat_to_matrix(q: np.ndarray) -> list:
    """
    Convert a unit quaternion to a 4x4 column-major matrix.

    The result can be passed straight to glMultMatrixf.
    """
    w, x, y, z = q
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z

    return [
        1 - 2 * (yy + zz), 2 * (xy + wz), 2 * (xz - wy), 0.0,
        2 * (xy - wz), 1 - 2 * (xx + zz), 2 * (yz + wx), 0.0,
        2 * (xz + wy), 2 * (yz - wx), 1 - 2 * (xx + yy), 0.0,
        0.0, 0.0, 0.0, 1.0,
    ]
