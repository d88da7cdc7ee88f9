# spinfield/kernel/vectors.py
"""
VECTORS: Small 3D Vector and Rotation Helpers
=============================================

PURPOSE:
--------
The integrator and the renderer adapter both need a handful of geometric
operations on 3-vectors:

    normalize                  unit vector (zero stays zero)
    quaternion_from_unit_vectors  shortest rotation a -> b
    quaternion_to_matrix       3×3 rotation matrix
    compose_transform          4×4 placement matrix (T · R · S)

Each one has a single-vector version and, where the frame driver needs it,
a row-wise batch version operating on (N, 3) arrays.

CONVENTIONS:
------------
- Quaternions are stored as (x, y, z, w).
- 4×4 matrices use the column-vector convention: a point p maps to M @ [p, 1],
  so the translation sits in the last column.
- The canonical arrow axis is +Z. A spin pointing along (0, 0, 1) has the
  identity rotation.
"""

import numpy as np
from typing import Tuple

REFERENCE_DIRECTION = np.array([0.0, 0.0, 1.0])

# Below this |a + b|, two unit vectors are treated as antiparallel
_ANTIPARALLEL_EPS = 1e-12


def normalize(v: np.ndarray) -> np.ndarray:
    """
    Return v / |v|, or the zero vector when |v| == 0.

    The zero case is what the external field term relies on when the
    pointer sits exactly on a site.
    """
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return np.zeros_like(v)
    return v / norm


def normalize_rows(V: np.ndarray) -> np.ndarray:
    """Row-wise normalize an (N, 3) array. Zero rows stay zero."""
    V = np.asarray(V, dtype=float)
    norms = np.linalg.norm(V, axis=1, keepdims=True)
    safe = np.where(norms == 0.0, 1.0, norms)
    return np.where(norms == 0.0, 0.0, V / safe)


def _orthogonal_axis(a: np.ndarray) -> np.ndarray:
    # Cross with whichever basis axis is least aligned with a
    basis = np.eye(3)[np.argmin(np.abs(a))]
    return normalize(np.cross(a, basis))


def quaternion_from_unit_vectors(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Shortest-arc rotation taking unit vector a onto unit vector b.

    Uses the half-way construction: q = (a × b, 1 + a·b), normalized.
    When a and b are antiparallel the rotation axis is undefined, so any
    axis orthogonal to a is used with a rotation of pi.

    Parameters:
    -----------
    a, b : np.ndarray, shape (3,)
        Unit vectors

    Returns:
    --------
    np.ndarray, shape (4,)
        Unit quaternion (x, y, z, w)
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    w = 1.0 + float(np.dot(a, b))
    if w < _ANTIPARALLEL_EPS:
        axis = _orthogonal_axis(a)
        return np.array([axis[0], axis[1], axis[2], 0.0])
    xyz = np.cross(a, b)
    q = np.array([xyz[0], xyz[1], xyz[2], w])
    return q / np.linalg.norm(q)


def quaternion_to_matrix(q: np.ndarray) -> np.ndarray:
    """Convert a unit quaternion (x, y, z, w) to a 3×3 rotation matrix."""
    x, y, z, w = q
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array([
        [1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy)],
        [2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx)],
        [2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy)],
    ])


def compose_transform(
    position: np.ndarray,
    quaternion: np.ndarray,
    scale: float = 1.0,
) -> np.ndarray:
    """
    Build a 4×4 placement matrix from translation, rotation and uniform scale.

    Returns:
    --------
    np.ndarray, shape (4, 4)
        [[R·s, t],
         [0,   1]]
    """
    M = np.eye(4)
    M[:3, :3] = quaternion_to_matrix(quaternion) * scale
    M[:3, 3] = position
    return M


def rotation_matrices_from_reference(directions: np.ndarray) -> np.ndarray:
    """
    Batch version of quaternion_from_unit_vectors(REFERENCE_DIRECTION, d)
    followed by quaternion_to_matrix, for an (N, 3) array of unit vectors.

    Returns:
    --------
    np.ndarray, shape (N, 3, 3)
    """
    D = np.asarray(directions, dtype=float)
    n = D.shape[0]

    # a = (0, 0, 1): a × d = (-dy, dx, 0), a·d = dz
    x = -D[:, 1]
    y = D[:, 0]
    z = np.zeros(n)
    w = 1.0 + D[:, 2]

    # Antiparallel rows (d ≈ -Z): rotate by pi about +Y, same as _orthogonal_axis
    flip = w < _ANTIPARALLEL_EPS
    x = np.where(flip, 0.0, x)
    y = np.where(flip, 1.0, y)
    w = np.where(flip, 0.0, w)

    norm = np.sqrt(x * x + y * y + z * z + w * w)
    x, y, z, w = x / norm, y / norm, z / norm, w / norm

    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z

    R = np.empty((n, 3, 3))
    R[:, 0, 0] = 1 - 2 * (yy + zz)
    R[:, 0, 1] = 2 * (xy - wz)
    R[:, 0, 2] = 2 * (xz + wy)
    R[:, 1, 0] = 2 * (xy + wz)
    R[:, 1, 1] = 1 - 2 * (xx + zz)
    R[:, 1, 2] = 2 * (yz - wx)
    R[:, 2, 0] = 2 * (xz - wy)
    R[:, 2, 1] = 2 * (yz + wx)
    R[:, 2, 2] = 1 - 2 * (xx + yy)
    return R


def split_transform(M: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Recover (position, axis) from a placement matrix built by compose_transform.

    The axis is the image of REFERENCE_DIRECTION under the rotation part,
    i.e. the third column of the 3×3 block (divided by the uniform scale).
    """
    M = np.asarray(M, dtype=float)
    position = M[:3, 3].copy()
    axis = normalize(M[:3, 2])
    return position, axis
