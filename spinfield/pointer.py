# spinfield/pointer.py
"""
POINTER INPUT: Projecting a 2D Device Position onto the Lattice Plane
=====================================================================

The simulation only needs a 3D target point on the z=0 plane. Getting there
from a mouse position takes three pieces:

1. PerspectiveCamera.ray_from_ndc: normalized device coords (x, y in [-1, 1])
   -> a world-space ray from the camera through that pixel
2. intersect_plane: ray ∩ plane, or None when the ray is parallel to the
   plane or the plane is behind the camera
3. PointerTracker: keeps the last valid hit, so a frame with no
   intersection leaves the pointer where it was

Plane convention: points p with normal·p + constant = 0.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .kernel.vectors import normalize

LATTICE_PLANE_NORMAL = (0.0, 0.0, 1.0)

_PARALLEL_EPS = 1e-12


@dataclass
class Ray:
    origin: np.ndarray
    direction: np.ndarray

    def at(self, t: float) -> np.ndarray:
        return self.origin + t * self.direction


def intersect_plane(
    ray: Ray,
    normal: Tuple[float, float, float] = LATTICE_PLANE_NORMAL,
    constant: float = 0.0,
) -> Optional[np.ndarray]:
    """
    Intersect a ray with the plane normal·p + constant = 0.

    Returns:
    --------
    Optional[np.ndarray]
        Hit point, or None if the ray is parallel to the plane (and not
        lying in it) or the hit is behind the ray origin
    """
    n = np.asarray(normal, dtype=float)
    origin = np.asarray(ray.origin, dtype=float)
    direction = np.asarray(ray.direction, dtype=float)

    distance = float(np.dot(n, origin)) + constant
    denom = float(np.dot(n, direction))
    if abs(denom) < _PARALLEL_EPS:
        if distance == 0.0:
            return origin.copy()
        return None

    t = -distance / denom
    if t < 0:
        return None
    return origin + t * direction


@dataclass
class PerspectiveCamera:
    """
    Pinhole camera looking from position toward target.

    Parameters:
    -----------
    position : Tuple[float, float, float]
        Eye position (default matches the viewer: 14 units above the lattice)
    target : Tuple[float, float, float]
        Look-at point
    up : Tuple[float, float, float]
        Approximate up vector
    fov : float
        Vertical field of view in degrees
    aspect : float
        Viewport width / height
    """
    position: Tuple[float, float, float] = (0.0, 0.0, 14.0)
    target: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    fov: float = 50.0
    aspect: float = 1.0

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(right, up, forward) unit vectors of the camera frame."""
        eye = np.asarray(self.position, dtype=float)
        forward = normalize(np.asarray(self.target, dtype=float) - eye)
        right = normalize(np.cross(forward, np.asarray(self.up, dtype=float)))
        true_up = np.cross(right, forward)
        return right, true_up, forward

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Ray:
        """World-space ray through normalized device coordinates (ndc_x, ndc_y)."""
        right, true_up, forward = self.basis()
        tan_half = math.tan(math.radians(self.fov) / 2)
        direction = (forward
                     + ndc_x * tan_half * self.aspect * right
                     + ndc_y * tan_half * true_up)
        return Ray(origin=np.asarray(self.position, dtype=float), direction=normalize(direction))


def project_pointer(ndc_x: float, ndc_y: float, camera: PerspectiveCamera) -> Optional[np.ndarray]:
    """NDC position -> point on the z=0 lattice plane, or None."""
    return intersect_plane(camera.ray_from_ndc(ndc_x, ndc_y))


@dataclass
class PointerTracker:
    """
    The pointer position as the frame driver sees it.

    The position is overwritten in place on every valid update and retained
    when an update carries no intersection.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def update(self, point: Optional[np.ndarray]) -> np.ndarray:
        if point is not None:
            self.position[...] = np.asarray(point, dtype=float)
        return self.position

    def update_from_ndc(self, ndc_x: float, ndc_y: float, camera: PerspectiveCamera) -> np.ndarray:
        return self.update(project_pointer(ndc_x, ndc_y, camera))
