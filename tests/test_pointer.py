# tests/test_pointer.py
"""
Tests for pointer projection onto the lattice plane.

The driver only consumes "current 3D target on z=0, or none this frame";
these tests cover the ray construction, the intersection and the
retain-last-value behaviour.
"""

import math

import numpy as np

from spinfield.pointer import (
    Ray,
    PerspectiveCamera,
    PointerTracker,
    intersect_plane,
    project_pointer,
)


def test_ray_straight_down_hits_origin():
    ray = Ray(origin=np.array([0.0, 0.0, 14.0]), direction=np.array([0.0, 0.0, -1.0]))
    np.testing.assert_allclose(intersect_plane(ray), [0.0, 0.0, 0.0])


def test_oblique_ray_hit():
    ray = Ray(origin=np.array([1.0, 0.0, 2.0]), direction=np.array([1.0, 0.0, -1.0]))
    np.testing.assert_allclose(intersect_plane(ray), [3.0, 0.0, 0.0])


def test_parallel_ray_misses():
    ray = Ray(origin=np.array([0.0, 0.0, 1.0]), direction=np.array([1.0, 0.0, 0.0]))
    assert intersect_plane(ray) is None


def test_ray_in_plane_returns_origin():
    ray = Ray(origin=np.array([0.5, 0.5, 0.0]), direction=np.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(intersect_plane(ray), [0.5, 0.5, 0.0])


def test_plane_behind_ray_misses():
    ray = Ray(origin=np.array([0.0, 0.0, 5.0]), direction=np.array([0.0, 0.0, 1.0]))
    assert intersect_plane(ray) is None


def test_camera_center_projects_to_origin():
    camera = PerspectiveCamera()
    np.testing.assert_allclose(project_pointer(0.0, 0.0, camera), [0.0, 0.0, 0.0], atol=1e-12)


def test_camera_ndc_edges():
    """
    WHAT IS THIS TEST?
    ==================
    With the camera 14 units above the plane and a vertical FOV of 50°, the
    right edge of the view (ndc_x = 1, aspect = 1) hits x = 14·tan(25°).
    The top edge (ndc_y = 1) hits y = 14·tan(25°).
    """
    camera = PerspectiveCamera(position=(0.0, 0.0, 14.0), fov=50.0, aspect=1.0)
    half_width = 14.0 * math.tan(math.radians(25.0))

    np.testing.assert_allclose(project_pointer(1.0, 0.0, camera), [half_width, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(project_pointer(0.0, 1.0, camera), [0.0, half_width, 0.0], atol=1e-9)


def test_aspect_stretches_horizontal_extent():
    camera = PerspectiveCamera(aspect=2.0)
    hit = project_pointer(1.0, 0.0, camera)
    assert np.isclose(hit[0], 2.0 * 14.0 * math.tan(math.radians(25.0)))


def test_camera_looking_away_gives_no_hit():
    camera = PerspectiveCamera(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 10.0))
    assert project_pointer(0.0, 0.0, camera) is None


def test_tracker_retains_last_value():
    tracker = PointerTracker()
    np.testing.assert_array_equal(tracker.position, np.zeros(3))

    tracker.update(np.array([1.0, 2.0, 0.0]))
    tracker.update(None)
    np.testing.assert_array_equal(tracker.position, [1.0, 2.0, 0.0])


def test_tracker_updates_in_place():
    tracker = PointerTracker()
    ref = tracker.position
    tracker.update((0.5, -0.5, 0.0))
    assert tracker.position is ref
    np.testing.assert_array_equal(ref, [0.5, -0.5, 0.0])


def test_tracker_from_ndc_miss_retains():
    tracker = PointerTracker()
    tracker.update((2.0, 2.0, 0.0))
    looking_up = PerspectiveCamera(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 10.0))
    tracker.update_from_ndc(0.0, 0.0, looking_up)
    np.testing.assert_array_equal(tracker.position, [2.0, 2.0, 0.0])
