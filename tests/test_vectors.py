# tests/test_vectors.py
"""Tests for the kernel vector/quaternion helpers."""

import numpy as np
import pytest

from spinfield.kernel.vectors import (
    REFERENCE_DIRECTION,
    normalize,
    normalize_rows,
    quaternion_from_unit_vectors,
    quaternion_to_matrix,
    compose_transform,
    rotation_matrices_from_reference,
    split_transform,
)


def test_normalize_unit_and_zero():
    np.testing.assert_allclose(normalize([3.0, 4.0, 0.0]), [0.6, 0.8, 0.0])
    np.testing.assert_array_equal(normalize([0.0, 0.0, 0.0]), np.zeros(3))


def test_normalize_rows_keeps_zero_rows():
    V = np.array([[0.0, 0.0, 2.0], [0.0, 0.0, 0.0], [1.0, 1.0, 0.0]])
    out = normalize_rows(V)
    np.testing.assert_allclose(out[0], [0.0, 0.0, 1.0])
    np.testing.assert_array_equal(out[1], np.zeros(3))
    np.testing.assert_allclose(np.linalg.norm(out[2]), 1.0)


@pytest.mark.parametrize("b", [
    [1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [0.0, 0.0, 1.0],
    [0.0, 0.0, -1.0],
    [1 / np.sqrt(3), -1 / np.sqrt(3), 1 / np.sqrt(3)],
])
def test_quaternion_maps_a_onto_b(b):
    b = np.array(b)
    q = quaternion_from_unit_vectors(REFERENCE_DIRECTION, b)
    assert np.isclose(np.linalg.norm(q), 1.0)
    R = quaternion_to_matrix(q)
    np.testing.assert_allclose(R @ REFERENCE_DIRECTION, b, atol=1e-12)


def test_quaternion_antiparallel_general_axis():
    a = np.array([1.0, 0.0, 0.0])
    R = quaternion_to_matrix(quaternion_from_unit_vectors(a, -a))
    np.testing.assert_allclose(R @ a, -a, atol=1e-12)
    np.testing.assert_allclose(R.T @ R, np.eye(3), atol=1e-12)


def test_compose_and_split_round_trip():
    d = normalize([0.2, -0.5, 0.8])
    p = np.array([1.0, 2.0, 0.0])
    M = compose_transform(p, quaternion_from_unit_vectors(REFERENCE_DIRECTION, d), 2.0)

    np.testing.assert_allclose(M @ [0.0, 0.0, 0.0, 1.0], [1.0, 2.0, 0.0, 1.0])
    pos, axis = split_transform(M)
    np.testing.assert_allclose(pos, p)
    np.testing.assert_allclose(axis, d, atol=1e-12)


def test_batch_rotations_match_single():
    rng = np.random.default_rng(0)
    D = rng.normal(size=(20, 3))
    D /= np.linalg.norm(D, axis=1, keepdims=True)
    D[3] = [0.0, 0.0, -1.0]

    R = rotation_matrices_from_reference(D)
    for i in range(20):
        expected = quaternion_to_matrix(quaternion_from_unit_vectors(REFERENCE_DIRECTION, D[i]))
        np.testing.assert_allclose(R[i], expected, atol=1e-12)
