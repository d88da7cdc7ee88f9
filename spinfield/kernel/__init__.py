# spinfield/kernel - Geometry helpers and error types
"""
KERNEL: SHARED BUILDING BLOCKS
==============================

Everything here is independent of the physics:
- vectors.py: normalization, quaternions, 4×4 placement matrices
- errors.py: exception hierarchy used across the package
"""

from .errors import SpinfieldError, LatticeConfigError, ParameterError
from .vectors import (
    REFERENCE_DIRECTION,
    normalize,
    normalize_rows,
    quaternion_from_unit_vectors,
    quaternion_to_matrix,
    compose_transform,
    rotation_matrices_from_reference,
    split_transform,
)

__all__ = [
    'SpinfieldError',
    'LatticeConfigError',
    'ParameterError',
    'REFERENCE_DIRECTION',
    'normalize',
    'normalize_rows',
    'quaternion_from_unit_vectors',
    'quaternion_to_matrix',
    'compose_transform',
    'rotation_matrices_from_reference',
    'split_transform',
]
