# spinfield/field.py
"""
FIELD EVALUATOR: Effective Field per Site
=========================================

PURPOSE:
--------
Compute the effective field H_eff that drives each spin:

    H_eff = H_ext + H_exch

EXTERNAL TERM (pointer source):
-------------------------------
    r        = site_position - pointer
    d²       = |r|²
    strength = H0 / (1 + FIELD_FALLOFF · d²)
    H_ext    = ± strength · r / |r|        (minus when the field is inverted)

The 1 + 5·d² denominator falls off faster than 1/d² at range but stays
bounded at the source, so a pointer sitting on a site gives a finite field.
When r = 0 the direction is undefined and H_ext is the zero vector.

EXCHANGE TERM (nearest neighbours):
-----------------------------------
    H_exch = J · EXCHANGE_UNIT_SCALE · Σ_{j ∈ nbrs(i)} m_j(snapshot)

The neighbour directions come from the FRAME SNAPSHOT taken before any site
was updated this step (Jacobi-style). A site must never see a neighbour's
value computed earlier in the same step, otherwise the result would depend
on iteration order.

Both a per-site version (effective_field) and an all-sites numpy version
(effective_field_batch) are provided. They produce identical results.
"""

import numpy as np
from typing import Sequence

from .params import SimulationParams, FIELD_FALLOFF
from .kernel.vectors import normalize, normalize_rows


def external_strength(dist_sq, params: SimulationParams):
    """Scalar falloff H0 / (1 + FIELD_FALLOFF·d²); works on floats or arrays."""
    return params.external_field_strength / (1.0 + FIELD_FALLOFF * dist_sq)


def external_field(
    position: np.ndarray,
    pointer: np.ndarray,
    params: SimulationParams,
) -> np.ndarray:
    """
    Field from the pointer source at one site.

    Parameters:
    -----------
    position : np.ndarray, shape (3,)
        Site position
    pointer : np.ndarray, shape (3,)
        Current pointer target on the z=0 plane
    params : SimulationParams

    Returns:
    --------
    np.ndarray, shape (3,)
        H_ext; zero when the site coincides with the pointer
    """
    offset = np.asarray(position, dtype=float) - np.asarray(pointer, dtype=float)
    strength = external_strength(float(np.dot(offset, offset)), params)
    if params.is_field_inverted:
        strength = -strength
    return normalize(offset) * strength


def exchange_field(
    neighbors: Sequence[int],
    snapshot: np.ndarray,
    params: SimulationParams,
) -> np.ndarray:
    """
    Sum of the neighbours' snapshot directions, scaled by the exchange strength.

    Parameters:
    -----------
    neighbors : Sequence[int]
        Indices into snapshot
    snapshot : np.ndarray, shape (N, 3)
        Directions at the start of the step (read-only here)
    """
    total = np.zeros(3)
    for j in neighbors:
        total += snapshot[j]
    return total * params.exchange_scale


def effective_field(
    position: np.ndarray,
    pointer: np.ndarray,
    neighbors: Sequence[int],
    snapshot: np.ndarray,
    params: SimulationParams,
) -> np.ndarray:
    """H_eff = H_ext + H_exch for a single site."""
    return external_field(position, pointer, params) + exchange_field(neighbors, snapshot, params)


def external_field_batch(
    positions: np.ndarray,
    pointer: np.ndarray,
    params: SimulationParams,
) -> np.ndarray:
    """external_field for every row of an (N, 3) position array."""
    offsets = np.asarray(positions, dtype=float) - np.asarray(pointer, dtype=float)
    strength = external_strength(np.einsum('ij,ij->i', offsets, offsets), params)
    if params.is_field_inverted:
        strength = -strength
    return normalize_rows(offsets) * strength[:, None]


def exchange_field_batch(
    snapshot: np.ndarray,
    neighbor_index: np.ndarray,
    neighbor_mask: np.ndarray,
    params: SimulationParams,
) -> np.ndarray:
    """
    exchange_field for every site at once.

    neighbor_index / neighbor_mask come from lattice.neighbor_table(); masked
    slots contribute nothing.
    """
    gathered = snapshot[neighbor_index] * neighbor_mask[:, :, None]
    return gathered.sum(axis=1) * params.exchange_scale


def effective_field_batch(
    positions: np.ndarray,
    pointer: np.ndarray,
    snapshot: np.ndarray,
    neighbor_index: np.ndarray,
    neighbor_mask: np.ndarray,
    params: SimulationParams,
) -> np.ndarray:
    """H_eff for all N sites, shape (N, 3)."""
    return (external_field_batch(positions, pointer, params)
            + exchange_field_batch(snapshot, neighbor_index, neighbor_mask, params))
