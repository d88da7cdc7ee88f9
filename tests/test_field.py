# tests/test_field.py
"""
Tests for the Field Evaluator.

The effective field has two independent parts:
- external: pointer source with 1/(1 + 5·d²) falloff, sign set by the
  inversion flag
- exchange: sum of the neighbours' SNAPSHOT directions × J × 1e6

These tests pin down magnitudes, directions and the independence of the
two terms.
"""

import numpy as np
import pytest

from spinfield.field import (
    external_field,
    exchange_field,
    effective_field,
    effective_field_batch,
    external_strength,
)
from spinfield.lattice import build_lattice, neighbor_table
from spinfield.params import SimulationParams, EXCHANGE_UNIT_SCALE, FIELD_FALLOFF


def test_external_field_points_from_pointer_to_site():
    """
    Site at (1, 0, 0), pointer at the origin:
    d² = 1, strength = H0 / (1 + 5) and the direction is +x.
    """
    params = SimulationParams(external_field_strength=6e5)
    H = external_field(np.array([1.0, 0.0, 0.0]), np.zeros(3), params)

    np.testing.assert_allclose(H, [1e5, 0.0, 0.0])
    print(f"✓ H_ext = {H}")


def test_external_strength_falloff():
    params = SimulationParams(external_field_strength=1.0)
    assert external_strength(0.0, params) == 1.0
    assert np.isclose(external_strength(2.0, params), 1.0 / (1.0 + FIELD_FALLOFF * 2.0))

    # Monotonic decrease with distance
    d2 = np.linspace(0, 50, 101)
    s = external_strength(d2, params)
    assert np.all(np.diff(s) < 0)


def test_external_field_zero_offset_is_zero():
    """Pointer exactly on a site: direction undefined, so the term is zero."""
    params = SimulationParams()
    p = np.array([0.25, -0.25, 0.0])
    H = external_field(p, p.copy(), params)

    np.testing.assert_array_equal(H, np.zeros(3))
    assert np.all(np.isfinite(H))


def test_inversion_flips_external_term_only():
    """
    WHAT IS THIS TEST?
    ==================
    Toggling is_field_inverted must negate the external term and leave the
    exchange term untouched. Compare Field Evaluator output for identical
    inputs with the flag off and on.
    """
    lattice = build_lattice(3)
    rng = np.random.default_rng(0)
    snapshot = rng.normal(size=(len(lattice), 3))
    snapshot /= np.linalg.norm(snapshot, axis=1, keepdims=True)
    pointer = np.array([0.1, 0.2, 0.0])
    site = lattice.site_at(1, 1)

    normal = SimulationParams()
    inverted = SimulationParams(is_field_inverted=True)

    ext_n = external_field(site.position, pointer, normal)
    ext_i = external_field(site.position, pointer, inverted)
    exch_n = exchange_field(site.neighbors, snapshot, normal)
    exch_i = exchange_field(site.neighbors, snapshot, inverted)
    eff_n = effective_field(site.position, pointer, site.neighbors, snapshot, normal)
    eff_i = effective_field(site.position, pointer, site.neighbors, snapshot, inverted)

    np.testing.assert_allclose(ext_i, -ext_n)
    np.testing.assert_array_equal(exch_i, exch_n)
    np.testing.assert_allclose(eff_n - exch_n, -(eff_i - exch_i))

    print("✓ Inversion flag flips only the external term")


def test_exchange_field_sums_snapshot_neighbors():
    """Two neighbours pointing +z give 2 × J × 1e6 along z."""
    params = SimulationParams(exchange_strength=1.5e-10)
    snapshot = np.array([
        [0.0, 0.0, 1.0],
        [0.0, 0.0, 1.0],
        [1.0, 0.0, 0.0],
    ])
    H = exchange_field([0, 1], snapshot, params)

    np.testing.assert_allclose(H, [0.0, 0.0, 2 * 1.5e-10 * EXCHANGE_UNIT_SCALE])


def test_exchange_field_no_neighbors():
    H = exchange_field((), np.zeros((1, 3)), SimulationParams())
    np.testing.assert_array_equal(H, np.zeros(3))


def test_exchange_reads_only_given_snapshot():
    """Changing a non-neighbour row of the snapshot has no effect."""
    params = SimulationParams()
    snapshot = np.tile([0.0, 0.0, 1.0], (4, 1))
    before = exchange_field([1, 2], snapshot, params)
    snapshot[3] = [1.0, 0.0, 0.0]
    after = exchange_field([1, 2], snapshot, params)
    np.testing.assert_array_equal(before, after)


def test_effective_field_is_sum_of_terms():
    lattice = build_lattice(2)
    snapshot = np.tile([0.0, 0.0, 1.0], (4, 1))
    params = SimulationParams()
    pointer = np.array([3.0, -1.0, 0.0])
    site = lattice[0]

    total = effective_field(site.position, pointer, site.neighbors, snapshot, params)
    parts = (external_field(site.position, pointer, params)
             + exchange_field(site.neighbors, snapshot, params))
    np.testing.assert_allclose(total, parts)


@pytest.mark.parametrize("inverted", [False, True])
def test_batch_matches_per_site(inverted):
    """The numpy batch evaluator gives the same field at every site."""
    lattice = build_lattice(5)
    index, mask = neighbor_table(lattice)
    rng = np.random.default_rng(42)
    snapshot = rng.normal(size=(len(lattice), 3))
    snapshot /= np.linalg.norm(snapshot, axis=1, keepdims=True)
    # Pointer exactly on one site exercises the zero-offset branch too
    pointer = lattice.site_at(2, 3).position
    params = SimulationParams(is_field_inverted=inverted)

    batch = effective_field_batch(lattice.positions, pointer, snapshot, index, mask, params)
    for site in lattice:
        single = effective_field(site.position, pointer, site.neighbors, snapshot, params)
        np.testing.assert_allclose(batch[site.index], single, rtol=1e-12, atol=1e-12)


def test_field_finite_for_far_pointer():
    params = SimulationParams()
    H = external_field(np.zeros(3), np.array([1e6, -1e6, 0.0]), params)
    assert np.all(np.isfinite(H))
    assert np.linalg.norm(H) < 1e-6
