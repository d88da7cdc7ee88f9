# tests/test_lattice.py
"""
Tests for the Lattice Builder.

WHAT WE CHECK:
--------------
1. Site count: S×S sites for grid size S
2. Neighbour counts: corners 2, edges 3, interior 4
3. Symmetry: j in nbrs(i)  <=>  i in nbrs(j)
4. Geometry: centered grid on z=0 with the documented formula
5. Idempotence: two builds with the same S are identical
6. Rejection: invalid grid sizes raise LatticeConfigError
"""

import numpy as np
import pytest

from spinfield.lattice import build_lattice, neighbor_table, site_index, SPACING
from spinfield.kernel.errors import LatticeConfigError, SpinfieldError


@pytest.mark.parametrize("S", [1, 2, 3, 5, 20])
def test_site_count(S):
    """gridSize = N produces exactly N² sites, indexed row-major."""
    lattice = build_lattice(S)

    assert len(lattice) == S * S
    assert lattice.positions.shape == (S * S, 3)
    for site in lattice:
        assert site.index == site.row * S + site.col

    print(f"✓ {S}x{S} lattice has {S*S} sites")


def test_neighbor_counts_by_location():
    """
    WHAT IS THIS TEST?
    ==================
    On a 5×5 grid:
    - the 4 corners have 2 neighbours
    - the 12 non-corner edge sites have 3
    - the 9 interior sites have 4
    """
    S = 5
    lattice = build_lattice(S)

    for site in lattice:
        on_row_edge = site.row in (0, S - 1)
        on_col_edge = site.col in (0, S - 1)
        if on_row_edge and on_col_edge:
            expected = 2
        elif on_row_edge or on_col_edge:
            expected = 3
        else:
            expected = 4
        assert len(site.neighbors) == expected, \
            f"Site ({site.row}, {site.col}) has {len(site.neighbors)} neighbours, expected {expected}"

    counts = lattice.neighbor_counts()
    assert np.sum(counts == 2) == 4
    assert np.sum(counts == 3) == 4 * (S - 2)
    assert np.sum(counts == 4) == (S - 2) ** 2

    print("✓ Corner/edge/interior neighbour counts are correct")


@pytest.mark.parametrize("S", [1, 2, 4, 7])
def test_neighbors_symmetric_and_in_bounds(S):
    """If B is a neighbour of A then A is a neighbour of B, and all indices exist."""
    lattice = build_lattice(S)
    n = len(lattice)

    for site in lattice:
        assert len(set(site.neighbors)) == len(site.neighbors)
        assert site.index not in site.neighbors
        for j in site.neighbors:
            assert 0 <= j < n
            assert site.index in lattice[j].neighbors


def test_neighbors_are_adjacent_grid_points():
    """Every neighbour is exactly one spacing away."""
    lattice = build_lattice(4, spacing=0.5)
    for site in lattice:
        for j in site.neighbors:
            d = np.linalg.norm(lattice.positions[j] - lattice.positions[site.index])
            assert np.isclose(d, 0.5)


def test_positions_follow_centered_formula():
    """
    position(row, col) = (row*spacing - offset, col*spacing - offset, 0)
    offset = (S - 1) * spacing / 2

    For S=3, spacing=0.5: offset = 0.5.
    """
    lattice = build_lattice(3, spacing=0.5)

    np.testing.assert_allclose(lattice.site_at(0, 0).position, (-0.5, -0.5, 0.0))
    np.testing.assert_allclose(lattice.site_at(2, 1).position, (0.5, 0.0, 0.0))
    np.testing.assert_allclose(lattice.site_at(1, 1).position, (0.0, 0.0, 0.0))

    # Centered and flat
    np.testing.assert_allclose(lattice.positions.mean(axis=0), 0.0, atol=1e-12)
    assert np.all(lattice.positions[:, 2] == 0.0)


def test_default_spacing():
    lattice = build_lattice(2)
    assert lattice.spacing == SPACING
    np.testing.assert_allclose(lattice.site_at(1, 1).position, (SPACING / 2, SPACING / 2, 0.0))


def test_single_site_has_no_neighbors():
    lattice = build_lattice(1)
    assert len(lattice) == 1
    assert lattice[0].neighbors == ()
    np.testing.assert_allclose(lattice[0].position, (0.0, 0.0, 0.0))
    assert lattice.bonds() == []


def test_rebuild_is_idempotent():
    """
    WHAT IS THIS TEST?
    ==================
    Building twice with the same grid size must give identical positions and
    neighbour lists. A different size in between must not leak into the
    second build.
    """
    first = build_lattice(6)
    build_lattice(3)
    second = build_lattice(6)

    np.testing.assert_array_equal(first.positions, second.positions)
    assert [s.neighbors for s in first] == [s.neighbors for s in second]
    assert first is not second

    print("✓ Rebuilding the lattice is idempotent")


def test_sites_are_immutable():
    lattice = build_lattice(2)
    with pytest.raises(Exception):
        lattice[0].position = (9.0, 9.0, 9.0)
    with pytest.raises(ValueError):
        lattice.positions[0, 0] = 9.0


@pytest.mark.parametrize("bad_size", [0, -1, -20, 2.5, "4", None, True])
def test_invalid_grid_size_rejected(bad_size):
    """Negative, zero or non-integer sizes are refused, not silently built."""
    with pytest.raises(LatticeConfigError):
        build_lattice(bad_size)


@pytest.mark.parametrize("bad_spacing", [0.0, -0.5, float('nan'), float('inf')])
def test_invalid_spacing_rejected(bad_spacing):
    with pytest.raises(LatticeConfigError):
        build_lattice(3, spacing=bad_spacing)


def test_config_error_hierarchy():
    """LatticeConfigError is both a SpinfieldError and a ValueError."""
    with pytest.raises(ValueError):
        build_lattice(0)
    with pytest.raises(SpinfieldError):
        build_lattice(-5)


def test_numpy_integer_grid_size_accepted():
    lattice = build_lattice(np.int64(3))
    assert len(lattice) == 9
    assert isinstance(lattice.grid_size, int)


def test_neighbor_table_matches_lists():
    lattice = build_lattice(4)
    index, mask = neighbor_table(lattice)

    assert index.shape == (16, 4)
    np.testing.assert_array_equal(mask.sum(axis=1), lattice.neighbor_counts())
    for site in lattice:
        assert tuple(index[site.index][mask[site.index]]) == site.neighbors


def test_bonds_counted_once():
    """An S×S open grid has 2·S·(S-1) bonds."""
    S = 5
    bonds = build_lattice(S).bonds()
    assert len(bonds) == 2 * S * (S - 1)
    assert all(i < j for i, j in bonds)


def test_site_index_helper():
    assert site_index(0, 0, 5) == 0
    assert site_index(2, 3, 5) == 13
