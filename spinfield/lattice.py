# spinfield/lattice.py
"""
LATTICE BUILDER: Square Grid of Spin Sites
==========================================

PURPOSE:
--------
Build the fixed topology the simulation runs on: S×S sites on a centered
square grid in the z=0 plane, each with its 4-neighbour adjacency.

    row 0   o---o---o          index = row * S + col
            |   |   |
    row 1   o---o---o          position = (row*spacing - offset,
            |   |   |                      col*spacing - offset, 0)
    row 2   o---o---o
                               offset = (S - 1) * spacing / 2

Sites carry ONLY geometry (index, grid coordinates, position, neighbours).
Spin directions and transforms change every frame, so they live in the
FrameDriver's buffers instead. That keeps the lattice immutable for its
whole lifetime: a grid-size change builds a brand-new Lattice.

NEIGHBOURS:
-----------
Up to four per site, in the order north (row-1), south (row+1),
west (col-1), east (col+1), skipping any that fall off the grid:

    corner sites    2 neighbours
    edge sites      3 neighbours
    interior sites  4 neighbours

No periodic wrap-around.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from .kernel.errors import LatticeConfigError

logger = logging.getLogger("spinfield")

SPACING = 0.5  # distance between adjacent sites (scene units)


@dataclass(frozen=True)
class Site:
    """
    A single lattice point.

    Parameters:
    -----------
    index : int
        Row-major index (row * S + col), also the row in direction buffers
    row, col : int
        Integer grid coordinates
    position : Tuple[float, float, float]
        Fixed spatial position on the z=0 plane
    neighbors : Tuple[int, ...]
        Indices of the 2-4 adjacent sites

    Notes:
    ------
    - frozen=True: positions and adjacency can't be modified after build
    """
    index: int
    row: int
    col: int
    position: Tuple[float, float, float]
    neighbors: Tuple[int, ...]


class Lattice:
    """An ordered, row-major collection of S² sites."""

    def __init__(self, grid_size: int, spacing: float, sites: List[Site]):
        self.grid_size = grid_size
        self.spacing = spacing
        self.sites: Tuple[Site, ...] = tuple(sites)
        self.positions = np.array([s.position for s in self.sites], dtype=float).reshape(-1, 3)
        self.positions.setflags(write=False)

    def __len__(self) -> int:
        return len(self.sites)

    def __iter__(self) -> Iterator[Site]:
        return iter(self.sites)

    def __getitem__(self, index: int) -> Site:
        return self.sites[index]

    def site_at(self, row: int, col: int) -> Site:
        return self.sites[site_index(row, col, self.grid_size)]

    def neighbor_counts(self) -> np.ndarray:
        return np.array([len(s.neighbors) for s in self.sites], dtype=int)

    def bonds(self) -> List[Tuple[int, int]]:
        """Each nearest-neighbour pair once, as (i, j) with i < j."""
        return [(s.index, j) for s in self.sites for j in s.neighbors if s.index < j]

    def __repr__(self) -> str:
        return f"Lattice(grid_size={self.grid_size}, spacing={self.spacing}, sites={len(self)})"


def site_index(row: int, col: int, grid_size: int) -> int:
    """Convert grid coordinates to the row-major site index."""
    return row * grid_size + col


def _neighbors_of(row: int, col: int, grid_size: int) -> Tuple[int, ...]:
    neighbors = []
    if row > 0:
        neighbors.append(site_index(row - 1, col, grid_size))
    if row < grid_size - 1:
        neighbors.append(site_index(row + 1, col, grid_size))
    if col > 0:
        neighbors.append(site_index(row, col - 1, grid_size))
    if col < grid_size - 1:
        neighbors.append(site_index(row, col + 1, grid_size))
    return tuple(neighbors)


def _validate(grid_size, spacing) -> None:
    # bool is an int subclass; True would otherwise build a 1×1 grid
    if isinstance(grid_size, bool) or not isinstance(grid_size, (int, np.integer)):
        raise LatticeConfigError(
            f"grid_size must be an integer, got {type(grid_size).__name__} ({grid_size!r})"
        )
    if grid_size < 1:
        raise LatticeConfigError(f"grid_size must be >= 1, got {grid_size}")
    if not isinstance(spacing, (int, float, np.floating)) or not math.isfinite(spacing) or spacing <= 0:
        raise LatticeConfigError(f"spacing must be a positive finite number, got {spacing!r}")


def build_lattice(grid_size: int, spacing: float = SPACING) -> Lattice:
    """
    Construct the S×S lattice.

    Parameters:
    -----------
    grid_size : int
        Sites per side (S >= 1)
    spacing : float
        Distance between adjacent sites

    Returns:
    --------
    Lattice
        Fresh lattice; nothing is cached between calls

    Raises:
    -------
    LatticeConfigError
        If grid_size is not a positive integer or spacing is not a
        positive finite number
    """
    try:
        _validate(grid_size, spacing)
    except LatticeConfigError as e:
        logger.error("Refusing to build lattice: %s", e)
        raise

    grid_size = int(grid_size)
    spacing = float(spacing)
    offset = (grid_size - 1) * spacing / 2

    sites = []
    for row in range(grid_size):
        for col in range(grid_size):
            sites.append(Site(
                index=site_index(row, col, grid_size),
                row=row,
                col=col,
                position=(row * spacing - offset, col * spacing - offset, 0.0),
                neighbors=_neighbors_of(row, col, grid_size),
            ))

    logger.info("Built %dx%d lattice (%d sites, spacing=%g)", grid_size, grid_size, len(sites), spacing)
    return Lattice(grid_size, spacing, sites)


def neighbor_table(lattice: Lattice) -> Tuple[np.ndarray, np.ndarray]:
    """
    Padded neighbour index table for vectorized field evaluation.

    Returns:
    --------
    index : np.ndarray, shape (N, 4), int
        Neighbour indices; unused slots hold 0
    mask : np.ndarray, shape (N, 4), bool
        True where the slot holds a real neighbour
    """
    n = len(lattice)
    index = np.zeros((n, 4), dtype=int)
    mask = np.zeros((n, 4), dtype=bool)
    for site in lattice:
        k = len(site.neighbors)
        index[site.index, :k] = site.neighbors
        mask[site.index, :k] = True
    return index, mask
