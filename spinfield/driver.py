# spinfield/driver.py
"""
FRAME DRIVER: One Simulation Step per Rendered Frame
====================================================

PURPOSE:
--------
Orchestrate the per-frame cycle:

    1. dt = min(delta, 0.03) · time_step_scale
    2. update the pointer (keep the last value when there is no hit)
    3. rebuild the lattice if grid_size changed; skip empty lattices
    4. snapshot = directions at the start of the step
    5. for every site: Field Evaluator -> Integrator -> transform
    6. emit all transforms as one batch, flag them for re-upload

DOUBLE BUFFERING:
-----------------
Directions live in two fixed (N, 3) arrays. The front buffer IS the frame
snapshot: it is only read during the step, while new directions go into
the back buffer. After the step the two are swapped. This gives the
Jacobi-style update for free (no site can observe a value written in the
same step) and avoids allocating a fresh snapshot every frame.

    step k:    front = m(k)      back <- m(k+1)      swap
    step k+1:  front = m(k+1)    back <- m(k+2)      swap

SEQUENTIAL vs VECTORIZED:
-------------------------
vectorized=True evaluates all sites at once with numpy; vectorized=False
walks the sites one by one with the per-site functions. Because both read
only the snapshot, they give the same result, and the sequential loop gives
the same result in any site order.

LIFECYCLE:
----------
The driver has no paused/running state; it advances exactly when step() is
called. Changing params.grid_size is picked up on the next step and causes a
full rebuild (directions reset to +Z). A rejected rebuild raises
LatticeConfigError and leaves the previous lattice untouched.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import numpy as np

from .lattice import Lattice, SPACING, build_lattice, neighbor_table
from .params import SimulationParams
from .pointer import PointerTracker
from .field import effective_field, effective_field_batch
from .integrator import (
    frame_dt,
    llg_step,
    llg_step_batch,
    site_transform,
    transforms_batch,
)
from .kernel.errors import ParameterError
from .kernel.vectors import REFERENCE_DIRECTION, normalize_rows

logger = logging.getLogger("spinfield")


@dataclass
class FrameResult:
    """
    Everything a renderer needs after one step.

    transforms and directions are views into the driver's buffers and are
    overwritten by the next step; call copy() to keep them.
    """
    frame: int
    dt: float
    pointer: np.ndarray
    transforms: np.ndarray   # (N, 4, 4)
    directions: np.ndarray   # (N, 3)

    def copy(self) -> "FrameResult":
        return FrameResult(
            frame=self.frame,
            dt=self.dt,
            pointer=self.pointer.copy(),
            transforms=self.transforms.copy(),
            directions=self.directions.copy(),
        )


FrameListener = Callable[[FrameResult], None]


class FrameDriver:
    """
    Owns the lattice, the direction buffers and the pointer.

    Parameters:
    -----------
    params : SimulationParams, optional
        Read on every step; may be mutated between steps
    spacing : float
        Lattice spacing used for every (re)build
    vectorized : bool
        Use the numpy batch path instead of the per-site loop

    Examples:
    ---------
    >>> driver = FrameDriver(SimulationParams(grid_size=4))
    >>> result = driver.step(0.016, pointer=(0.0, 0.0, 0.0))
    >>> result.transforms.shape
    (16, 4, 4)
    """

    def __init__(
        self,
        params: Optional[SimulationParams] = None,
        spacing: float = SPACING,
        vectorized: bool = True,
    ):
        self.params = params if params is not None else SimulationParams()
        self.spacing = spacing
        self.vectorized = vectorized
        self.pointer = PointerTracker()
        self.needs_upload = False
        self.frame_count = 0
        self.lattice: Optional[Lattice] = None
        self._listeners: List[FrameListener] = []
        self._front = np.zeros((0, 3))
        self._back = np.zeros((0, 3))
        self._transforms = np.zeros((0, 4, 4))
        self._neighbor_index = np.zeros((0, 4), dtype=int)
        self._neighbor_mask = np.zeros((0, 4), dtype=bool)
        self.rebuild()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def rebuild(self, grid_size: Optional[int] = None) -> Lattice:
        """
        Build a fresh lattice and reset every spin to +Z.

        Raises:
        -------
        LatticeConfigError
            If grid_size is invalid; the current lattice is kept
        """
        size = self.params.grid_size if grid_size is None else grid_size
        lattice = build_lattice(size, self.spacing)

        n = len(lattice)
        self.lattice = lattice
        self.params.grid_size = lattice.grid_size
        self._front = np.tile(REFERENCE_DIRECTION, (n, 1))
        self._back = np.zeros((n, 3))
        self._neighbor_index, self._neighbor_mask = neighbor_table(lattice)
        self._transforms = transforms_batch(lattice.positions, self._front)
        self.frame_count = 0
        self.needs_upload = True
        logger.info("Frame driver reset for %d sites", n)
        return lattice

    def add_listener(self, listener: FrameListener) -> None:
        """Register a callable that receives every FrameResult."""
        self._listeners.append(listener)

    def remove_listener(self, listener: FrameListener) -> None:
        self._listeners.remove(listener)

    def mark_uploaded(self) -> None:
        """Renderer acknowledgement that the current transforms were consumed."""
        self.needs_upload = False

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def n_sites(self) -> int:
        return 0 if self.lattice is None else len(self.lattice)

    @property
    def directions(self) -> np.ndarray:
        return self._front.copy()

    @property
    def transforms(self) -> np.ndarray:
        return self._transforms.copy()

    @property
    def positions(self) -> np.ndarray:
        if self.lattice is None:
            return np.zeros((0, 3))
        return self.lattice.positions

    def set_directions(self, directions: np.ndarray) -> None:
        """
        Overwrite all spins (normalized) and refresh their transforms.

        Raises ParameterError for a zero-length or non-finite row, which has
        no direction to normalize to.
        """
        directions = np.asarray(directions, dtype=float)
        if directions.shape != self._front.shape:
            raise ValueError(
                f"Expected directions of shape {self._front.shape}, got {directions.shape}"
            )
        norms = np.linalg.norm(directions, axis=1)
        bad = np.flatnonzero(~np.isfinite(norms) | (norms == 0.0))
        if bad.size:
            raise ParameterError(f"Spin directions must be finite and non-zero; bad rows: {bad.tolist()}")
        self._front[...] = normalize_rows(directions)
        transforms_batch(self.positions, self._front, out=self._transforms)
        self.needs_upload = True

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _advance_vectorized(self, pointer: np.ndarray, dt: float) -> None:
        H = effective_field_batch(
            self.lattice.positions, pointer, self._front,
            self._neighbor_index, self._neighbor_mask, self.params,
        )
        llg_step_batch(self._front, H, self.params, dt, out=self._back)

    def _check_order(self, order: Iterable[int]) -> List[int]:
        """A sequential visiting order must cover every site exactly once."""
        order = [int(i) for i in order]
        if sorted(order) != list(range(len(self.lattice))):
            raise ValueError(f"order must be a permutation of range({len(self.lattice)})")
        return order

    def _advance_sequential(self, pointer: np.ndarray, dt: float, order: Optional[Iterable[int]] = None) -> None:
        snapshot = self._front
        sites = self.lattice.sites
        for i in (range(len(sites)) if order is None else order):
            site = sites[i]
            H = effective_field(site.position, pointer, site.neighbors, snapshot, self.params)
            self._back[i] = llg_step(snapshot[i], H, self.params, dt)

    def step(self, delta: float, pointer: Optional[np.ndarray] = None, order: Optional[Iterable[int]] = None) -> Optional[FrameResult]:
        """
        Advance the simulation by one rendered frame.

        Parameters:
        -----------
        delta : float
            Wall-clock seconds since the previous frame
        pointer : np.ndarray, optional
            Pointer hit on the z=0 plane this frame; None keeps the last one
        order : Iterable[int], optional
            Site visiting order for the sequential path, a permutation of all
            site indices (the result does not depend on it)

        Returns:
        --------
        FrameResult, or None when the lattice is empty
        """
        self.params.validate()
        dt = frame_dt(delta, self.params)
        target = self.pointer.update(pointer)

        if self.lattice is None or self.params.grid_size != self.lattice.grid_size:
            self.rebuild()

        if self.lattice is None or len(self.lattice) == 0:
            return None

        if order is not None:
            order = self._check_order(order)

        if self.vectorized and order is None:
            self._advance_vectorized(target, dt)
        else:
            self._advance_sequential(target, dt, order)

        self._front, self._back = self._back, self._front

        if self.vectorized:
            transforms_batch(self.lattice.positions, self._front, out=self._transforms)
        else:
            for site in self.lattice:
                self._transforms[site.index] = site_transform(site.position, self._front[site.index])

        self.frame_count += 1
        self.needs_upload = True

        result = FrameResult(
            frame=self.frame_count,
            dt=dt,
            pointer=target.copy(),
            transforms=self._transforms,
            directions=self._front,
        )
        for listener in tuple(self._listeners):
            listener(result)

        logger.debug("Frame %d: dt=%.3e pointer=%s", self.frame_count, dt, target)
        return result

    def run(
        self,
        deltas: Iterable[float],
        pointers: Optional[Iterable[Optional[np.ndarray]]] = None,
    ) -> Optional[FrameResult]:
        """
        Step once per delta, pairing each with the matching pointer (if any).

        Returns a copy of the last FrameResult.
        """
        deltas = list(deltas)
        pointers = [None] * len(deltas) if pointers is None else list(pointers)
        if len(pointers) != len(deltas):
            raise ValueError(f"Got {len(deltas)} deltas but {len(pointers)} pointers")

        result = None
        for delta, pointer in zip(deltas, pointers):
            result = self.step(delta, pointer)
        return None if result is None else result.copy()
