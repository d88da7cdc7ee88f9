# spinfield - Interactive LLG Spin Lattice Simulation
"""
SPINFIELD: A Pointer-Driven Spin Lattice
========================================

This package provides:
- A square lattice of spin sites with 4-neighbour exchange
- A simplified Landau-Lifshitz-Gilbert integrator (explicit Euler)
- A frame driver that advances the lattice once per rendered frame,
  steered by a pointer projected onto the lattice plane
- Plotly rendering of the per-site transforms

ARCHITECTURE:
-------------
    kernel/         Vector/quaternion helpers and error types
    lattice.py      Lattice Builder (sites, positions, neighbours)
    params.py       Simulation parameters and tunable constants
    field.py        Field Evaluator (external + exchange)
    integrator.py   Damped precession step, dt, transforms
    pointer.py      Camera ray -> z=0 plane intersection
    driver.py       Frame Driver (snapshot, step, emit)
    post.py         Summary metrics of a configuration
    viz/            Plotly renderer

USAGE:
------
    from spinfield import FrameDriver, SimulationParams

    driver = FrameDriver(SimulationParams(grid_size=20))
    result = driver.step(0.016, pointer=(1.0, 0.5, 0.0))
    result.transforms   # (400, 4, 4) placement matrices
"""

import logging

from .kernel import SpinfieldError, LatticeConfigError, ParameterError
from .lattice import Site, Lattice, SPACING, build_lattice
from .params import SimulationParams, from_multipliers
from .driver import FrameDriver, FrameResult

__version__ = "0.1.0"

logging.getLogger("spinfield").addHandler(logging.NullHandler())

__all__ = [
    'SpinfieldError',
    'LatticeConfigError',
    'ParameterError',
    'Site',
    'Lattice',
    'SPACING',
    'build_lattice',
    'SimulationParams',
    'from_multipliers',
    'FrameDriver',
    'FrameResult',
]
