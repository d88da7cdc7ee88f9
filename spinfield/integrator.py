# spinfield/integrator.py
"""
INTEGRATOR: Explicit Euler Step of the Damped Precession Law
============================================================

PURPOSE:
--------
Advance one spin m (unit vector) under its effective field H by one
forward-Euler step of the Landau-Lifshitz-Gilbert equation in its explicit
(Landau-Lifshitz) form:

    gamma_eff = gamma / (1 + alpha²)

    dm/dt = -gamma_eff · (m × H)                 precession
            -gamma_eff · alpha · m × (m × H)     damping

    m_new = normalize(m + dm/dt · dt)

The precession term rotates m around H; the damping term pulls m toward H.
Neither term has a component along m, so |m| is preserved to first order;
the explicit step still drifts at second order, hence the renormalization.

DEGENERATE CASE:
----------------
If m ∥ H (including H = 0) both cross products vanish and m is unchanged.
This is the fixed point of the dynamics, not an error.

TRANSFORMS:
-----------
After the step each site gets a 4×4 placement matrix: its fixed position
composed with the rotation taking (0, 0, 1) onto m_new, unit scale.
"""

import numpy as np

from .params import SimulationParams, MAX_FRAME_DELTA
from .kernel.vectors import (
    REFERENCE_DIRECTION,
    normalize,
    normalize_rows,
    quaternion_from_unit_vectors,
    compose_transform,
    rotation_matrices_from_reference,
)


def frame_dt(delta: float, params: SimulationParams) -> float:
    """
    Simulation time step for one rendered frame.

    dt = min(delta, MAX_FRAME_DELTA) · time_step_scale

    The clamp caps the step after slow frames or a tab switch. A negative
    delta (clock going backwards) is treated as zero.
    """
    return max(0.0, min(float(delta), MAX_FRAME_DELTA)) * params.time_step_scale


def llg_rhs(m: np.ndarray, H: np.ndarray, gamma: float, alpha: float) -> np.ndarray:
    """
    Right-hand side dm/dt of the damped precession equation.

    Parameters:
    -----------
    m : np.ndarray, shape (3,)
        Current spin direction (unit vector)
    H : np.ndarray, shape (3,)
        Effective field
    gamma : float
        Gyromagnetic-ratio-like coefficient
    alpha : float
        Gilbert damping

    Returns:
    --------
    np.ndarray, shape (3,)
    """
    gamma_eff = gamma / (1.0 + alpha * alpha)
    m_x_H = np.cross(m, H)
    precession = -gamma_eff * m_x_H
    damping = -gamma_eff * alpha * np.cross(m, m_x_H)
    return precession + damping


def llg_step(m: np.ndarray, H: np.ndarray, params: SimulationParams, dt: float) -> np.ndarray:
    """One explicit Euler step followed by renormalization."""
    m = np.asarray(m, dtype=float)
    dmdt = llg_rhs(m, np.asarray(H, dtype=float), params.gamma, params.alpha)
    return normalize(m + dmdt * dt)


def site_transform(position: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """4×4 placement of an arrow at position pointing along direction."""
    q = quaternion_from_unit_vectors(REFERENCE_DIRECTION, direction)
    return compose_transform(position, q, 1.0)


def llg_rhs_batch(M: np.ndarray, H: np.ndarray, gamma: float, alpha: float) -> np.ndarray:
    """llg_rhs applied row-wise to (N, 3) arrays."""
    gamma_eff = gamma / (1.0 + alpha * alpha)
    m_x_H = np.cross(M, H)
    return -gamma_eff * m_x_H - gamma_eff * alpha * np.cross(M, m_x_H)


def llg_step_batch(
    M: np.ndarray,
    H: np.ndarray,
    params: SimulationParams,
    dt: float,
    out: np.ndarray = None,
) -> np.ndarray:
    """
    llg_step for all sites.

    If out is given the result is written into it (the driver passes its back
    buffer here); out must not alias M.
    """
    dmdt = llg_rhs_batch(M, H, params.gamma, params.alpha)
    result = normalize_rows(M + dmdt * dt)
    if out is None:
        return result
    out[...] = result
    return out


def transforms_batch(positions: np.ndarray, directions: np.ndarray, out: np.ndarray = None) -> np.ndarray:
    """
    site_transform for all sites.

    Returns:
    --------
    np.ndarray, shape (N, 4, 4)
    """
    n = positions.shape[0]
    if out is None:
        out = np.zeros((n, 4, 4))
    out[:, :3, :3] = rotation_matrices_from_reference(directions)
    out[:, :3, 3] = positions
    out[:, 3, :3] = 0.0
    out[:, 3, 3] = 1.0
    return out
