# spinfield/post.py
"""
Post-processing of spin configurations.

Summary numbers for the metrics panel and the API: net magnetization,
out-of-plane component, how far the buffers drifted from unit length, and
how well neighbouring spins are aligned.
"""

import numpy as np
from typing import Any, Dict, Optional

from .lattice import Lattice


def mean_magnetization(directions: np.ndarray) -> np.ndarray:
    """Average spin vector <m>; zero for an empty lattice."""
    directions = np.asarray(directions, dtype=float)
    if directions.shape[0] == 0:
        return np.zeros(3)
    return directions.mean(axis=0)


def max_norm_error(directions: np.ndarray) -> float:
    """max_i | |m_i| - 1 |"""
    directions = np.asarray(directions, dtype=float)
    if directions.shape[0] == 0:
        return 0.0
    return float(np.max(np.abs(np.linalg.norm(directions, axis=1) - 1.0)))


def neighbor_alignment(lattice: Lattice, directions: np.ndarray) -> float:
    """
    Mean m_i · m_j over all nearest-neighbour bonds.

    1.0 for a uniform state, -1.0 for a perfect checkerboard. A 1×1
    lattice has no bonds and reports 1.0.
    """
    bonds = lattice.bonds()
    if not bonds:
        return 1.0
    i, j = np.array(bonds).T
    return float(np.mean(np.einsum('ij,ij->i', directions[i], directions[j])))


def compute_metrics(
    directions: np.ndarray,
    lattice: Optional[Lattice] = None,
) -> Dict[str, Any]:
    """
    Collect the summary metrics of one frame.

    Returns:
    --------
    dict with n_sites, mean_m (list), mean_mz, abs_mean_m, max_norm_error
    and (if a lattice is given) neighbor_alignment
    """
    m = mean_magnetization(directions)
    metrics = {
        'n_sites': int(np.asarray(directions).shape[0]),
        'mean_m': [float(c) for c in m],
        'mean_mz': float(m[2]),
        'abs_mean_m': float(np.linalg.norm(m)),
        'max_norm_error': max_norm_error(directions),
    }
    if lattice is not None:
        metrics['neighbor_alignment'] = neighbor_alignment(lattice, np.asarray(directions, dtype=float))
    return metrics
