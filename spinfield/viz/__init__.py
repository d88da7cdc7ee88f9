# spinfield/viz - Visualization Tools
"""
VIZ: Plotly rendering of spin lattice frames.
"""

from .viz3d import (
    ARROW_LENGTH,
    ARROW_HEAD_LENGTH,
    POINTER_COLOR,
    create_spin_figure,
    create_frame_figure,
    plot_spin_lattice_3d,
    transforms_to_arrows,
)

__all__ = [
    'ARROW_LENGTH',
    'ARROW_HEAD_LENGTH',
    'POINTER_COLOR',
    'create_spin_figure',
    'create_frame_figure',
    'plot_spin_lattice_3d',
    'transforms_to_arrows',
]
