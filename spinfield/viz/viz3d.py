# spinfield/viz/viz3d.py
"""
3D VISUALIZATION: Interactive Spin Lattice Viewer
=================================================

PURPOSE:
--------
Turn the driver's per-frame output into an interactive Plotly figure:
- one arrow per site (shaft + cone head), centered on the site
- shafts coloured by the out-of-plane component m_z
- optional marker at the pointer target

This module is the renderer side of the transform boundary. The core emits
an ordered batch of 4×4 placement matrices; transforms_to_arrows() reads the
arrow base point and axis back out of them, which is all Plotly needs.

ARROW GEOMETRY:
---------------
    total length   ARROW_LENGTH      = 0.8 · spacing
    head length    ARROW_HEAD_LENGTH = 0.3 · spacing

    tail = p - axis · L/2       tip = p + axis · L/2
"""

import os
import numpy as np
from typing import Optional, Tuple
import plotly.graph_objects as go

from ..lattice import SPACING

ARROW_LENGTH = SPACING * 0.8
ARROW_HEAD_LENGTH = SPACING * 0.3
POINTER_COLOR = 'orange'


def transforms_to_arrows(transforms: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Extract (positions, axes) from an (N, 4, 4) transform batch.

    The arrow axis is the image of +Z, i.e. the third column of the
    rotation block.
    """
    T = np.asarray(transforms, dtype=float)
    positions = T[:, :3, 3]
    axes = T[:, :3, 2]
    norms = np.linalg.norm(axes, axis=1, keepdims=True)
    axes = axes / np.where(norms == 0.0, 1.0, norms)
    return positions, axes


def create_spin_figure(
    positions: np.ndarray,
    directions: np.ndarray,
    pointer: Optional[np.ndarray] = None,
    title: str = "Spin Lattice",
    arrow_length: float = ARROW_LENGTH,
    head_length: float = ARROW_HEAD_LENGTH,
    colorscale: str = 'RdBu',
    show_pointer: bool = True,
    height: Optional[int] = None,
) -> go.Figure:
    """
    Create a Plotly figure of the spin lattice.

    Parameters:
    -----------
    positions : np.ndarray, shape (N, 3)
        Site positions
    directions : np.ndarray, shape (N, 3)
        Unit spin vectors
    pointer : Optional[np.ndarray]
        Pointer target to mark on the plane
    title : str
        Plot title
    arrow_length, head_length : float
        Arrow dimensions in scene units
    colorscale : str
        Plotly colorscale for m_z (-1 .. +1)
    show_pointer : bool
        Whether to draw the pointer marker
    height : Optional[int]
        Figure height in pixels

    Returns:
    --------
    go.Figure
    """
    P = np.asarray(positions, dtype=float).reshape(-1, 3)
    D = np.asarray(directions, dtype=float).reshape(-1, 3)
    fig = go.Figure()

    half = arrow_length / 2
    tails = P - D * half
    tips = P + D * half
    head_bases = tips - D * head_length

    # =========================================================================
    # SHAFTS
    # =========================================================================

    # Segments separated by None; per-vertex colours need the same length
    shaft_x, shaft_y, shaft_z, shaft_c = [], [], [], []
    for tail, base, mz in zip(tails, head_bases, D[:, 2]):
        shaft_x.extend([tail[0], base[0], None])
        shaft_y.extend([tail[1], base[1], None])
        shaft_z.extend([tail[2], base[2], None])
        shaft_c.extend([mz, mz, mz])

    fig.add_trace(go.Scatter3d(
        x=shaft_x, y=shaft_y, z=shaft_z,
        mode='lines',
        line=dict(color=shaft_c, colorscale=colorscale, cmin=-1.0, cmax=1.0, width=5),
        name='Spins',
        hoverinfo='skip',
    ))

    # =========================================================================
    # HEADS
    # =========================================================================

    if len(P):
        hover = [
            f"Site {i}<br>m = ({d[0]:.3f}, {d[1]:.3f}, {d[2]:.3f})"
            for i, d in enumerate(D)
        ]
        fig.add_trace(go.Cone(
            x=tips[:, 0], y=tips[:, 1], z=tips[:, 2],
            u=D[:, 0], v=D[:, 1], w=D[:, 2],
            anchor='tip',
            sizemode='absolute',
            sizeref=head_length,
            colorscale=[[0, 'black'], [1, 'black']],
            showscale=False,
            name='Heads',
            hovertext=hover,
            hoverinfo='text',
        ))

    # =========================================================================
    # POINTER
    # =========================================================================

    if show_pointer and pointer is not None:
        px, py, pz = np.asarray(pointer, dtype=float)
        fig.add_trace(go.Scatter3d(
            x=[px], y=[py], z=[pz],
            mode='markers',
            marker=dict(size=6, color=POINTER_COLOR, line=dict(width=1, color='black')),
            name='Pointer',
            hovertext=f"Pointer ({px:.2f}, {py:.2f})",
            hoverinfo='text',
        ))

    # =========================================================================
    # LAYOUT
    # =========================================================================

    if len(P):
        lo = P.min(axis=0) - arrow_length
        hi = P.max(axis=0) + arrow_length
    else:
        lo = np.full(3, -1.0)
        hi = np.full(3, 1.0)
    span = max(hi[0] - lo[0], hi[1] - lo[1], 1.0)
    x_mid = (hi[0] + lo[0]) / 2
    y_mid = (hi[1] + lo[1]) / 2

    fig.update_layout(
        title=dict(text=title, font=dict(size=16)),
        scene=dict(
            xaxis=dict(title='X', range=[x_mid - span / 2, x_mid + span / 2]),
            yaxis=dict(title='Y', range=[y_mid - span / 2, y_mid + span / 2]),
            zaxis=dict(title='Z', range=[-span / 2, span / 2]),
            aspectmode='cube',
            camera=dict(eye=dict(x=0.0, y=-0.8, z=1.6)),
        ),
        showlegend=False,
        margin=dict(l=0, r=0, t=40, b=0),
    )
    if height is not None:
        fig.update_layout(height=height)

    return fig


def create_frame_figure(result, **kwargs) -> go.Figure:
    """create_spin_figure from a FrameResult's transform batch."""
    positions, axes = transforms_to_arrows(result.transforms)
    return create_spin_figure(positions, axes, pointer=result.pointer, **kwargs)


def plot_spin_lattice_3d(
    positions: np.ndarray,
    directions: np.ndarray,
    pointer: Optional[np.ndarray] = None,
    outpath: Optional[str] = None,
    show: bool = True,
    **kwargs
) -> go.Figure:
    """
    Create and optionally display/save the spin lattice figure.

    Parameters:
    -----------
    positions, directions, pointer:
        See create_spin_figure()
    outpath : Optional[str]
        If provided, save as HTML file
    show : bool
        Whether to display the figure (default: True)
    """
    fig = create_spin_figure(positions, directions, pointer=pointer, **kwargs)

    if outpath:
        os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
        fig.write_html(outpath)
        print(f"3D visualization saved to: {outpath}")

    if show:
        fig.show()

    return fig
