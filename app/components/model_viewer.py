# app/components/model_viewer.py
"""
3D spin lattice viewer component using Plotly.
"""

import plotly.graph_objects as go
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from spinfield.driver import FrameDriver
from spinfield.viz import create_spin_figure, transforms_to_arrows


def render_3d_model(
    driver: FrameDriver,
    height: int = 600,
    show_pointer: bool = True,
    colorscale: str = 'RdBu',
) -> go.Figure:
    """
    Create a 3D visualization of the driver's current frame.

    Arrows are read back from the transform batch, the same data a GPU
    renderer would upload, so the figure shows exactly what was computed.

    Parameters:
    -----------
    driver : FrameDriver
        Driver holding the lattice and the latest transforms
    height : int
        Figure height in pixels
    show_pointer : bool
        Mark the pointer target on the plane
    colorscale : str
        Plotly colorscale for the m_z coloring

    Returns:
    --------
    go.Figure
        Plotly figure
    """
    positions, axes = transforms_to_arrows(driver.transforms)
    pointer = driver.pointer.position if show_pointer else None

    fig = create_spin_figure(
        positions,
        axes,
        pointer=pointer,
        title=f"Frame {driver.frame_count}",
        colorscale=colorscale,
        show_pointer=show_pointer,
        height=height,
    )
    driver.mark_uploaded()
    return fig
