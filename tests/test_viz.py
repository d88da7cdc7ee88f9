# tests/test_viz.py
"""Smoke tests for the Plotly renderer adapter."""

import numpy as np
import plotly.graph_objects as go

from spinfield.driver import FrameDriver
from spinfield.params import SimulationParams
from spinfield.viz import POINTER_COLOR, create_spin_figure, create_frame_figure, transforms_to_arrows


def test_transforms_to_arrows_recovers_state():
    driver = FrameDriver(SimulationParams(grid_size=3))
    result = driver.step(0.016, pointer=np.array([0.4, 0.0, 0.0]))

    positions, axes = transforms_to_arrows(result.transforms)
    np.testing.assert_allclose(positions, driver.positions)
    np.testing.assert_allclose(axes, result.directions, atol=1e-12)


def test_spin_figure_traces():
    driver = FrameDriver(SimulationParams(grid_size=4))
    fig = create_spin_figure(driver.positions, driver.directions, pointer=np.array([0.5, 0.5, 0.0]))

    assert isinstance(fig, go.Figure)
    types = [trace.type for trace in fig.data]
    assert types == ['scatter3d', 'cone', 'scatter3d']
    # 16 shafts, each 2 points + separator
    assert len(fig.data[0].x) == 16 * 3
    assert len(fig.data[1].x) == 16

    marker = fig.data[2]
    assert marker.name == "Pointer"
    assert marker.marker.color == POINTER_COLOR
    assert (marker.x[0], marker.y[0]) == (0.5, 0.5)


def test_frame_figure_without_pointer_marker():
    driver = FrameDriver(SimulationParams(grid_size=2))
    result = driver.step(0.016)
    fig = create_frame_figure(result, show_pointer=False, height=400)

    assert [t.type for t in fig.data] == ['scatter3d', 'cone']
    assert fig.layout.height == 400
