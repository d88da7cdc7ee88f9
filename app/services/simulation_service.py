# app/services/simulation_service.py
"""
Simulation service: advances the frame driver and collects per-frame metrics.
"""

import sys
from pathlib import Path
from typing import Optional, Tuple
import numpy as np
import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from spinfield.driver import FrameDriver, FrameResult
from spinfield.params import SimulationParams, from_multipliers
from spinfield.pointer import PerspectiveCamera, project_pointer
from spinfield.post import compute_metrics, mean_magnetization


HISTORY_COLUMNS = ['frame', 'dt', 'mean_mx', 'mean_my', 'mean_mz', 'abs_mean_m']


def params_from_sidebar(
    gamma: float,
    alpha: float,
    exchange_multiplier: float,
    field_strength: float,
    time_step_multiplier: float,
    grid_size: int,
    inverted: bool,
) -> SimulationParams:
    """Slider values to SimulationParams."""
    return from_multipliers(
        exchange_multiplier=exchange_multiplier,
        time_step_multiplier=time_step_multiplier,
        gamma=gamma,
        alpha=alpha,
        external_field_strength=field_strength,
        grid_size=int(grid_size),
        is_field_inverted=inverted,
    )


class SimulationService:
    """Service for stepping the spin lattice from the UI."""

    @staticmethod
    def pointer_from_ndc(ndc_x: float, ndc_y: float, camera: PerspectiveCamera) -> Optional[np.ndarray]:
        """Project a screen position (NDC) onto the lattice plane."""
        return project_pointer(ndc_x, ndc_y, camera)

    @staticmethod
    def advance(
        driver: FrameDriver,
        n_frames: int,
        delta: float,
        pointer: Optional[np.ndarray] = None,
    ) -> Tuple[Optional[FrameResult], pd.DataFrame]:
        """
        Step the driver n_frames times with a fixed pointer target.

        Returns:
            result: copy of the last FrameResult (None for an empty lattice)
            history: one row per frame with the mean magnetization
        """
        rows = []

        def record(result: FrameResult) -> None:
            m = mean_magnetization(result.directions)
            rows.append({
                'frame': result.frame,
                'dt': result.dt,
                'mean_mx': float(m[0]),
                'mean_my': float(m[1]),
                'mean_mz': float(m[2]),
                'abs_mean_m': float(np.linalg.norm(m)),
            })

        driver.add_listener(record)
        try:
            result = driver.run([delta] * n_frames, [pointer] * n_frames)
        finally:
            driver.remove_listener(record)

        return result, pd.DataFrame(rows, columns=HISTORY_COLUMNS)

    @staticmethod
    def current_metrics(driver: FrameDriver) -> dict:
        return compute_metrics(driver.directions, driver.lattice)

    @staticmethod
    def state_to_csv(driver: FrameDriver) -> str:
        """Final spin configuration, one row per site."""
        directions = driver.directions
        df = pd.DataFrame({
            'index': [s.index for s in driver.lattice],
            'row': [s.row for s in driver.lattice],
            'col': [s.col for s in driver.lattice],
            'x': driver.positions[:, 0],
            'y': driver.positions[:, 1],
            'mx': directions[:, 0],
            'my': directions[:, 1],
            'mz': directions[:, 2],
        })
        return df.to_csv(index=False, float_format='%.6f')
