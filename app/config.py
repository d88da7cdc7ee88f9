# app/config.py
"""
Application configuration and defaults.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class AppConfig:
    """Global application configuration."""

    # App metadata
    app_name: str = "SpinCraft"
    app_subtitle: str = "Interactive LLG Spin Lattice"
    version: str = "0.1.0"

    # Slider ranges (direct parameters)
    gamma_range: Tuple[float, float] = (1e5, 1e6)
    gamma_step: float = 1e4
    alpha_range: Tuple[float, float] = (0.01, 1.5)
    alpha_step: float = 0.01
    field_range: Tuple[float, float] = (1e4, 1e6)
    field_step: float = 1e4

    # Multiplier sliders for exchange and time step
    multiplier_range: Tuple[float, float] = (0.1, 10.0)
    multiplier_step: float = 0.1

    grid_range: Tuple[int, int] = (2, 40)

    # Default values
    default_gamma: float = 5e5
    default_alpha: float = 0.3
    default_field: float = 2e5
    default_grid_size: int = 20

    # Frame clock: each rerun advances this many frames of frame_delta seconds
    default_frames_per_run: int = 30
    max_frames_per_run: int = 300
    frame_delta: float = 1 / 60

    # Viewer
    viewer_height: int = 600
    camera_distance: float = 14.0
    camera_fov: float = 50.0


# Global config instance
CONFIG = AppConfig()
