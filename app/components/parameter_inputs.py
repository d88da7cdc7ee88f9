# app/components/parameter_inputs.py
"""
Parameter input components for the simulation sidebar.
"""

import streamlit as st
from typing import Optional, Tuple
import sys
from pathlib import Path

# Add app directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import CONFIG


def check_stability_warning(alpha: float, time_step_multiplier: float, field_strength: float) -> Optional[str]:
    """
    Warn when the explicit step is likely to visibly overshoot.

    The per-frame rotation angle scales with gamma_eff * |H| * dt; with the
    strongest fields, the largest time step and almost no damping the spins
    flip wildly between frames.
    """
    if time_step_multiplier >= 5.0 and field_strength >= 5e5 and alpha < 0.05:
        return "⚠️ **Large steps**: strong field, long time step and little damping make the spins jitter. Lower the time step or raise damping."
    return None


def render_dynamics_inputs() -> Tuple[float, float, float]:
    """
    Render the LLG coefficient controls.

    Returns tuple of (gamma, alpha, time_step_multiplier)
    """
    gamma = st.slider(
        "Gyromagnetic γ",
        min_value=CONFIG.gamma_range[0],
        max_value=CONFIG.gamma_range[1],
        value=CONFIG.default_gamma,
        step=CONFIG.gamma_step,
        format="%.0e",
        key="gamma",
        help="Precession rate coefficient"
    )
    alpha = st.slider(
        "Damping α",
        min_value=CONFIG.alpha_range[0],
        max_value=CONFIG.alpha_range[1],
        value=CONFIG.default_alpha,
        step=CONFIG.alpha_step,
        key="alpha",
        help="Gilbert damping: how fast spins relax toward the field"
    )
    time_step_multiplier = st.slider(
        "Time step ×",
        min_value=CONFIG.multiplier_range[0],
        max_value=CONFIG.multiplier_range[1],
        value=1.0,
        step=CONFIG.multiplier_step,
        key="time_step_multiplier",
        help="Multiplier on the base time-step scale 5e-10"
    )
    return gamma, alpha, time_step_multiplier


def render_field_inputs() -> Tuple[float, float, bool]:
    """
    Render the exchange and pointer-field controls.

    Returns tuple of (exchange_multiplier, field_strength, inverted)
    """
    exchange_multiplier = st.slider(
        "Exchange ×",
        min_value=CONFIG.multiplier_range[0],
        max_value=CONFIG.multiplier_range[1],
        value=1.0,
        step=CONFIG.multiplier_step,
        key="exchange_multiplier",
        help="Multiplier on the base exchange strength 1.5e-10"
    )
    field_strength = st.slider(
        "Pointer field",
        min_value=CONFIG.field_range[0],
        max_value=CONFIG.field_range[1],
        value=CONFIG.default_field,
        step=CONFIG.field_step,
        format="%.0e",
        key="field_strength",
        help="Peak strength of the field around the pointer"
    )
    inverted = st.toggle(
        "Invert field",
        value=False,
        key="inverted",
        help="Point the field toward the pointer instead of away from it"
    )
    return exchange_multiplier, field_strength, inverted


def render_lattice_inputs() -> int:
    """Render the grid size control."""
    return st.slider(
        "Grid size",
        min_value=CONFIG.grid_range[0],
        max_value=CONFIG.grid_range[1],
        value=CONFIG.default_grid_size,
        key="grid_size",
        help="Sites per side; changing it resets every spin to +Z"
    )


def render_pointer_inputs() -> Tuple[float, float]:
    """
    Render the pointer position as normalized device coordinates.

    (0, 0) is the screen center, which the default camera maps to the
    lattice center.
    """
    col1, col2 = st.columns(2)
    with col1:
        ndc_x = st.slider("Pointer X", -1.0, 1.0, 0.0, 0.05, key="ndc_x")
    with col2:
        ndc_y = st.slider("Pointer Y", -1.0, 1.0, 0.0, 0.05, key="ndc_y")
    return ndc_x, ndc_y
