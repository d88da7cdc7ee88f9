# app/main.py
"""
SpinCraft Explorer - Interactive Spin Lattice

A single interface where the pointer drags a localized field over a
square lattice of spins and the LLG dynamics are advanced in bursts of
frames, updating the 3D view and metrics.

Run with:
    streamlit run app/main.py
"""

import logging
import streamlit as st
import sys
from pathlib import Path

# Add app directory to path
sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import CONFIG
from services import SimulationService, params_from_sidebar
from state import get_driver, reset_driver, get_history, append_history, clear_history
from components.model_viewer import render_3d_model
from components.metrics_panel import render_metrics_panel
from components.parameter_inputs import (
    render_dynamics_inputs,
    render_field_inputs,
    render_lattice_inputs,
    render_pointer_inputs,
    check_stability_warning,
)
from spinfield.kernel.errors import SpinfieldError
from spinfield.pointer import PerspectiveCamera
from spinfield.viz import POINTER_COLOR

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("spinfield.app")

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title=CONFIG.app_name,
    page_icon="🧲",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better styling
st.markdown("""
<style>
    /* Tighter spacing */
    .block-container {
        padding-top: 1rem;
        padding-bottom: 1rem;
    }

    /* Metrics styling */
    [data-testid="stMetricValue"] {
        font-size: 1.1rem;
    }

    /* Sidebar header */
    .sidebar-header {
        font-size: 0.9rem;
        font-weight: 600;
        color: #666;
        text-transform: uppercase;
        letter-spacing: 0.05em;
        margin-top: 1rem;
        margin-bottom: 0.5rem;
    }
</style>
""", unsafe_allow_html=True)


# =============================================================================
# SIDEBAR - All Parameter Controls
# =============================================================================

with st.sidebar:
    st.title("🧲 SpinCraft")
    st.caption(CONFIG.app_subtitle)

    st.divider()

    # -------------------------------------------------------------------------
    # DYNAMICS
    # -------------------------------------------------------------------------
    st.markdown('<p class="sidebar-header">⏱️ Dynamics</p>', unsafe_allow_html=True)
    gamma, alpha, time_step_multiplier = render_dynamics_inputs()

    st.divider()

    # -------------------------------------------------------------------------
    # FIELDS
    # -------------------------------------------------------------------------
    st.markdown('<p class="sidebar-header">🧭 Fields</p>', unsafe_allow_html=True)
    exchange_multiplier, field_strength, inverted = render_field_inputs()

    warning = check_stability_warning(alpha, time_step_multiplier, field_strength)
    if warning:
        st.warning(warning, icon="⚠️")

    st.divider()

    # -------------------------------------------------------------------------
    # LATTICE & POINTER
    # -------------------------------------------------------------------------
    st.markdown('<p class="sidebar-header">🔲 Lattice & Pointer</p>', unsafe_allow_html=True)
    grid_size = render_lattice_inputs()
    ndc_x, ndc_y = render_pointer_inputs()

    st.divider()

    # -------------------------------------------------------------------------
    # RUN
    # -------------------------------------------------------------------------
    st.markdown('<p class="sidebar-header">▶️ Run</p>', unsafe_allow_html=True)
    n_frames = st.slider(
        "Frames per run",
        1,
        CONFIG.max_frames_per_run,
        CONFIG.default_frames_per_run,
        key="n_frames",
    )

    col1, col2 = st.columns(2)
    with col1:
        run_frames = st.button("▶️ Advance", type="primary", use_container_width=True)
    with col2:
        reset = st.button("🔄 Reset", use_container_width=True)

    st.divider()

    # -------------------------------------------------------------------------
    # INFO
    # -------------------------------------------------------------------------
    with st.expander("ℹ️ Help", expanded=False):
        st.markdown("""
        **Pointer:**
        - The X/Y sliders are screen coordinates; they are projected through
          the camera onto the lattice plane
        - The field is strongest under the pointer and falls off with distance

        **Parameters:**
        - *γ*: precession speed
        - *α*: damping (relaxation toward the field)
        - *Exchange ×*: coupling between neighbouring spins
        - *Invert field*: attract instead of repel

        **Tips:**
        - Changing the grid size resets all spins to +Z
        - Colors show m_z: red = up, blue = down
        """)


# =============================================================================
# DRIVER UPDATE
# =============================================================================

try:
    params = params_from_sidebar(
        gamma=gamma,
        alpha=alpha,
        exchange_multiplier=exchange_multiplier,
        field_strength=field_strength,
        time_step_multiplier=time_step_multiplier,
        grid_size=grid_size,
        inverted=inverted,
    )
except SpinfieldError as e:
    st.error(f"Invalid parameters: {e}")
    st.stop()

driver = get_driver(params)

if reset:
    reset_driver()
    st.rerun()

camera = PerspectiveCamera(
    position=(0.0, 0.0, CONFIG.camera_distance),
    fov=CONFIG.camera_fov,
)
pointer = SimulationService.pointer_from_ndc(ndc_x, ndc_y, camera)

if driver.lattice is None or driver.lattice.grid_size != grid_size:
    driver.rebuild(grid_size)
    clear_history()

if run_frames:
    try:
        with st.spinner(f"Advancing {n_frames} frames..."):
            result, rows = SimulationService.advance(driver, n_frames, CONFIG.frame_delta, pointer)
        append_history(rows)
        logger.info("Advanced %d frames (total %d)", n_frames, driver.frame_count)
    except SpinfieldError as e:
        st.error(f"Simulation failed: {e}")
        logger.error("Simulation failed: %s", e)


# =============================================================================
# MAIN AREA - 3D Model + Metrics
# =============================================================================

col_title, col_status = st.columns([3, 1])
with col_title:
    st.title("Spin Lattice")
with col_status:
    st.metric("Frame", driver.frame_count)

col_3d, col_metrics = st.columns([2, 1])

# -------------------------------------------------------------------------
# 3D MODEL VIEW
# -------------------------------------------------------------------------
with col_3d:
    fig = render_3d_model(driver, height=CONFIG.viewer_height)
    st.plotly_chart(fig, use_container_width=True, key="main_3d")
    st.caption(f"🖱️ Drag to rotate • Scroll to zoom • {POINTER_COLOR.capitalize()} marker = pointer target")

# -------------------------------------------------------------------------
# METRICS PANEL
# -------------------------------------------------------------------------
with col_metrics:
    render_metrics_panel(SimulationService.current_metrics(driver))

    st.download_button(
        "📥 Spin state (CSV)",
        data=SimulationService.state_to_csv(driver),
        file_name="spin_state.csv",
        mime="text/csv",
        use_container_width=True,
    )

# -------------------------------------------------------------------------
# HISTORY
# -------------------------------------------------------------------------
history = get_history()
if history is not None and len(history) > 0:
    st.subheader("Magnetization History")
    st.line_chart(history.set_index('frame')[['mean_mx', 'mean_my', 'mean_mz']])
else:
    st.info("Press **Advance** to run the dynamics.")
