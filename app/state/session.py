# app/state/session.py
"""
Session state management for Streamlit.

Provides typed accessors for session state to avoid
scattered st.session_state['key'] calls throughout the app.
"""

import streamlit as st
import pandas as pd
from typing import Optional
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from spinfield.driver import FrameDriver
from spinfield.params import SimulationParams


# ============================================================================
# Driver State
# ============================================================================

def get_driver(params: Optional[SimulationParams] = None) -> FrameDriver:
    """
    Get the frame driver, creating it on first use.

    The driver (lattice, direction buffers, pointer) survives reruns; only
    its params are replaced when the sidebar changes.
    """
    if 'driver' not in st.session_state:
        st.session_state.driver = FrameDriver(params if params is not None else SimulationParams())
    driver = st.session_state.driver
    if params is not None:
        driver.params = params
    return driver


def reset_driver() -> None:
    """Rebuild the lattice (all spins back to +Z) and drop the history."""
    if 'driver' in st.session_state:
        st.session_state.driver.rebuild()
    clear_history()


# ============================================================================
# History State
# ============================================================================

def get_history() -> Optional[pd.DataFrame]:
    """Per-frame metrics collected so far."""
    return st.session_state.get('history', None)


def append_history(rows: pd.DataFrame) -> pd.DataFrame:
    history = get_history()
    history = rows if history is None else pd.concat([history, rows], ignore_index=True)
    st.session_state.history = history
    return history


def clear_history() -> None:
    if 'history' in st.session_state:
        del st.session_state.history

