# app/components/metrics_panel.py
"""
Metrics display panel component.
"""

import streamlit as st
from typing import Dict, Any


def render_metrics_panel(metrics: Dict[str, Any]) -> None:
    """
    Render a metrics panel for the current spin configuration.

    Parameters:
    -----------
    metrics : Dict
        Output of spinfield.post.compute_metrics
    """
    mean_m = metrics.get('mean_m', [0.0, 0.0, 0.0])

    st.subheader("Magnetization")
    cols = st.columns(3)
    with cols[0]:
        st.metric("⟨mx⟩", f"{mean_m[0]:+.3f}")
    with cols[1]:
        st.metric("⟨my⟩", f"{mean_m[1]:+.3f}")
    with cols[2]:
        st.metric("⟨mz⟩", f"{mean_m[2]:+.3f}")

    st.subheader("Lattice")
    cols = st.columns(3)
    with cols[0]:
        st.metric("Sites", metrics.get('n_sites', 0))
    with cols[1]:
        st.metric("|⟨m⟩|", f"{metrics.get('abs_mean_m', 0.0):.3f}")
    with cols[2]:
        st.metric("Alignment", f"{metrics.get('neighbor_alignment', 1.0):.3f}")

    st.caption(f"Max unit-length error: {metrics.get('max_norm_error', 0.0):.1e}")

