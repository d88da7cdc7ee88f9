# app/components - Reusable UI components
from .model_viewer import render_3d_model
from .metrics_panel import render_metrics_panel
from .parameter_inputs import (
    render_dynamics_inputs,
    render_field_inputs,
    render_lattice_inputs,
    render_pointer_inputs,
    check_stability_warning,
)

__all__ = [
    'render_3d_model',
    'render_metrics_panel',
    'render_dynamics_inputs',
    'render_field_inputs',
    'render_lattice_inputs',
    'render_pointer_inputs',
    'check_stability_warning',
]
