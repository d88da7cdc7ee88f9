# spinfield/params.py
"""
Simulation parameters read by the frame driver on every step.

The defaults are the base values of the interactive viewer. The two
empirically chosen constants (exchange unit scale and field falloff) are
kept as module-level tunables rather than parameters because they shape
the visual behaviour, not the physics.
"""

import math
from dataclasses import dataclass, asdict, replace as _dc_replace
from typing import Any, Dict, Optional

from .kernel.errors import ParameterError

# Brings exchange_strength (~1e-10) into the numeric range of the external field
EXCHANGE_UNIT_SCALE = 1e6

# H_ext strength = external_field_strength / (1 + FIELD_FALLOFF * d²)
FIELD_FALLOFF = 5.0

# Upper bound on the wall-clock delta fed into one step (seconds)
MAX_FRAME_DELTA = 0.03

DEFAULT_GRID_SIZE = 20

# Slider ranges for the multiplier-style controls
MULTIPLIER_RANGE = (0.1, 10.0)


@dataclass
class SimulationParams:
    """
    Parameters of the simplified LLG model.

    Physics:
    --------
    gamma : float
        Gyromagnetic-ratio-like coefficient, reasonable range [1e5, 1e6]
    alpha : float
        Gilbert damping (dimensionless), range [0.01, 1.5]
    exchange_strength : float
        Nearest-neighbour coupling, range [1e-11, 5e-10]
    external_field_strength : float
        Peak strength of the pointer field, range [1e4, 1e6]

    Stepping:
    ---------
    time_step_scale : float
        Converts clamped wall-clock seconds into simulation time,
        range [1e-10, 2e-9]

    Lattice:
    --------
    grid_size : int
        Sites per side; a change triggers a full lattice rebuild

    Field:
    ------
    is_field_inverted : bool
        Negates the external field term (attraction vs. repulsion)
    """
    gamma: float = 5e5
    alpha: float = 0.3
    exchange_strength: float = 1.5e-10
    external_field_strength: float = 2e5
    time_step_scale: float = 5e-10
    grid_size: int = DEFAULT_GRID_SIZE
    is_field_inverted: bool = False

    def validate(self) -> "SimulationParams":
        """
        Check the float parameters for finiteness and sign.

        grid_size is left to build_lattice, which owns that precondition.

        Raises:
        -------
        ParameterError
            If any float is NaN/inf, or gamma, alpha or time_step_scale
            is negative
        """
        for name in ('gamma', 'alpha', 'exchange_strength',
                     'external_field_strength', 'time_step_scale'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
                raise ParameterError(f"{name} must be a finite number, got {value!r}")
        for name in ('gamma', 'alpha', 'time_step_scale'):
            if getattr(self, name) < 0:
                raise ParameterError(f"{name} must be >= 0, got {getattr(self, name)}")
        return self

    @property
    def gamma_eff(self) -> float:
        """gamma / (1 + alpha²), the prefactor shared by both LLG terms."""
        return self.gamma / (1.0 + self.alpha * self.alpha)

    @property
    def exchange_scale(self) -> float:
        return self.exchange_strength * EXCHANGE_UNIT_SCALE

    def replace(self, **changes) -> "SimulationParams":
        return _dc_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def from_multipliers(
    exchange_multiplier: float = 1.0,
    time_step_multiplier: float = 1.0,
    base: Optional[SimulationParams] = None,
    **direct,
) -> SimulationParams:
    """
    Build parameters the way the viewer's sliders do: exchange strength and
    time-step scale are multipliers on the base values, everything else is
    set directly.

    Example:
    --------
    >>> p = from_multipliers(exchange_multiplier=2.0, alpha=0.5)
    >>> p.exchange_strength
    3e-10
    """
    if base is None:
        base = SimulationParams()
    lo, hi = MULTIPLIER_RANGE
    for name, value in (('exchange_multiplier', exchange_multiplier),
                        ('time_step_multiplier', time_step_multiplier)):
        if not (lo <= value <= hi):
            raise ParameterError(f"{name} must be in [{lo}, {hi}], got {value}")
    return base.replace(
        exchange_strength=base.exchange_strength * exchange_multiplier,
        time_step_scale=base.time_step_scale * time_step_multiplier,
        **direct,
    )
