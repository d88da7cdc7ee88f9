# spinfield/kernel/errors.py
"""Exception types raised by the spin lattice core."""


class SpinfieldError(Exception):
    """Base class for all spinfield errors."""
    pass


class LatticeConfigError(SpinfieldError, ValueError):
    """Raised when a lattice cannot be built from the requested configuration."""
    pass


class ParameterError(SpinfieldError, ValueError):
    """Raised when simulation parameters are non-finite or out of domain."""
    pass
