# app/services - Business logic layer
from .simulation_service import SimulationService, params_from_sidebar, HISTORY_COLUMNS

__all__ = ['SimulationService', 'params_from_sidebar', 'HISTORY_COLUMNS']
