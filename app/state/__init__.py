# app/state - Session state management
from .session import (
    get_driver,
    reset_driver,
    get_history,
    append_history,
    clear_history,
)

__all__ = [
    'get_driver',
    'reset_driver',
    'get_history',
    'append_history',
    'clear_history',
]
