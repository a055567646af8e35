"""
Exports públicos do módulo fsm/states.

Estados do protocolo de interação.
"""

from fsm.states.interaction import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    InteractionState,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "InteractionState",
    "is_terminal",
    "is_valid_state",
]
