"""
Exports públicos do módulo fsm/types.

Registro de transições da interação.
"""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = [
    "StateTransition",
    "TransitionResult",
]
