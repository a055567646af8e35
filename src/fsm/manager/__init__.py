"""
Exports públicos do módulo fsm/manager.
"""

from fsm.manager.machine import InteractionStateMachine, create_fsm

__all__ = [
    "InteractionStateMachine",
    "create_fsm",
]
