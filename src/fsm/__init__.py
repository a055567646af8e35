"""
Módulo FSM: protocolo de interação (ack imediato, resultado diferido).

Estrutura:
    - states/: InteractionState e estados terminais
    - transitions/: grafo VALID_TRANSITIONS
    - rules/: guards avaliados a cada transição
    - manager/: InteractionStateMachine
    - types/: StateTransition, TransitionResult
"""

from fsm.manager import InteractionStateMachine, create_fsm
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    InteractionState,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "GuardResult",
    "InteractionState",
    "InteractionStateMachine",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
