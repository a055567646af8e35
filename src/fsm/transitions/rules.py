"""
Regras de transição válidas entre estados da interação.

O grafo é pequeno e fechado: nenhuma transição volta para
RECEIVED ou ACKNOWLEDGED, o que garante resposta única.
"""

from fsm.states.interaction import TERMINAL_STATES, InteractionState

TransitionMap = dict[InteractionState, frozenset[InteractionState]]

VALID_TRANSITIONS: TransitionMap = {
    InteractionState.RECEIVED: frozenset({
        InteractionState.PONGED,
        InteractionState.RESPONDED,
        InteractionState.ACKNOWLEDGED,
    }),
    InteractionState.ACKNOWLEDGED: frozenset({
        InteractionState.DELIVERED,
        InteractionState.REPORTED,
        InteractionState.ABANDONED,
    }),
    InteractionState.PONGED: frozenset(),
    InteractionState.RESPONDED: frozenset(),
    InteractionState.DELIVERED: frozenset(),
    InteractionState.REPORTED: frozenset(),
    InteractionState.ABANDONED: frozenset(),
}


def get_valid_targets(state: InteractionState) -> frozenset[InteractionState]:
    """Retorna os estados de destino válidos (vazio se terminal)."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: InteractionState, to_state: InteractionState) -> bool:
    """Verifica se uma transição é permitida pelo grafo."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in InteractionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        if from_state in targets:
            errors.append(f"Transição reflexiva em {from_state.name}")

    return errors
