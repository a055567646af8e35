"""
Guards avaliados antes de cada transição de interação.

Todos os guards recebem (from_state, to_state) e o primeiro que
negar interrompe a transição.
"""

from collections.abc import Callable

from fsm.states.interaction import TERMINAL_STATES, InteractionState


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        return cls(allowed=False, reason=reason)


Guard = Callable[[InteractionState, InteractionState], GuardResult]


def guard_valid_state(
    from_state: InteractionState,
    to_state: InteractionState,
) -> GuardResult:
    """Guard: ambos os estados precisam ser InteractionState."""
    if not isinstance(from_state, InteractionState):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")
    if not isinstance(to_state, InteractionState):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")
    return GuardResult.allow()


def guard_terminal_state(
    from_state: InteractionState,
    to_state: InteractionState,
) -> GuardResult:
    """Guard: estado terminal não permite saída (resposta/follow-up únicos)."""
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(
            f"Estado {from_state.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_same_state(
    from_state: InteractionState,
    to_state: InteractionState,
) -> GuardResult:
    """Guard: transição reflexiva nunca é permitida."""
    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
]


def evaluate_guards(
    from_state: InteractionState,
    to_state: InteractionState,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia os guards em ordem.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    for guard in guards if guards is not None else DEFAULT_GUARDS:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result
    return GuardResult.allow()
