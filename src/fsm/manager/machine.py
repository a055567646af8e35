"""
Máquina de estados de uma interação.

Cada interação (e sua task diferida) possui sua própria instância;
não há estado compartilhado entre interações.
"""

import logging
from typing import Any

from fsm.rules.guards import evaluate_guards
from fsm.states.interaction import (
    DEFAULT_INITIAL_STATE,
    InteractionState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

logger = logging.getLogger(__name__)


class InteractionStateMachine:
    """
    Controla as transições de uma interação e mantém histórico.

    Attributes:
        current_state: Estado atual
        history: Transições realizadas
    """

    __slots__ = ("_current_state", "_history", "_interaction_id")

    def __init__(
        self,
        interaction_id: str = "",
        initial_state: InteractionState | None = None,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._interaction_id = interaction_id

    @property
    def current_state(self) -> InteractionState:
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia)."""
        return list(self._history)

    @property
    def interaction_id(self) -> str:
        return self._interaction_id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def can_transition_to(self, target: InteractionState) -> bool:
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[InteractionState]:
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: InteractionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha
        """
        guard_result = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)

    def advance(self, target: InteractionState, trigger: str) -> None:
        """Transição obrigatória: levanta RuntimeError se recusada."""
        result = self.transition(target, trigger)
        if not result.success:
            logger.error(
                "interaction_transition_rejected",
                extra={
                    "interaction_id": self._interaction_id,
                    "from_state": self._current_state.name,
                    "to_state": target.name,
                    "reason": result.error_reason,
                },
            )
            raise RuntimeError(result.error_reason)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo do estado atual para logs."""
        return {
            "interaction_id": self._interaction_id,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    interaction_id: str,
    initial_state: InteractionState | None = None,
) -> InteractionStateMachine:
    """Factory de InteractionStateMachine."""
    return InteractionStateMachine(
        interaction_id=interaction_id,
        initial_state=initial_state,
    )
