"""
Tipos para registro de transições de estado da interação.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.interaction import InteractionState


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Registro imutável de uma mudança de estado.

    Attributes:
        from_state: Estado de origem
        to_state: Estado de destino
        trigger: Gatilho (ex: 'ping', 'deferred_ack', 'followup_sent')
        metadata: Dados para auditoria (nunca conter tokens ou PII)
        timestamp: Momento da transição (UTC)
    """

    from_state: InteractionState
    to_state: InteractionState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        """Representação segura para logs."""
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi aplicada
        transition: Dados da transição (se success=True)
        error_reason: Motivo da recusa (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
