"""
Estados do protocolo de interação (slash command do Discord).

Uma interação recebe exatamente uma resposta síncrona e, no caminho
diferido, no máximo uma mensagem de follow-up.

Fluxos:
    RECEIVED → PONGED                       (ping)
    RECEIVED → RESPONDED                    (mensagem efêmera imediata)
    RECEIVED → ACKNOWLEDGED → DELIVERED     (resultado entregue)
                            → REPORTED      (erro entregue)
                            → ABANDONED     (follow-up não entregue)
"""

from enum import StrEnum


class InteractionState(StrEnum):
    """
    Estados de uma interação.

    Estados não-terminais:
        - RECEIVED: Assinatura verificada, payload parseado
        - ACKNOWLEDGED: Resposta diferida (type 5) enviada, task agendada

    Estados terminais:
        - PONGED: Keep-alive respondido (type 1)
        - RESPONDED: Mensagem efêmera imediata (type 4)
        - DELIVERED: Follow-up com resultado enviado
        - REPORTED: Follow-up com erro enviado
        - ABANDONED: Falha na entrega do follow-up (sem retry)
    """

    RECEIVED = "RECEIVED"
    ACKNOWLEDGED = "ACKNOWLEDGED"

    PONGED = "PONGED"
    RESPONDED = "RESPONDED"
    DELIVERED = "DELIVERED"
    REPORTED = "REPORTED"
    ABANDONED = "ABANDONED"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, a interação não transita mais
TERMINAL_STATES: frozenset[InteractionState] = frozenset({
    InteractionState.PONGED,
    InteractionState.RESPONDED,
    InteractionState.DELIVERED,
    InteractionState.REPORTED,
    InteractionState.ABANDONED,
})

DEFAULT_INITIAL_STATE: InteractionState = InteractionState.RECEIVED


def is_terminal(state: InteractionState) -> bool:
    """Verifica se o estado é terminal."""
    return state in TERMINAL_STATES


def is_valid_state(value: str) -> bool:
    """Verifica se a string corresponde a um estado conhecido."""
    try:
        InteractionState(value)
    except ValueError:
        return False
    return True
