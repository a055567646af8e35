"""Contrato do canal de follow-up."""

from __future__ import annotations

from typing import Protocol


class FollowupSenderProtocol(Protocol):
    """Entrega uma mensagem no webhook da interação.

    Levanta `FollowupDeliveryError` em qualquer falha (sem retry).
    """

    async def send_followup(self, token: str, content: str) -> None: ...
