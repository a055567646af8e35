"""Corpos de resposta síncrona do protocolo de interações."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

# Flag de mensagem visível apenas para quem invocou o comando
EPHEMERAL_FLAG = 1 << 6


class InteractionResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5


def pong_response() -> dict[str, Any]:
    return {"type": int(InteractionResponseType.PONG)}


def ephemeral_response(content: str) -> dict[str, Any]:
    return {
        "type": int(InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE),
        "data": {"content": content, "flags": EPHEMERAL_FLAG},
    }


def deferred_response() -> dict[str, Any]:
    return {"type": int(InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE)}
