"""Runtime das interações: dispatcher lazy e agendamento da task diferida."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.routes.discord.interaction_runtime_tasks import (
    drain_deferred_tasks,
    schedule_deferred_task,
)

if TYPE_CHECKING:
    from app.services.interaction_dispatcher import DeferredTask, InteractionDispatcher

logger = logging.getLogger(__name__)

_dispatcher: InteractionDispatcher | None = None


def get_interaction_dispatcher() -> InteractionDispatcher:
    """Obtém o dispatcher (lazy-loading na primeira interação)."""
    global _dispatcher
    if _dispatcher is None:
        from app.bootstrap.dependencies import create_interaction_dispatcher

        _dispatcher = create_interaction_dispatcher()
    return _dispatcher


def reset_interaction_dispatcher() -> None:
    """Descarta o dispatcher em cache (testes/reload de settings)."""
    global _dispatcher
    _dispatcher = None


async def start_deferred_task(deferred: DeferredTask) -> None:
    """Background da resposta HTTP: roda após o envio do ack.

    Apenas agenda a task; o lifespan aguarda sua conclusão no shutdown.
    """
    schedule_deferred_task(
        correlation_id=deferred.correlation_id,
        operation=deferred.operation,
        coroutine=deferred.run(),
    )


async def drain_background_tasks(timeout_seconds: float = 30.0) -> None:
    """Aguarda tasks diferidas pendentes durante shutdown do processo."""
    cancelled = await drain_deferred_tasks(timeout_seconds=timeout_seconds)
    if cancelled:
        logger.warning("deferred_followups_lost", extra={"cancelled_tasks": cancelled})
