"""Registro das tasks diferidas de interações.

Mantém referência forte de cada task até a conclusão e permite ao
lifespan aguardar as pendentes no shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger(__name__)

_active_tasks: set[asyncio.Task[Any]] = set()


def schedule_deferred_task(
    *,
    correlation_id: str,
    operation: str,
    coroutine: Coroutine[Any, Any, Any],
) -> asyncio.Task[Any]:
    """Agenda a task no loop corrente e a registra."""
    task = asyncio.create_task(coroutine, name=f"deferred:{correlation_id}")
    _active_tasks.add(task)
    task.add_done_callback(_on_deferred_task_done)
    logger.info(
        "deferred_task_scheduled",
        extra={
            "correlation_id": correlation_id,
            "operation": operation,
            "active_tasks": len(_active_tasks),
        },
    )
    return task


def active_task_count() -> int:
    return len(_active_tasks)


def _on_deferred_task_done(task: asyncio.Task[Any]) -> None:
    _active_tasks.discard(task)
    with contextlib.suppress(asyncio.CancelledError):
        exc = task.exception()
        if exc is not None:
            logger.error(
                "deferred_task_crashed",
                extra={
                    "task_name": task.get_name(),
                    "error_type": type(exc).__name__,
                    "active_tasks": len(_active_tasks),
                },
            )


async def drain_deferred_tasks(timeout_seconds: float = 30.0) -> int:
    """Aguarda tasks pendentes no shutdown; cancela as que estourarem o prazo.

    Returns:
        Quantidade de tasks canceladas.
    """
    if not _active_tasks:
        return 0

    pending_now = list(_active_tasks)
    logger.info(
        "deferred_tasks_shutdown_wait",
        extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
    )
    _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
    if not pending:
        return 0

    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    logger.warning("deferred_tasks_shutdown_cancelled", extra={"cancelled_tasks": len(pending)})
    return len(pending)
