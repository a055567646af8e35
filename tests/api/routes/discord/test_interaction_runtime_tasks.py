"""Testes do registro de tasks diferidas das interações."""

from __future__ import annotations

import asyncio
import logging

import pytest

from api.routes.discord import interaction_runtime, interaction_runtime_tasks


async def _wait_until_tasks_empty(timeout: float = 1.0) -> None:
    start = asyncio.get_running_loop().time()
    while interaction_runtime_tasks._active_tasks:
        if asyncio.get_running_loop().time() - start > timeout:
            break
        await asyncio.sleep(0.01)


async def _cancel_active() -> None:
    for task in list(interaction_runtime_tasks._active_tasks):
        task.cancel()
    if interaction_runtime_tasks._active_tasks:
        await asyncio.gather(
            *list(interaction_runtime_tasks._active_tasks),
            return_exceptions=True,
        )
    interaction_runtime_tasks._active_tasks.clear()


@pytest.fixture(autouse=True)
async def _cleanup_active_tasks() -> None:
    await _cancel_active()
    yield
    await _cancel_active()


@pytest.mark.asyncio
async def test_schedule_runs_coroutine_and_cleans_active_set() -> None:
    event = asyncio.Event()

    async def _work() -> None:
        event.set()

    task = interaction_runtime_tasks.schedule_deferred_task(
        correlation_id="corr-1",
        operation="user",
        coroutine=_work(),
    )

    assert task.get_name() == "deferred:corr-1"
    assert interaction_runtime_tasks.active_task_count() == 1
    await asyncio.wait_for(event.wait(), timeout=1.0)
    await _wait_until_tasks_empty()
    assert interaction_runtime_tasks.active_task_count() == 0


@pytest.mark.asyncio
async def test_crashed_task_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    async def _boom() -> None:
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR):
        interaction_runtime_tasks.schedule_deferred_task(
            correlation_id="corr-2",
            operation="admin.users.get",
            coroutine=_boom(),
        )
        await _wait_until_tasks_empty()

    assert "deferred_task_crashed" in caplog.text


@pytest.mark.asyncio
async def test_drain_returns_zero_when_empty() -> None:
    assert await interaction_runtime_tasks.drain_deferred_tasks(timeout_seconds=0.01) == 0


@pytest.mark.asyncio
async def test_drain_waits_for_pending_tasks() -> None:
    done = asyncio.Event()

    async def _slow() -> None:
        await asyncio.sleep(0.05)
        done.set()

    interaction_runtime_tasks.schedule_deferred_task(
        correlation_id="corr-3", operation="user", coroutine=_slow()
    )

    cancelled = await interaction_runtime_tasks.drain_deferred_tasks(timeout_seconds=1.0)

    assert cancelled == 0
    assert done.is_set()


@pytest.mark.asyncio
async def test_drain_cancels_tasks_over_deadline(caplog: pytest.LogCaptureFixture) -> None:
    async def _hang() -> None:
        await asyncio.sleep(10)

    interaction_runtime_tasks.schedule_deferred_task(
        correlation_id="corr-4", operation="user", coroutine=_hang()
    )

    with caplog.at_level(logging.WARNING):
        await interaction_runtime.drain_background_tasks(timeout_seconds=0.01)

    assert "deferred_followups_lost" in caplog.text
    await _wait_until_tasks_empty()
    assert interaction_runtime_tasks.active_task_count() == 0
