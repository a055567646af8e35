"""Dispatcher de interações: resposta síncrona + trabalho diferido.

Fluxo:
    1. Ping → `{type: 1}` sem tocar na tabela de comandos
    2. Comando simples com argumento inválido ou comando desconhecido →
       mensagem efêmera `{type: 4}`
    3. Demais comandos → `{type: 5}` e uma `DeferredTask` que resolve,
       executa e entrega exatamente um follow-up

Nenhuma chamada de rede acontece durante o dispatch; a resolução do
comando é puramente local.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.domain.commands import is_known_command, is_simple_command, resolve_command
from app.domain.interaction import OptionType
from app.domain.responses import deferred_response, ephemeral_response, pong_response
from app.observability import (
    get_correlation_id,
    record_latency,
    reset_correlation_id,
    set_correlation_id,
)
from app.services.error_reporter import format_error
from fsm import InteractionState, InteractionStateMachine, create_fsm
from utils.errors import CommandValidationError, UnsupportedInteractionError

if TYPE_CHECKING:
    from app.domain.commands import DirectoryCommand
    from app.domain.interaction import Interaction
    from app.protocols import FollowupSenderProtocol
    from app.services.directory_commands import DirectoryCommandExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Resposta síncrona e, no caminho diferido, a task a agendar."""

    response: dict[str, Any]
    deferred: DeferredTask | None = None


class DeferredTask:
    """Trabalho em background vinculado a um reply token.

    `run()` nunca propaga exceção: todo erro vira um follow-up de erro.
    Se o próprio follow-up falhar, a task termina em ABANDONED sem retry.
    """

    def __init__(
        self,
        *,
        token: str,
        command: DirectoryCommand | None,
        failure: Exception | None,
        executor: DirectoryCommandExecutor,
        followup_sender: FollowupSenderProtocol,
        fsm: InteractionStateMachine,
        correlation_id: str,
        operation: str,
    ) -> None:
        if (command is None) == (failure is None):
            raise ValueError("DeferredTask exige command ou failure (exatamente um)")
        self._token = token
        self._command = command
        self._failure = failure
        self._executor = executor
        self._followup = followup_sender
        self._fsm = fsm
        self._correlation_id = correlation_id
        self._operation = operation
        self._claimed = False

    @property
    def state(self) -> InteractionState:
        return self._fsm.current_state

    @property
    def operation(self) -> str:
        return self._operation

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    async def run(self) -> InteractionState:
        """Executa o comando e entrega um único follow-up."""
        # claim síncrono: execuções concorrentes não passam daqui
        if self._claimed or self._fsm.is_terminal:
            logger.warning(
                "deferred_task_already_claimed",
                extra={"operation": self._operation, "state": self._fsm.current_state.value},
            )
            return self._fsm.current_state
        self._claimed = True

        cid_token = set_correlation_id(self._correlation_id)
        started = time.perf_counter()
        try:
            content, target = await self._produce_content()
            try:
                await self._followup.send_followup(self._token, content)
            except Exception as exc:  # noqa: BLE001 - entrega é at-most-once
                logger.error(
                    "deferred_task_abandoned",
                    extra={
                        "operation": self._operation,
                        "error_type": type(exc).__name__,
                        "status_code": getattr(exc, "status_code", None),
                    },
                )
                target = InteractionState.ABANDONED

            self._fsm.advance(target, trigger=f"followup_{target.value.lower()}")
            if target is not InteractionState.ABANDONED:
                logger.info(
                    f"deferred_task_{target.value.lower()}",
                    extra={"operation": self._operation, "state": target.value},
                )
            record_latency(
                "deferred_task",
                self._operation,
                (time.perf_counter() - started) * 1000,
                outcome=target.value.lower(),
            )
            return target
        finally:
            reset_correlation_id(cid_token)

    async def _produce_content(self) -> tuple[str, InteractionState]:
        if self._command is None:
            return format_error(self._failure), InteractionState.REPORTED
        try:
            content = await self._executor.execute(self._command)
        except Exception as exc:  # noqa: BLE001 - fronteira da task: todo erro vira follow-up
            logger.warning(
                "deferred_task_command_failed",
                extra={
                    "operation": self._operation,
                    "error_type": type(exc).__name__,
                    "status_code": getattr(exc, "status_code", None),
                },
            )
            return format_error(exc), InteractionState.REPORTED
        return content, InteractionState.DELIVERED


class InteractionDispatcher:
    """Classifica a interação e produz a resposta imediata."""

    def __init__(
        self,
        *,
        executor: DirectoryCommandExecutor,
        followup_sender: FollowupSenderProtocol,
    ) -> None:
        self._executor = executor
        self._followup = followup_sender

    def dispatch(self, interaction: Interaction) -> DispatchResult:
        """Produz a resposta síncrona (sem I/O).

        Raises:
            UnsupportedInteractionError: tipo diferente de ping/comando.
        """
        fsm = create_fsm(interaction.id)

        if interaction.is_ping:
            fsm.advance(InteractionState.PONGED, trigger="ping")
            logger.info("interaction_ponged")
            return DispatchResult(response=pong_response())

        if not interaction.is_command:
            raise UnsupportedInteractionError(interaction.type)

        name = interaction.command_name
        operation = _operation_name(interaction)
        command: DirectoryCommand | None = None
        failure: CommandValidationError | None = None
        try:
            command = resolve_command(name, interaction.options)
        except CommandValidationError as exc:
            if (
                not is_known_command(name)
                or is_simple_command(name)
                or exc.subcommand_missing
            ):
                fsm.advance(InteractionState.RESPONDED, trigger="validation_error")
                logger.info(
                    "interaction_rejected",
                    extra={
                        "operation": operation,
                        "missing_fields": list(exc.missing_fields),
                    },
                )
                return DispatchResult(response=ephemeral_response(str(exc)))
            failure = exc

        fsm.advance(InteractionState.ACKNOWLEDGED, trigger="deferred_ack")
        logger.info(
            "interaction_acknowledged",
            extra={"operation": operation, "validation_failed": failure is not None},
        )
        task = DeferredTask(
            token=interaction.token,
            command=command,
            failure=failure,
            executor=self._executor,
            followup_sender=self._followup,
            fsm=fsm,
            correlation_id=get_correlation_id() or interaction.id,
            operation=operation,
        )
        return DispatchResult(response=deferred_response(), deferred=task)


def _operation_name(interaction: Interaction) -> str:
    """Caminho do comando para logs (ex: ``admin.users.get``); sem valores."""
    parts = [interaction.command_name or "-"]
    options = interaction.options
    while options and options[0].type in (OptionType.SUB_COMMAND, OptionType.SUB_COMMAND_GROUP):
        parts.append(options[0].name)
        options = list(options[0].options)
    return ".".join(parts)
