"""Serviços de aplicação.

Dispatch de interações, execução de comandos e formatação de erros.
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.directory_commands import DirectoryCommandExecutor
from app.services.error_reporter import format_error
from app.services.interaction_dispatcher import (
    DeferredTask,
    DispatchResult,
    InteractionDispatcher,
)

__all__ = [
    "DeferredTask",
    "DirectoryCommandExecutor",
    "DispatchResult",
    "InteractionDispatcher",
    "format_error",
]
