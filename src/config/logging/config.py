"""Configuração centralizada de logging.

Logging estruturado JSON com:
- Campos obrigatórios (correlation_id, service, level, logger, message)
- Mascaramento de segredos passados via ``extra``
- Nível configurável por ambiente (LOG_LEVEL)

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="diretorio_bot")

    logger = get_logger(__name__)
    logger.info("token_issued", extra={"latency_ms": 42})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, SecretRedactionFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Nome padrão do serviço
DEFAULT_SERVICE_NAME = "diretorio_bot"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Deve ser chamada uma vez na inicialização (app/bootstrap/).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id
            do contexto atual (ContextVar de app/observability).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(SecretRedactionFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação (reload do uvicorn)
    root.handlers = [handler]

    # httpx loga a URL completa em INFO, incluindo o token da interação
    logging.getLogger("httpx").setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado.

    Os filters do handler injetam service e correlation_id.
    """
    return logging.getLogger(name)
