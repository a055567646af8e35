"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="diretorio_bot")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("deferred_task_delivered", extra={"latency_ms": 812})

Nunca registrar tokens, chaves privadas, senhas ou corpo de mensagens.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter, SecretRedactionFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SecretRedactionFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
