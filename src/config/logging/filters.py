"""Filters de logging para contexto e mascaramento.

Campos injetados:
- correlation_id: ID da interação em processamento
- service: Nome do serviço

Campos mascarados (quando passados via ``extra``): tokens, senhas e chaves.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "***"

SENSITIVE_FIELDS = frozenset(
    {
        "access_token",
        "assertion",
        "authorization",
        "bot_token",
        "password",
        "private_key",
        "token",
    }
)


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        # Preserva correlation_id passado explicitamente via `extra`
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SecretRedactionFilter(logging.Filter):
    """Mascara atributos sensíveis adicionados ao record via ``extra``.

    Não altera a mensagem; eventos do serviço não interpolam segredos.
    """

    def __init__(self, fields: frozenset[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for name in self._fields:
            if getattr(record, name, None):
                setattr(record, name, REDACTED)
        return True
