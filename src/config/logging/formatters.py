"""Formatter JSON com campos padronizados.

Campos obrigatórios em todo log:
- asctime, level, logger, message
- correlation_id, service
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado (ordem de saída)
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {"asctime": "2026-10-19 10:30:00,123", "level": "INFO",
         "logger": "app.services.interaction_dispatcher",
         "message": "interaction_acknowledged",
         "correlation_id": "1189...", "service": "diretorio_bot"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
