"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e expõe as factories que conectam implementações concretas aos
protocolos.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings

    # Na inicialização do serviço
    initialize_app()
    validate_runtime_settings()
"""

from __future__ import annotations

import logging

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_discord_settings,
    get_google_directory_settings,
)

# Nome do serviço para logs e métricas
SERVICE_NAME = "diretorio_bot"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.

    Configura:
    - Logging estruturado JSON com correlation_id
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings."""
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(
        f"discord: {error}" for error in get_discord_settings().validate(base.environment)
    )
    errors.extend(
        f"google_directory: {error}" for error in get_google_directory_settings().validate()
    )
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: configuração inválida em ambiente estrito.
    """
    base = get_base_settings()
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.is_strict:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")
