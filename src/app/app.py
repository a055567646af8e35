"""Entrypoint do serviço de diretório (Discord → Google Directory).

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from api.routes.discord.interaction_runtime import drain_background_tasks
from app.bootstrap import SERVICE_NAME, initialize_app, validate_runtime_settings
from config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

# Prazo para tasks diferidas no shutdown (token de follow-up vale 15 min)
SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações

    Shutdown:
    - Aguarda as tasks diferidas (follow-ups pendentes)
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    await drain_background_tasks(timeout_seconds=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="diretorio-bot",
        description="Slash commands do Discord para a Google Admin Directory API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting diretorio-bot in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
