"""Agregador de rotas: registra health e o canal Discord.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.discord.router import router as discord_router
from api.routes.health.router import router as health_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks na raiz (/health e /ready)
    api_router.include_router(health_router, tags=["health"])

    # Discord (POST /interactions na raiz, URL registrada no portal)
    api_router.include_router(discord_router, tags=["discord"])

    return api_router
