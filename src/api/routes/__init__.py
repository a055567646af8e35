"""Rotas HTTP da API.

Responsabilidades:
- Definir endpoints HTTP (interações, health)
- Validação inicial de request (assinatura, payload)
- Delegação para connectors e dispatcher
- Respostas HTTP apropriadas

Estrutura:
- routes/discord/: POST /interactions e runtime das tasks diferidas
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
