"""Endpoints de health check."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from config.settings import (
    get_base_settings,
    get_discord_settings,
    get_google_directory_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de configuração de uma dependência."""

    status: Literal["ok", "failed"]
    errors: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {"status": self.status, "error_count": len(self.errors)}


@router.get("/health", response_class=PlainTextResponse)
async def health_check() -> PlainTextResponse:
    """Liveness probe: sem autenticação, sem dependências."""
    return PlainTextResponse("ok")


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Readiness probe: valida a configuração de Discord e Google."""
    environment = get_base_settings().environment
    discord_check = _check(get_discord_settings().validate(environment))
    google_check = _check(get_google_directory_settings().validate())
    ready = discord_check.status == "ok" and google_check.status == "ok"

    if not ready:
        logger.warning(
            "readiness_not_ready",
            extra={
                "discord_errors": len(discord_check.errors),
                "google_errors": len(google_check.errors),
            },
        )

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "discord": discord_check.as_dict(),
            "google_directory": google_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check(errors: list[str]) -> DependencyCheck:
    return DependencyCheck(status="failed" if errors else "ok", errors=tuple(errors))
