"""Endpoint de interações do Discord.

Endpoints:
- POST /interactions: recebimento de pings e slash commands

Fluxo:
1. Verificação Ed25519 (X-Signature-Ed25519 + X-Signature-Timestamp)
2. Parse do payload
3. Dispatch síncrono (sem rede) → resposta imediata
4. Comando diferido: task agendada após o envio da resposta

Segurança:
- 401 antes de qualquer lógica de comando se a assinatura falhar
- Bypass apenas via DISCORD_SKIP_VERIFY (ambiente confiável)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

from api.connectors.discord.webhook.receive import (
    InvalidJsonError,
    InvalidSignatureError,
    parse_interaction_request,
)
from api.routes.discord.interaction_runtime import (
    get_interaction_dispatcher,
    start_deferred_task,
)
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.settings import get_discord_settings
from utils.errors import UnsupportedInteractionError

logger = logging.getLogger(__name__)

router = APIRouter()


def _plain(content: str, status_code: int) -> Response:
    return Response(content=content, media_type="text/plain", status_code=status_code)


@router.post("/interactions", response_model=None)
async def receive_interaction(request: Request) -> Response:
    """Recebe uma interação assinada e responde dentro do prazo síncrono.

    Returns:
        401 (assinatura), 400 (payload) ou JSON `{type: 1|4|5}`.
    """
    header_correlation_id = request.headers.get("x-correlation-id")
    token = set_correlation_id(header_correlation_id)

    try:
        settings = get_discord_settings()
        raw_body = await request.body()

        try:
            interaction, signature_result = parse_interaction_request(
                raw_body,
                request.headers,
                settings.public_key or None,
                skip_verify=settings.skip_verify,
            )
        except InvalidSignatureError as exc:
            logger.warning(
                "interaction_signature_invalid",
                extra={"correlation_id": get_correlation_id(), "error": str(exc)},
            )
            return _plain("Unauthorized", status.HTTP_401_UNAUTHORIZED)
        except InvalidJsonError as exc:
            logger.warning(
                "interaction_payload_invalid",
                extra={"correlation_id": get_correlation_id(), "error": str(exc)},
            )
            return _plain("Bad Request", status.HTTP_400_BAD_REQUEST)

        if not header_correlation_id and interaction.id:
            reset_correlation_id(token)
            token = set_correlation_id(interaction.id)

        logger.info(
            "interaction_received",
            extra={
                "interaction_type": interaction.type,
                "command": interaction.command_name,
                "signature_skipped": signature_result.skipped,
                "payload_size": len(raw_body),
            },
        )

        try:
            result = get_interaction_dispatcher().dispatch(interaction)
        except UnsupportedInteractionError as exc:
            logger.warning(
                "interaction_type_unsupported",
                extra={"interaction_type": exc.interaction_type},
            )
            return _plain("Bad Request", status.HTTP_400_BAD_REQUEST)

        background = (
            BackgroundTask(start_deferred_task, result.deferred)
            if result.deferred is not None
            else None
        )
        return JSONResponse(content=result.response, background=background)

    finally:
        reset_correlation_id(token)
