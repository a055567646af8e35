"""Parse e validação inicial da interação (sem PII)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import ValidationError

from app.domain.interaction import Interaction

from ..signature import SignatureResult, verify_discord_signature

if TYPE_CHECKING:
    from collections.abc import Mapping


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidSignatureError(WebhookRequestError):
    """Assinatura ausente ou inválida."""


class InvalidJsonError(WebhookRequestError):
    """Corpo não é JSON válido ou não é uma interação."""


def parse_interaction_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    public_key: str | None,
    *,
    skip_verify: bool = False,
) -> tuple[Interaction, SignatureResult]:
    """Valida assinatura e parseia a interação.

    A assinatura é verificada antes de qualquer parsing do corpo.

    Raises:
        InvalidSignatureError: Se assinatura for inválida
        InvalidJsonError: Se o JSON estiver inválido ou não for interação

    Returns:
        (Interaction, SignatureResult)
    """
    signature_result = verify_discord_signature(
        raw_body,
        headers,
        public_key,
        skip_verify=skip_verify,
    )
    if not signature_result.valid:
        raise InvalidSignatureError(signature_result.error or "invalid_signature")

    try:
        payload = json.loads(raw_body or b"")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    try:
        interaction = Interaction.model_validate(payload)
    except ValidationError as exc:
        raise InvalidJsonError("invalid_interaction") from exc

    return interaction, signature_result
