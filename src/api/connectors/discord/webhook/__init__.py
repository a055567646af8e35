"""Webhook de interações: assinatura e parsing seguro."""

from ..signature import SignatureResult, verify_discord_signature
from .receive import (
    InvalidJsonError,
    InvalidSignatureError,
    WebhookRequestError,
    parse_interaction_request,
)

__all__ = [
    "InvalidJsonError",
    "InvalidSignatureError",
    "SignatureResult",
    "WebhookRequestError",
    "parse_interaction_request",
    "verify_discord_signature",
]
