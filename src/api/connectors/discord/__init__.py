"""Conector Discord: verificação de interações e canal de follow-up."""

from .followup_client import MAX_CONTENT_LENGTH, DiscordFollowupClient, truncate_content
from .signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    Ed25519SignatureVerifier,
    SignatureResult,
    verify_discord_signature,
)

__all__ = [
    "MAX_CONTENT_LENGTH",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "DiscordFollowupClient",
    "Ed25519SignatureVerifier",
    "SignatureResult",
    "truncate_content",
    "verify_discord_signature",
]
