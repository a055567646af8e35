"""Verificação Ed25519 das interações do Discord.

Mensagem assinada: ``timestamp || raw_body`` (bytes, sem separador).
Qualquer falha de decodificação, tamanho ou criptografia resulta em
``valid=False``; nada é propagado ao chamador.

A primitiva de verificação é injetada no construtor, o que permite
trocar a implementação sem alterar estado global de bibliotecas.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64

_HEX_RE = re.compile(r"[0-9a-fA-F]+")

# (public_key, signature, message) -> válido?
VerifyPrimitive = Callable[[bytes, bytes, bytes], bool]


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação (sem dados sensíveis)."""

    valid: bool
    error: str | None = None
    skipped: bool = False


def ed25519_verify(public_key: bytes, signature: bytes, message: bytes) -> bool:
    """Primitiva padrão baseada em `cryptography`."""
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, message)
    except InvalidSignature:
        return False
    return True


class Ed25519SignatureVerifier:
    """Verificador de assinatura para uma chave pública fixa."""

    __slots__ = ("_public_key_hex", "_verify")

    def __init__(
        self,
        public_key_hex: str,
        *,
        verify_primitive: VerifyPrimitive = ed25519_verify,
    ) -> None:
        self._public_key_hex = public_key_hex
        self._verify = verify_primitive

    def verify(self, raw_body: bytes, timestamp: str | None, signature_hex: str | None) -> bool:
        return self.check(raw_body, timestamp, signature_hex).valid

    def check(
        self,
        raw_body: bytes,
        timestamp: str | None,
        signature_hex: str | None,
    ) -> SignatureResult:
        if not timestamp or not signature_hex:
            return SignatureResult(valid=False, error="missing_signature_headers")

        # fromhex aceita espaços; aqui só hex puro
        if not _is_hex(signature_hex) or not _is_hex(self._public_key_hex):
            return SignatureResult(valid=False, error="malformed_hex")

        try:
            signature = bytes.fromhex(signature_hex)
            public_key = bytes.fromhex(self._public_key_hex)
        except (ValueError, TypeError):
            return SignatureResult(valid=False, error="malformed_hex")

        if len(signature) != SIGNATURE_LENGTH:
            return SignatureResult(valid=False, error="invalid_signature_length")
        if len(public_key) != PUBLIC_KEY_LENGTH:
            return SignatureResult(valid=False, error="invalid_public_key_length")

        message = timestamp.encode("utf-8") + (raw_body or b"")
        try:
            valid = self._verify(public_key, signature, message)
        except Exception as exc:  # noqa: BLE001 - verificação degrada para booleano
            logger.warning(
                "signature_primitive_error",
                extra={"error_type": type(exc).__name__},
            )
            return SignatureResult(valid=False, error="verification_error")

        if not valid:
            return SignatureResult(valid=False, error="signature_mismatch")
        return SignatureResult(valid=True)


def _is_hex(value: str) -> bool:
    return isinstance(value, str) and _HEX_RE.fullmatch(value) is not None


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Busca header sem diferenciar maiúsculas/minúsculas."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def verify_discord_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    public_key_hex: str | None,
    *,
    skip_verify: bool = False,
    verify_primitive: VerifyPrimitive = ed25519_verify,
) -> SignatureResult:
    """Verifica os headers de assinatura de uma requisição.

    O bypass só acontece quando o chamador passa ``skip_verify=True``
    explicitamente (configuração de ambiente confiável).
    """
    if skip_verify:
        logger.warning("signature_verification_skipped")
        return SignatureResult(valid=True, skipped=True)

    if not public_key_hex:
        return SignatureResult(valid=False, error="public_key_not_configured")

    verifier = Ed25519SignatureVerifier(public_key_hex, verify_primitive=verify_primitive)
    return verifier.check(
        raw_body,
        get_header(headers, TIMESTAMP_HEADER),
        get_header(headers, SIGNATURE_HEADER),
    )
