"""Credencial de service account e token de acesso emitido."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ServiceAccountCredential:
    """Credencial carregada uma vez por processo a partir das settings.

    Attributes:
        issuer_email: Email da service account (claim `iss`)
        private_key_pem: Chave RSA PKCS8 em PEM
        subject: Usuário para delegação de domínio (claim `sub`), opcional
        scopes_override: Se não vazio, substitui os escopos de cada chamada
    """

    issuer_email: str
    private_key_pem: str = field(repr=False)
    subject: str | None = None
    scopes_override: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Bearer token emitido para uma única chamada downstream."""

    value: str = field(repr=False)
    scopes: tuple[str, ...]
    expires_at_epoch: int

    def is_expired(self, now: float | None = None) -> bool:
        current = time.time() if now is None else now
        return current >= self.expires_at_epoch
