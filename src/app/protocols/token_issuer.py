"""Contrato do emissor de access tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.credentials import AccessToken


class TokenIssuerProtocol(Protocol):
    """Emite um token novo a cada chamada (sem cache)."""

    async def issue_token(self, scopes: Iterable[str]) -> AccessToken: ...
