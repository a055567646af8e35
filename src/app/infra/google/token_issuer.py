"""Emissão de access tokens via fluxo JWT-bearer de service account.

1. Monta a assertion RS256 (`iss`, `scope`, `aud`, `iat`, `exp`, `sub`)
2. Assina com a chave PKCS8 da service account (google-auth)
3. Troca a assertion no token endpoint via POST form-encoded

Cada chamada emite um token novo; não há cache entre chamadas.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from google.auth import crypt, jwt

from app.domain.credentials import AccessToken
from app.infra.http import HttpClient, HttpError
from app.observability import record_latency
from config.settings import GOOGLE_TOKEN_URI
from utils.errors import TokenIssuanceError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from app.domain.credentials import ServiceAccountCredential

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600


class ServiceAccountTokenIssuer:
    """Emissor de tokens para a Directory API com delegação de domínio."""

    def __init__(
        self,
        credential: ServiceAccountCredential,
        *,
        token_uri: str = GOOGLE_TOKEN_URI,
        http_client: HttpClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credential = credential
        self._token_uri = token_uri
        self._http = http_client or HttpClient()
        self._clock = clock
        self._signer: crypt.Signer | None = None

    @property
    def token_uri(self) -> str:
        return self._token_uri

    def effective_scopes(self, scopes: Iterable[str]) -> tuple[str, ...]:
        """Override configurado substitui integralmente os escopos pedidos."""
        if self._credential.scopes_override:
            return tuple(self._credential.scopes_override)
        return tuple(dict.fromkeys(s for s in scopes if s))

    def build_assertion(self, scopes: Iterable[str], *, issued_at: int | None = None) -> str:
        """Monta e assina a assertion JWT (três segmentos base64url).

        Raises:
            TokenIssuanceError: chave privada inválida ou falha de assinatura.
        """
        requested = self.effective_scopes(scopes)
        if not requested:
            raise TokenIssuanceError("No OAuth scopes requested")

        iat = int(self._clock()) if issued_at is None else issued_at
        claims: dict[str, object] = {
            "iss": self._credential.issuer_email,
            "scope": " ".join(requested),
            "aud": self._token_uri,
            "iat": iat,
            "exp": iat + ASSERTION_LIFETIME_SECONDS,
        }
        if self._credential.subject:
            claims["sub"] = self._credential.subject

        try:
            assertion = jwt.encode(self._get_signer(), claims)
        except (ValueError, TypeError) as exc:
            raise TokenIssuanceError(f"Failed to sign assertion: {type(exc).__name__}") from exc
        return assertion.decode("ascii") if isinstance(assertion, bytes) else assertion

    async def issue_token(self, scopes: Iterable[str]) -> AccessToken:
        """Troca uma assertion nova por access token.

        Raises:
            TokenIssuanceError: falha de rede, status não-2xx (com status e
                corpo) ou resposta sem `access_token`.
        """
        started = time.perf_counter()
        requested = self.effective_scopes(scopes)
        issued_at = int(self._clock())
        assertion = self.build_assertion(requested, issued_at=issued_at)

        try:
            response = await self._http.request(
                "POST",
                self._token_uri,
                data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
            )
        except HttpError as exc:
            record_latency(
                "token_issuer", "issue_token", _elapsed_ms(started), outcome="error"
            )
            raise TokenIssuanceError("Token endpoint unreachable") from exc

        if not response.is_success:
            record_latency(
                "token_issuer", "issue_token", _elapsed_ms(started), outcome="error"
            )
            logger.warning(
                "token_issuance_failed",
                extra={"status_code": response.status_code, "scope_count": len(requested)},
            )
            raise TokenIssuanceError(
                f"Token endpoint {response.status_code} {response.text}".rstrip(),
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
            value = str(payload["access_token"])
            expires_in = int(payload.get("expires_in") or ASSERTION_LIFETIME_SECONDS)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            record_latency(
                "token_issuer", "issue_token", _elapsed_ms(started), outcome="error"
            )
            raise TokenIssuanceError(
                "Token endpoint response malformed",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        record_latency("token_issuer", "issue_token", _elapsed_ms(started))
        logger.info("token_issued", extra={"scope_count": len(requested), "expires_in": expires_in})
        return AccessToken(
            value=value,
            scopes=requested,
            expires_at_epoch=issued_at + expires_in,
        )

    def _get_signer(self) -> crypt.Signer:
        if self._signer is None:
            self._signer = crypt.RSASigner.from_string(self._credential.private_key_pem)
        return self._signer


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
