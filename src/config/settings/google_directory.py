"""Settings específicas do Google Directory (Admin SDK).

Credenciais da service account usadas no fluxo OAuth JWT-bearer e
endpoints da Directory API.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

# Constantes Google
GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
DIRECTORY_API_BASE_URL: str = "https://admin.googleapis.com/admin/directory/v1"
DEFAULT_CUSTOMER: str = "my_customer"


@dataclass(frozen=True)
class GoogleDirectorySettings:
    """Configurações da service account e da Directory API.

    Attributes:
        client_email: E-mail da service account (claim ``iss``)
        private_key: Chave privada RSA PKCS8 em PEM
        subject: Usuário administrador para delegação (claim ``sub``)
        customer: Customer ID usado em org units e roles
        scopes_override: Scopes que substituem os pedidos por operação
        token_uri: Endpoint OAuth (também usado como ``aud``)
        api_base_url: URL base da Directory API
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Tentativas extras para GETs idempotentes
    """

    client_email: str = ""
    private_key: str = field(default="", repr=False)
    subject: str = ""
    customer: str = DEFAULT_CUSTOMER
    scopes_override: tuple[str, ...] = ()

    token_uri: str = GOOGLE_TOKEN_URI
    api_base_url: str = DIRECTORY_API_BASE_URL

    request_timeout_seconds: float = 20.0
    max_retries: int = 2

    def validate(self) -> list[str]:
        """Valida configurações mínimas da service account.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.client_email:
            errors.append("GOOGLE_CLIENT_EMAIL não configurado")

        if "PRIVATE KEY" not in self.private_key:
            errors.append("GOOGLE_PRIVATE_KEY ausente ou fora do formato PEM")

        if self.request_timeout_seconds <= 0:
            errors.append("GOOGLE_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("GOOGLE_MAX_RETRIES deve ser >= 0")

        return errors


def _parse_scopes(raw: str) -> tuple[str, ...]:
    return tuple(scope.strip() for scope in raw.split(",") if scope.strip())


def _load_from_env() -> GoogleDirectorySettings:
    """Carrega GoogleDirectorySettings a partir de variáveis de ambiente."""
    # Secrets costumam chegar com "\n" literal em vez de quebra de linha
    private_key = os.getenv("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n")
    return GoogleDirectorySettings(
        client_email=os.getenv("GOOGLE_CLIENT_EMAIL", ""),
        private_key=private_key,
        subject=os.getenv("GOOGLE_SUBJECT", ""),
        customer=os.getenv("GOOGLE_CUSTOMER", "") or DEFAULT_CUSTOMER,
        scopes_override=_parse_scopes(os.getenv("GOOGLE_SCOPES", "")),
        token_uri=os.getenv("GOOGLE_TOKEN_URI", GOOGLE_TOKEN_URI),
        api_base_url=os.getenv("GOOGLE_DIRECTORY_API_BASE_URL", DIRECTORY_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("GOOGLE_REQUEST_TIMEOUT_SECONDS", "20")),
        max_retries=int(os.getenv("GOOGLE_MAX_RETRIES", "2")),
    )


@lru_cache(maxsize=1)
def get_google_directory_settings() -> GoogleDirectorySettings:
    """Retorna instância cacheada de GoogleDirectorySettings."""
    return _load_from_env()
