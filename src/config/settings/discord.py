"""Settings específicas do Discord.

Credenciais de verificação de interações (Ed25519) e do canal de
follow-up (webhook por interação).
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache

# Constantes da Discord API
DISCORD_API_VERSION: str = "v10"
DISCORD_API_BASE_URL: str = "https://discord.com/api"

_HEX_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class DiscordSettings:
    """Configurações do canal Discord.

    Attributes:
        public_key: Chave pública Ed25519 da aplicação (hex)
        bot_token: Token do bot para o canal de follow-up
        application_id: ID da aplicação Discord
        api_version: Versão da API
        api_base_url: URL base da API
        request_timeout_seconds: Timeout para requisições HTTP
        skip_verify: Desliga verificação de assinatura (apenas ambiente confiável)
    """

    # Credenciais
    public_key: str = ""
    bot_token: str = field(default="", repr=False)
    application_id: str = ""

    # API
    api_version: str = DISCORD_API_VERSION
    api_base_url: str = DISCORD_API_BASE_URL

    # Timeouts
    request_timeout_seconds: float = 10.0

    # Desenvolvimento local
    skip_verify: bool = False

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url}/{self.api_version}"

    def followup_url(self, interaction_token: str) -> str:
        """Retorna URL do webhook de follow-up de uma interação.

        Raises:
            ValueError: Se application_id ou token não informados.
        """
        if not self.application_id:
            raise ValueError("application_id é obrigatório")
        if not interaction_token:
            raise ValueError("interaction_token é obrigatório")
        return f"{self.api_endpoint}/webhooks/{self.application_id}/{interaction_token}"

    def commands_url(self) -> str:
        """URL de registro de comandos globais da aplicação."""
        if not self.application_id:
            raise ValueError("application_id é obrigatório")
        return f"{self.api_endpoint}/applications/{self.application_id}/commands"

    def validate(self, environment: str = "development") -> list[str]:
        """Valida configurações mínimas de Discord.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.skip_verify and not _HEX_KEY_PATTERN.match(self.public_key):
            errors.append("DISCORD_PUBLIC_KEY ausente ou não é hex de 32 bytes")

        if not self.bot_token:
            errors.append("DISCORD_BOT_TOKEN não configurado")

        if not self.application_id:
            errors.append("DISCORD_APP_ID não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("DISCORD_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.skip_verify and environment.lower() in ("production", "prod"):
            errors.append("DISCORD_SKIP_VERIFY não pode ser usado em produção")

        return errors


def _load_from_env() -> DiscordSettings:
    """Carrega DiscordSettings a partir de variáveis de ambiente."""
    return DiscordSettings(
        public_key=os.getenv("DISCORD_PUBLIC_KEY", "").strip(),
        bot_token=os.getenv("DISCORD_BOT_TOKEN", ""),
        application_id=os.getenv("DISCORD_APP_ID", ""),
        api_version=os.getenv("DISCORD_API_VERSION", DISCORD_API_VERSION),
        api_base_url=os.getenv("DISCORD_API_BASE_URL", DISCORD_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("DISCORD_REQUEST_TIMEOUT_SECONDS", "10")),
        skip_verify=os.getenv("DISCORD_SKIP_VERIFY", "").lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_discord_settings() -> DiscordSettings:
    """Retorna instância cacheada de DiscordSettings."""
    return _load_from_env()
