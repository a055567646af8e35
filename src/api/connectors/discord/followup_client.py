"""Canal de follow-up: POST no webhook da interação.

Entrega at-most-once: nenhuma tentativa extra em caso de falha.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.http import HttpClient, HttpClientConfig, HttpError
from utils.errors import FollowupDeliveryError

if TYPE_CHECKING:
    from config.settings import DiscordSettings

logger = logging.getLogger(__name__)

# Limite de caracteres de `content` em mensagens do Discord
MAX_CONTENT_LENGTH = 2000


def truncate_content(content: str) -> str:
    """Corta o conteúdo no limite, preservando o fechamento de code fence."""
    if len(content) <= MAX_CONTENT_LENGTH:
        return content
    suffix = "\n...\n```" if content.startswith("```") else "\n..."
    return content[: MAX_CONTENT_LENGTH - len(suffix)] + suffix


class DiscordFollowupClient:
    """Implementação concreta de `FollowupSenderProtocol`."""

    def __init__(
        self,
        settings: DiscordSettings,
        *,
        http_client: HttpClient | None = None,
    ) -> None:
        self._settings = settings
        self._http = http_client or HttpClient(
            HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=0,
            )
        )

    async def send_followup(self, token: str, content: str) -> None:
        """Envia `{content}` para o webhook da interação.

        Raises:
            FollowupDeliveryError: URL inválida, falha de conexão ou status não-2xx.
        """
        try:
            url = self._settings.followup_url(token)
        except ValueError as exc:
            raise FollowupDeliveryError(f"followup_url_invalid: {exc}") from exc

        payload = {
            "content": truncate_content(content),
            "allowed_mentions": {"parse": []},
        }
        try:
            response = await self._http.request(
                "POST",
                url,
                headers={"Authorization": f"Bot {self._settings.bot_token}"},
                json=payload,
            )
        except HttpError as exc:
            raise FollowupDeliveryError("followup_connection_error") from exc

        if not response.is_success:
            raise FollowupDeliveryError(
                f"followup_status_{response.status_code}",
                status_code=response.status_code,
            )
        logger.info("followup_sent", extra={"status_code": response.status_code})
