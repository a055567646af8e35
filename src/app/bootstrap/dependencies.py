"""Factories: criação das implementações concretas.

Este módulo centraliza a montagem de credencial, clientes HTTP e
dispatcher a partir das settings de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.discord.followup_client import DiscordFollowupClient
from app.domain.credentials import ServiceAccountCredential
from app.infra.google import GoogleDirectoryClient, ServiceAccountTokenIssuer
from app.infra.http import HttpClient, HttpClientConfig
from app.services.directory_commands import DirectoryCommandExecutor
from app.services.interaction_dispatcher import InteractionDispatcher
from config.settings import get_discord_settings, get_google_directory_settings

if TYPE_CHECKING:
    from config.settings import DiscordSettings, GoogleDirectorySettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Google
# ──────────────────────────────────────────────────────────────────────────────


def create_service_account_credential(
    settings: GoogleDirectorySettings | None = None,
) -> ServiceAccountCredential:
    """Monta a credencial da service account a partir das settings."""
    settings = settings or get_google_directory_settings()
    return ServiceAccountCredential(
        issuer_email=settings.client_email,
        private_key_pem=settings.private_key,
        subject=settings.subject or None,
        scopes_override=settings.scopes_override,
    )


def create_google_http_client(settings: GoogleDirectorySettings | None = None) -> HttpClient:
    settings = settings or get_google_directory_settings()
    return HttpClient(
        HttpClientConfig(
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )
    )


def create_token_issuer(
    settings: GoogleDirectorySettings | None = None,
    http_client: HttpClient | None = None,
) -> ServiceAccountTokenIssuer:
    settings = settings or get_google_directory_settings()
    return ServiceAccountTokenIssuer(
        create_service_account_credential(settings),
        token_uri=settings.token_uri,
        http_client=http_client or create_google_http_client(settings),
    )


def create_directory_client(
    settings: GoogleDirectorySettings | None = None,
    http_client: HttpClient | None = None,
) -> GoogleDirectoryClient:
    settings = settings or get_google_directory_settings()
    http_client = http_client or create_google_http_client(settings)
    client = GoogleDirectoryClient(
        create_token_issuer(settings, http_client),
        base_url=settings.api_base_url,
        customer=settings.customer,
        http_client=http_client,
    )
    logger.info(
        "directory_client_created",
        extra={
            "customer": client.customer,
            "delegated": bool(settings.subject),
            "scopes_override": len(settings.scopes_override),
        },
    )
    return client


# ──────────────────────────────────────────────────────────────────────────────
# Discord
# ──────────────────────────────────────────────────────────────────────────────


def create_followup_client(settings: DiscordSettings | None = None) -> DiscordFollowupClient:
    return DiscordFollowupClient(settings or get_discord_settings())


def create_interaction_dispatcher() -> InteractionDispatcher:
    """Dispatcher com executor do diretório e canal de follow-up reais."""
    return InteractionDispatcher(
        executor=DirectoryCommandExecutor(create_directory_client()),
        followup_sender=create_followup_client(),
    )
