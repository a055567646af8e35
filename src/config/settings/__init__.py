"""Agregador de settings do serviço de diretório.

Re-exporta settings e getters de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)

# Discord
from config.settings.discord import (
    DISCORD_API_BASE_URL,
    DISCORD_API_VERSION,
    DiscordSettings,
    get_discord_settings,
)

# Google Directory
from config.settings.google_directory import (
    DIRECTORY_API_BASE_URL,
    GOOGLE_TOKEN_URI,
    GoogleDirectorySettings,
    get_google_directory_settings,
)

__all__ = [
    # Constants
    "DIRECTORY_API_BASE_URL",
    "DISCORD_API_BASE_URL",
    "DISCORD_API_VERSION",
    "GOOGLE_TOKEN_URI",
    # Base
    "BaseSettings",
    # Channels
    "DiscordSettings",
    "Environment",
    "GoogleDirectorySettings",
    "get_base_settings",
    "get_discord_settings",
    "get_google_directory_settings",
]
