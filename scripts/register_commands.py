#!/usr/bin/env python3
"""Registra os slash commands globais da aplicação no Discord.

Uso:
    python scripts/register_commands.py            # registra
    python scripts/register_commands.py --dry-run  # só imprime o JSON

Requer DISCORD_BOT_TOKEN e DISCORD_APP_ID no ambiente.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.domain.commands import to_discord_schema
from config.settings import DiscordSettings, get_discord_settings


@dataclass(frozen=True)
class RegistrationStats:
    registered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def register_commands(
    settings: DiscordSettings,
    commands: list[dict[str, Any]],
    *,
    client: httpx.Client,
) -> RegistrationStats:
    """POST de cada comando raiz no endpoint de comandos da aplicação."""
    stats = RegistrationStats()
    url = settings.commands_url()
    headers = {"Authorization": f"Bot {settings.bot_token}"}
    for command in commands:
        response = client.post(url, json=command, headers=headers)
        if response.is_success:
            stats.registered.append(command["name"])
        else:
            stats.failed.append(f"{command['name']} ({response.status_code}) {response.text}")
    return stats


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Imprime o payload de registro sem chamar a API.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    commands = to_discord_schema()

    if args.dry_run:
        print(json.dumps(commands, indent=2, ensure_ascii=False))
        return 0

    settings = get_discord_settings()
    if not settings.bot_token or not settings.application_id:
        print("Defina DISCORD_BOT_TOKEN e DISCORD_APP_ID", file=sys.stderr)
        return 2

    with httpx.Client(timeout=settings.request_timeout_seconds) as client:
        stats = register_commands(settings, commands, client=client)

    for name in stats.registered:
        print(f"registered /{name}")
    for failure in stats.failed:
        print(f"failed /{failure}", file=sys.stderr)
    return 1 if stats.failed else 0


if __name__ == "__main__":
    sys.exit(main())
