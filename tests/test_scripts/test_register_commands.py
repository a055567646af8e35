"""Testes do script de registro dos slash commands."""

from __future__ import annotations

import json

import httpx
import pytest

from config.settings import DiscordSettings
from scripts.register_commands import main, register_commands

SETTINGS = DiscordSettings(bot_token="bot-secret", application_id="555")


def test_dry_run_prints_schema(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--dry-run"]) == 0

    commands = json.loads(capsys.readouterr().out)
    assert [c["name"] for c in commands] == ["user", "group", "admin"]


def test_register_posts_each_root_command() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if json.loads(request.content)["name"] == "admin":
            return httpx.Response(400, text="bad schema")
        return httpx.Response(201, json={})

    commands = [{"name": "user"}, {"name": "group"}, {"name": "admin"}]
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        stats = register_commands(SETTINGS, commands, client=client)

    assert stats.registered == ["user", "group"]
    assert stats.failed == ["admin (400) bad schema"]
    assert str(requests[0].url) == "https://discord.com/api/v10/applications/555/commands"
    assert requests[0].headers["Authorization"] == "Bot bot-secret"
