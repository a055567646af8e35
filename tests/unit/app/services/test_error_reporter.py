"""Testes da formatação de erros para o follow-up."""

from __future__ import annotations

from app.services.error_reporter import format_error
from utils.errors import TokenIssuanceError, UpstreamApiError


def test_message_with_embedded_json_is_pretty_printed() -> None:
    error = RuntimeError('Google API 404 {"error":{"code":404,"message":"Resource Not Found"}}')

    assert format_error(error) == (
        "```json\n"
        "{\n"
        '  "error": {\n'
        '    "code": 404,\n'
        '    "message": "Resource Not Found"\n'
        "  }\n"
        "}\n"
        "```"
    )


def test_upstream_error_uses_body() -> None:
    error = UpstreamApiError(403, '{"error":{"code":403,"message":"Not Authorized"}}')

    result = format_error(error)

    assert result.startswith("```json\n{")
    assert '"message": "Not Authorized"' in result


def test_token_error_body_preferred() -> None:
    error = TokenIssuanceError(
        "Token endpoint 400 ...", status_code=400, body='{"error":"invalid_grant"}'
    )

    assert format_error(error) == '```json\n{\n  "error": "invalid_grant"\n}\n```'


def test_plain_message() -> None:
    assert format_error(ValueError("Missing required field(s): email")) == (
        "```\nMissing required field(s): email\n```"
    )


def test_invalid_json_falls_back_to_plain() -> None:
    assert format_error(RuntimeError("bad {payload")) == "```\nbad {payload\n```"


def test_json_array_is_not_structured() -> None:
    assert format_error(RuntimeError("[1, 2]")) == "```\n[1, 2]\n```"


def test_non_ascii_preserved() -> None:
    result = format_error(RuntimeError('erro {"message":"Usuário não encontrado"}'))
    assert "Usuário não encontrado" in result


def test_empty_message_uses_type_name() -> None:
    assert format_error(TimeoutError()) == "```\nTimeoutError\n```"


def test_broken_str_never_raises() -> None:
    class Broken(Exception):
        def __str__(self) -> str:
            raise RuntimeError("boom")

    assert format_error(Broken()) == "```\nBroken\n```"
