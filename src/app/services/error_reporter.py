"""Formatação de erros para exibição no canal de follow-up.

Erros remotos costumam carregar JSON estruturado no corpo. Quando o
erro expõe `body` (UpstreamApiError, TokenIssuanceError) o corpo é
usado diretamente; caso contrário busca-se o primeiro `{` da mensagem.
"""

from __future__ import annotations

import json
from typing import Any

_JSON_FENCE = "```json\n{}\n```"
_PLAIN_FENCE = "```\n{}\n```"


def format_error(error: BaseException | object) -> str:
    """Converte um erro em bloco de código pronto para o usuário.

    Nunca levanta exceção e nunca retorna string vazia.
    """
    text = _error_text(error)

    structured = _pretty_json(getattr(error, "body", None))
    if structured is None:
        structured = _pretty_json(_from_first_brace(text))
    if structured is not None:
        return _JSON_FENCE.format(structured)

    return _PLAIN_FENCE.format(text)


def _error_text(error: BaseException | object) -> str:
    try:
        text = str(error)
    except Exception:  # noqa: BLE001 - __str__ arbitrário não pode derrubar o relatório
        text = ""
    if not text.strip():
        text = type(error).__name__
    return text


def _from_first_brace(text: str) -> str | None:
    index = text.find("{")
    if index < 0:
        return None
    return text[index:].strip()


def _pretty_json(candidate: Any) -> str | None:
    if not isinstance(candidate, str) or not candidate.strip():
        return None
    try:
        parsed = json.loads(candidate)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    return json.dumps(parsed, indent=2, ensure_ascii=False)
