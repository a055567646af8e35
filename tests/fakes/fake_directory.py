"""Fakes in-memory dos colaboradores remotos para testes deterministas."""

from __future__ import annotations

from typing import Any

from app.domain.credentials import AccessToken

_NO_CONTENT_PREFIXES = ("delete_", "remove_", "make_", "undelete_")


class FakeDirectoryClient:
    """Registra cada operação chamada e devolve respostas configuradas.

    Sem resposta configurada: `list_*` devolve [], operações sem corpo
    devolvem None e as demais {}.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self._responses = responses or {}
        self._errors = errors or {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        async def _operation(*args: Any, **kwargs: Any) -> Any:
            self.calls.append((name, args, kwargs))
            if name in self._errors:
                raise self._errors[name]
            if name in self._responses:
                return self._responses[name]
            if name.startswith("list_"):
                return []
            if name.startswith(_NO_CONTENT_PREFIXES):
                return None
            return {}

        return _operation

    @property
    def operation_names(self) -> list[str]:
        return [name for name, _, _ in self.calls]


class FakeFollowupSender:
    """Canal de follow-up em memória."""

    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self._error = error

    async def send_followup(self, token: str, content: str) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append((token, content))


class FakeTokenIssuer:
    """Emite tokens previsíveis e registra os escopos pedidos."""

    def __init__(self) -> None:
        self.requested: list[tuple[str, ...]] = []

    async def issue_token(self, scopes: Any) -> AccessToken:
        requested = tuple(scopes)
        self.requested.append(requested)
        return AccessToken(
            value=f"token-{len(self.requested)}",
            scopes=requested,
            expires_at_epoch=4_000_000_000,
        )
