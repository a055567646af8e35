"""Exceções compartilhadas entre camadas (api, app, infra)."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas em chamadas remotas (OAuth, Directory, Discord)."""


class TokenIssuanceError(InfrastructureError):
    """Falha ao trocar a assertion JWT por access token.

    Attributes:
        status_code: Status HTTP do token endpoint (None se falha local/rede)
        body: Corpo bruto retornado pelo endpoint (pode conter JSON)
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamApiError(InfrastructureError):
    """Resposta não-2xx da Directory API.

    A mensagem segue o formato ``Google API <status> <body>``; o corpo
    também fica disponível em ``body`` para formatação estruturada.
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        message = f"Google API {status_code} {body}".rstrip()
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class FollowupDeliveryError(InfrastructureError):
    """Falha ao entregar a mensagem de follow-up ao Discord."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CommandValidationError(ValueError):
    """Comando com argumentos ausentes, inválidos ou caminho desconhecido."""

    def __init__(
        self,
        message: str,
        *,
        missing_fields: tuple[str, ...] = (),
        subcommand_missing: bool = False,
    ) -> None:
        super().__init__(message)
        self.missing_fields = missing_fields
        self.subcommand_missing = subcommand_missing

    @classmethod
    def missing(cls, fields: tuple[str, ...]) -> CommandValidationError:
        """Cria erro listando os campos obrigatórios ausentes."""
        return cls(f"Missing required field(s): {', '.join(fields)}", missing_fields=fields)


class UnsupportedInteractionError(ValueError):
    """Tipo de interação que o serviço não trata (nem ping nem comando)."""

    def __init__(self, interaction_type: int) -> None:
        super().__init__(f"Unsupported interaction type: {interaction_type}")
        self.interaction_type = interaction_type
