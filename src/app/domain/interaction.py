"""Modelo de domínio da interação recebida pelo webhook.

O payload do Discord é validado uma única vez na borda (pydantic) e
circula imutável pelo restante do fluxo.
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class InteractionKind(IntEnum):
    """Tipos de interação tratados pelo serviço."""

    PING = 1
    APPLICATION_COMMAND = 2


class OptionType(IntEnum):
    """Tipos de opção de slash command usados no schema."""

    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3


class InteractionOption(BaseModel):
    """Nó da árvore de argumentos (grupo → subcomando → opções)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    type: int = OptionType.STRING
    value: str | int | float | bool | None = None
    options: list[InteractionOption] = Field(default_factory=list)

    def find(self, name: str) -> InteractionOption | None:
        """Primeira opção filha com o nome exato."""
        return find_option(self.options, name)


class InteractionData(BaseModel):
    """Bloco `data` de um application command."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    options: list[InteractionOption] = Field(default_factory=list)


class Interaction(BaseModel):
    """Interação recebida (ping ou comando)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: int
    id: str = ""
    token: str = ""
    application_id: str = ""
    data: InteractionData | None = None

    @property
    def is_ping(self) -> bool:
        return self.type == InteractionKind.PING

    @property
    def is_command(self) -> bool:
        return self.type == InteractionKind.APPLICATION_COMMAND

    @property
    def command_name(self) -> str | None:
        return self.data.name if self.data else None

    @property
    def options(self) -> list[InteractionOption]:
        return list(self.data.options) if self.data else []


def find_option(options: list[InteractionOption], name: str) -> InteractionOption | None:
    """Busca por nome exato; a primeira ocorrência vence."""
    for option in options:
        if option.name == name:
            return option
    return None


InteractionOption.model_rebuild()
