"""Contrato do cliente da Directory API."""

from __future__ import annotations

from typing import Any, Protocol


class DirectoryClientProtocol(Protocol):
    """Operações CRUD usadas pelos comandos.

    Toda falha remota levanta `UpstreamApiError` (status + body) ou
    `TokenIssuanceError`.
    """

    # users
    async def get_user(self, user_key: str) -> dict[str, Any]: ...

    async def create_user(self, body: dict[str, Any]) -> dict[str, Any]: ...

    async def update_user(self, user_key: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def make_user_admin(self, user_key: str, is_admin: bool) -> None: ...

    async def list_users(
        self, *, domain: str | None = None, customer: str | None = None
    ) -> list[dict[str, Any]]: ...

    async def delete_user(self, user_key: str) -> None: ...

    async def undelete_user(self, user_key: str) -> None: ...

    async def create_user_alias(self, user_key: str, alias: str) -> dict[str, Any]: ...

    async def list_user_aliases(self, user_key: str) -> list[dict[str, Any]]: ...

    async def delete_user_alias(self, user_key: str, alias: str) -> None: ...

    # groups
    async def create_group(self, body: dict[str, Any]) -> dict[str, Any]: ...

    async def update_group(self, group_key: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def get_group(self, group_key: str) -> dict[str, Any]: ...

    async def list_groups(
        self, *, domain: str | None = None, customer: str | None = None
    ) -> list[dict[str, Any]]: ...

    async def list_groups_for_member(self, user_key: str) -> list[dict[str, Any]]: ...

    async def delete_group(self, group_key: str) -> None: ...

    async def add_group_alias(self, group_key: str, alias: str) -> dict[str, Any]: ...

    async def list_group_aliases(self, group_key: str) -> list[dict[str, Any]]: ...

    async def delete_group_alias(self, group_key: str, alias: str) -> None: ...

    # members
    async def list_group_members(self, group_key: str) -> list[dict[str, Any]]: ...

    async def add_group_member(
        self, group_key: str, email: str, role: str = "MEMBER"
    ) -> dict[str, Any]: ...

    async def update_group_member(
        self, group_key: str, member_key: str, role: str
    ) -> dict[str, Any]: ...

    async def remove_group_member(self, group_key: str, member_key: str) -> None: ...

    # org units
    async def create_org_unit(self, body: dict[str, Any]) -> dict[str, Any]: ...

    async def update_org_unit(self, path: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def get_org_unit(self, path: str) -> dict[str, Any]: ...

    async def list_org_units(self) -> list[dict[str, Any]]: ...

    async def delete_org_unit(self, path: str) -> None: ...

    # roles
    async def list_roles(self) -> list[dict[str, Any]]: ...

    async def list_role_assignments(self, user_key: str | None = None) -> list[dict[str, Any]]: ...

    async def create_role_assignment(self, body: dict[str, Any]) -> dict[str, Any]: ...
