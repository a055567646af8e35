"""Cliente REST da Google Admin Directory API.

Cada operação emite um token novo com o escopo mínimo necessário e o
reutiliza apenas entre as páginas da mesma listagem. Status não-2xx
viram `UpstreamApiError` com status e corpo preservados.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from app.infra.google import scopes
from app.infra.http import HttpClient, HttpError
from config.settings import DIRECTORY_API_BASE_URL
from utils.errors import InfrastructureError, UpstreamApiError

if TYPE_CHECKING:
    import httpx

    from app.protocols import TokenIssuerProtocol

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER = "my_customer"


def _key(value: str) -> str:
    return quote(value, safe="")


def _org_unit_path(path: str) -> str:
    # A API espera o caminho sem a barra inicial
    return quote(path.lstrip("/"), safe="/")


def _compact(params: dict[str, str | None] | None) -> dict[str, str]:
    return {k: v for k, v in (params or {}).items() if v}


class GoogleDirectoryClient:
    """Implementação concreta de `DirectoryClientProtocol`."""

    def __init__(
        self,
        token_issuer: TokenIssuerProtocol,
        *,
        base_url: str = DIRECTORY_API_BASE_URL,
        customer: str = DEFAULT_CUSTOMER,
        http_client: HttpClient | None = None,
    ) -> None:
        self._issuer = token_issuer
        self._base_url = base_url.rstrip("/")
        self._customer = customer or DEFAULT_CUSTOMER
        self._http = http_client or HttpClient()

    @property
    def customer(self) -> str:
        return self._customer

    # ── transporte ───────────────────────────────────────────

    async def _bearer(self, scope: str) -> dict[str, str]:
        token = await self._issuer.issue_token([scope])
        return {"Authorization": f"Bearer {token.value}"}

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        *,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                f"{self._base_url}/{path}",
                headers=headers,
                params=params or None,
                json=body,
            )
        except HttpError as exc:
            logger.warning(
                "directory_api_unreachable",
                extra={"method": method, "resource": path.split("/", 1)[0]},
            )
            raise InfrastructureError("Google Directory API unreachable") from exc

        if not response.is_success:
            logger.warning(
                "directory_api_error",
                extra={
                    "method": method,
                    "resource": path.split("/", 1)[0],
                    "status_code": response.status_code,
                },
            )
            raise UpstreamApiError(response.status_code, response.text)
        return response

    async def _call(
        self,
        method: str,
        path: str,
        scope: str,
        *,
        params: dict[str, str | None] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = await self._bearer(scope)
        response = await self._send(method, path, headers, params=_compact(params), body=body)
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    async def _list(
        self,
        path: str,
        scope: str,
        item_key: str,
        *,
        params: dict[str, str | None] | None = None,
    ) -> list[dict[str, Any]]:
        """Segue `nextPageToken` → `pageToken` até a última página."""
        headers = await self._bearer(scope)
        query = _compact(params)
        items: list[dict[str, Any]] = []
        previous_token: str | None = None
        while True:
            response = await self._send("GET", path, headers, params=query)
            data = response.json() if response.content else {}
            items.extend(data.get(item_key) or [])
            next_token = data.get("nextPageToken")
            if not next_token:
                return items
            if next_token == previous_token:
                logger.warning(
                    "directory_pagination_stalled",
                    extra={"resource": path.split("/", 1)[0], "item_count": len(items)},
                )
                return items
            previous_token = next_token
            query = {**query, "pageToken": next_token}

    def _customer_path(self, resource: str) -> str:
        return f"customer/{_key(self._customer)}/{resource}"

    # ── users ────────────────────────────────────────────────

    async def get_user(self, user_key: str) -> dict[str, Any]:
        return await self._call("GET", f"users/{_key(user_key)}", scopes.USER_READONLY)

    async def create_user(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call("POST", "users", scopes.USER, body=body)

    async def update_user(self, user_key: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call("PATCH", f"users/{_key(user_key)}", scopes.USER, body=body)

    async def make_user_admin(self, user_key: str, is_admin: bool) -> None:
        await self._call(
            "POST",
            f"users/{_key(user_key)}/makeAdmin",
            scopes.USER_SECURITY,
            body={"status": is_admin},
        )

    async def list_users(
        self, *, domain: str | None = None, customer: str | None = None
    ) -> list[dict[str, Any]]:
        params = {"domain": domain, "customer": customer}
        if not domain and not customer:
            params["customer"] = self._customer
        return await self._list("users", scopes.USER_READONLY, "users", params=params)

    async def delete_user(self, user_key: str) -> None:
        await self._call("DELETE", f"users/{_key(user_key)}", scopes.USER)

    async def undelete_user(self, user_key: str) -> None:
        await self._call("POST", f"users/{_key(user_key)}/undelete", scopes.USER, body={})

    async def create_user_alias(self, user_key: str, alias: str) -> dict[str, Any]:
        return await self._call(
            "POST", f"users/{_key(user_key)}/aliases", scopes.USER_ALIAS, body={"alias": alias}
        )

    async def list_user_aliases(self, user_key: str) -> list[dict[str, Any]]:
        data = await self._call("GET", f"users/{_key(user_key)}/aliases", scopes.USER_READONLY)
        return list(data.get("aliases") or [])

    async def delete_user_alias(self, user_key: str, alias: str) -> None:
        await self._call(
            "DELETE", f"users/{_key(user_key)}/aliases/{_key(alias)}", scopes.USER_ALIAS
        )

    # ── groups ───────────────────────────────────────────────

    async def create_group(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call("POST", "groups", scopes.GROUP, body=body)

    async def update_group(self, group_key: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call("PATCH", f"groups/{_key(group_key)}", scopes.GROUP, body=body)

    async def get_group(self, group_key: str) -> dict[str, Any]:
        return await self._call("GET", f"groups/{_key(group_key)}", scopes.GROUP_READONLY)

    async def list_groups(
        self, *, domain: str | None = None, customer: str | None = None
    ) -> list[dict[str, Any]]:
        params = {"domain": domain, "customer": customer}
        if not domain and not customer:
            params["customer"] = self._customer
        return await self._list("groups", scopes.GROUP_READONLY, "groups", params=params)

    async def list_groups_for_member(self, user_key: str) -> list[dict[str, Any]]:
        return await self._list(
            "groups", scopes.GROUP_READONLY, "groups", params={"userKey": user_key}
        )

    async def delete_group(self, group_key: str) -> None:
        await self._call("DELETE", f"groups/{_key(group_key)}", scopes.GROUP)

    async def add_group_alias(self, group_key: str, alias: str) -> dict[str, Any]:
        return await self._call(
            "POST", f"groups/{_key(group_key)}/aliases", scopes.GROUP, body={"alias": alias}
        )

    async def list_group_aliases(self, group_key: str) -> list[dict[str, Any]]:
        data = await self._call("GET", f"groups/{_key(group_key)}/aliases", scopes.GROUP_READONLY)
        return list(data.get("aliases") or [])

    async def delete_group_alias(self, group_key: str, alias: str) -> None:
        await self._call("DELETE", f"groups/{_key(group_key)}/aliases/{_key(alias)}", scopes.GROUP)

    # ── members ──────────────────────────────────────────────

    async def list_group_members(self, group_key: str) -> list[dict[str, Any]]:
        return await self._list(
            f"groups/{_key(group_key)}/members", scopes.GROUP_MEMBER_READONLY, "members"
        )

    async def add_group_member(
        self, group_key: str, email: str, role: str = "MEMBER"
    ) -> dict[str, Any]:
        return await self._call(
            "POST",
            f"groups/{_key(group_key)}/members",
            scopes.GROUP_MEMBER,
            body={"email": email, "role": role or "MEMBER"},
        )

    async def update_group_member(
        self, group_key: str, member_key: str, role: str
    ) -> dict[str, Any]:
        return await self._call(
            "PATCH",
            f"groups/{_key(group_key)}/members/{_key(member_key)}",
            scopes.GROUP_MEMBER,
            body={"role": role},
        )

    async def remove_group_member(self, group_key: str, member_key: str) -> None:
        await self._call(
            "DELETE", f"groups/{_key(group_key)}/members/{_key(member_key)}", scopes.GROUP_MEMBER
        )

    # ── org units ────────────────────────────────────────────

    async def create_org_unit(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call("POST", self._customer_path("orgunits"), scopes.ORGUNIT, body=body)

    async def update_org_unit(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call(
            "PATCH",
            self._customer_path(f"orgunits/{_org_unit_path(path)}"),
            scopes.ORGUNIT,
            body=body,
        )

    async def get_org_unit(self, path: str) -> dict[str, Any]:
        return await self._call(
            "GET", self._customer_path(f"orgunits/{_org_unit_path(path)}"), scopes.ORGUNIT_READONLY
        )

    async def list_org_units(self) -> list[dict[str, Any]]:
        data = await self._call(
            "GET", self._customer_path("orgunits"), scopes.ORGUNIT_READONLY, params={"type": "all"}
        )
        return list(data.get("organizationUnits") or [])

    async def delete_org_unit(self, path: str) -> None:
        await self._call(
            "DELETE", self._customer_path(f"orgunits/{_org_unit_path(path)}"), scopes.ORGUNIT
        )

    # ── roles ────────────────────────────────────────────────

    async def list_roles(self) -> list[dict[str, Any]]:
        return await self._list(
            self._customer_path("roles"), scopes.ROLE_MANAGEMENT_READONLY, "items"
        )

    async def list_role_assignments(self, user_key: str | None = None) -> list[dict[str, Any]]:
        return await self._list(
            self._customer_path("roleassignments"),
            scopes.ROLE_MANAGEMENT_READONLY,
            "items",
            params={"userKey": user_key},
        )

    async def create_role_assignment(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call(
            "POST", self._customer_path("roleassignments"), scopes.ROLE_MANAGEMENT, body=body
        )
