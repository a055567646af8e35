"""Execução dos comandos resolvidos contra a Directory API.

Cada variante de `app.domain.commands` tem um handler que chama o
cliente e devolve o texto de sucesso. Erros remotos propagam sem
tratamento; quem captura é a task diferida.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.domain import commands as cmd

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from app.protocols import DirectoryClientProtocol

# Limite de linhas exibidas em listagens
LIST_LIMIT = 25
EMPTY_LIST = "(none)"


def format_list(
    lines: list[str],
    *,
    title: str | None = None,
    noun: str = "items",
) -> str:
    """Lista com no máximo LIST_LIMIT linhas e sufixo de total."""
    if not lines:
        body = EMPTY_LIST
    else:
        body = "\n".join(lines[:LIST_LIMIT])
        if len(lines) > LIST_LIMIT:
            body += f"\n... {len(lines)} {noun} total"
    return f"{title}:\n{body}" if title else body


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def _alias_lines(aliases: Iterable[Any]) -> list[str]:
    return [f"- {a.get('alias', a) if isinstance(a, dict) else a}" for a in aliases]


class DirectoryCommandExecutor:
    """Mapeia variante de comando → operação do diretório."""

    def __init__(self, directory: DirectoryClientProtocol) -> None:
        self._directory = directory
        self._handlers: dict[type[cmd.DirectoryCommand], Callable[[Any], Awaitable[str]]] = {
            cmd.LookupUser: self._lookup_user,
            cmd.LookupGroupMembers: self._lookup_group_members,
            cmd.CreateGroup: self._create_group,
            cmd.UpdateGroup: self._update_group,
            cmd.GetGroup: self._get_group,
            cmd.ListGroups: self._list_groups,
            cmd.ListGroupsForUser: self._list_groups_for_user,
            cmd.DeleteGroup: self._delete_group,
            cmd.AddMember: self._add_member,
            cmd.UpdateMember: self._update_member,
            cmd.ListMembers: self._list_members,
            cmd.RemoveMember: self._remove_member,
            cmd.AddGroupAlias: self._add_group_alias,
            cmd.ListGroupAliases: self._list_group_aliases,
            cmd.DeleteGroupAlias: self._delete_group_alias,
            cmd.CreateOrgUnit: self._create_org_unit,
            cmd.UpdateOrgUnit: self._update_org_unit,
            cmd.GetOrgUnit: self._get_org_unit,
            cmd.ListOrgUnits: self._list_org_units,
            cmd.DeleteOrgUnit: self._delete_org_unit,
            cmd.ListRoles: self._list_roles,
            cmd.ListRoleAssignments: self._list_role_assignments,
            cmd.AssignRole: self._assign_role,
            cmd.CreateUser: self._create_user,
            cmd.UpdateUser: self._update_user,
            cmd.MakeAdmin: self._make_admin,
            cmd.GetUser: self._get_user,
            cmd.ListUsers: self._list_users,
            cmd.DeleteUser: self._delete_user,
            cmd.UndeleteUser: self._undelete_user,
            cmd.CreateUserAlias: self._create_user_alias,
            cmd.ListUserAliases: self._list_user_aliases,
            cmd.DeleteUserAlias: self._delete_user_alias,
        }

    async def execute(self, command: cmd.DirectoryCommand) -> str:
        """Executa o comando e retorna a mensagem de sucesso."""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Comando sem handler: {type(command).__name__}")
        return await handler(command)

    # ── users ────────────────────────────────────────────────

    async def _lookup_user(self, c: cmd.LookupUser) -> str:
        user = await self._directory.get_user(c.email)
        name = user.get("name") or {}
        return "\n".join([
            f"Name: {name.get('fullName') or '-'}",
            f"Primary email: {user.get('primaryEmail') or c.email}",
            f"Org unit: {user.get('orgUnitPath') or '-'}",
            f"Suspended: {'Yes' if user.get('suspended') else 'No'}",
        ])

    async def _create_user(self, c: cmd.CreateUser) -> str:
        created = await self._directory.create_user({
            "primaryEmail": c.email,
            "name": {"givenName": c.given_name, "familyName": c.family_name},
            "password": c.password,
        })
        return f"User created: {created.get('primaryEmail') or c.email}"

    async def _update_user(self, c: cmd.UpdateUser) -> str:
        updated = await self._directory.update_user(
            c.user, _compact({"orgUnitPath": c.org_unit_path})
        )
        return f"User updated: {updated.get('primaryEmail') or c.user}"

    async def _make_admin(self, c: cmd.MakeAdmin) -> str:
        await self._directory.make_user_admin(c.user, c.is_admin)
        return f"Admin status updated: {c.user} (admin: {c.status})"

    async def _get_user(self, c: cmd.GetUser) -> str:
        user = await self._directory.get_user(c.user)
        return f"User: {user.get('primaryEmail') or c.user}"

    async def _list_users(self, c: cmd.ListUsers) -> str:
        users = await self._directory.list_users(domain=c.domain, customer=c.customer)
        return format_list(
            [f"- {u.get('primaryEmail')}" for u in users], title="Users", noun="users"
        )

    async def _delete_user(self, c: cmd.DeleteUser) -> str:
        await self._directory.delete_user(c.user)
        return f"User deleted: {c.user}"

    async def _undelete_user(self, c: cmd.UndeleteUser) -> str:
        await self._directory.undelete_user(c.user)
        return f"User restored: {c.user}"

    async def _create_user_alias(self, c: cmd.CreateUserAlias) -> str:
        await self._directory.create_user_alias(c.user, c.alias)
        return f"Alias added: {c.alias}"

    async def _list_user_aliases(self, c: cmd.ListUserAliases) -> str:
        aliases = await self._directory.list_user_aliases(c.user)
        return format_list(_alias_lines(aliases), noun="aliases")

    async def _delete_user_alias(self, c: cmd.DeleteUserAlias) -> str:
        await self._directory.delete_user_alias(c.user, c.alias)
        return f"Alias deleted: {c.alias}"

    # ── groups ───────────────────────────────────────────────

    async def _lookup_group_members(self, c: cmd.LookupGroupMembers) -> str:
        members = await self._directory.list_group_members(c.email)
        return format_list(
            [f"- {m.get('email')} ({m.get('role')})" for m in members],
            title="Members",
            noun="members",
        )

    async def _create_group(self, c: cmd.CreateGroup) -> str:
        created = await self._directory.create_group(
            _compact({"email": c.email, "name": c.name, "description": c.description})
        )
        return f"Group created: {created.get('email') or c.email}"

    async def _update_group(self, c: cmd.UpdateGroup) -> str:
        updated = await self._directory.update_group(
            c.group, _compact({"name": c.name, "description": c.description})
        )
        return f"Group updated: {updated.get('email') or c.group}"

    async def _get_group(self, c: cmd.GetGroup) -> str:
        group = await self._directory.get_group(c.group)
        return f"Group: {group.get('email') or c.group} ({group.get('name') or '-'})"

    async def _list_groups(self, c: cmd.ListGroups) -> str:
        groups = await self._directory.list_groups(domain=c.domain, customer=c.customer)
        return format_list(
            [f"- {g.get('email')}" for g in groups], title="Groups", noun="groups"
        )

    async def _list_groups_for_user(self, c: cmd.ListGroupsForUser) -> str:
        groups = await self._directory.list_groups_for_member(c.user)
        return format_list([f"- {g.get('email')}" for g in groups], noun="groups")

    async def _delete_group(self, c: cmd.DeleteGroup) -> str:
        await self._directory.delete_group(c.group)
        return f"Group deleted: {c.group}"

    async def _add_group_alias(self, c: cmd.AddGroupAlias) -> str:
        await self._directory.add_group_alias(c.group, c.alias)
        return f"Alias added: {c.alias}"

    async def _list_group_aliases(self, c: cmd.ListGroupAliases) -> str:
        aliases = await self._directory.list_group_aliases(c.group)
        return format_list(_alias_lines(aliases), noun="aliases")

    async def _delete_group_alias(self, c: cmd.DeleteGroupAlias) -> str:
        await self._directory.delete_group_alias(c.group, c.alias)
        return f"Alias deleted: {c.alias}"

    # ── members ──────────────────────────────────────────────

    async def _add_member(self, c: cmd.AddMember) -> str:
        await self._directory.add_group_member(c.group, c.email, c.role)
        return f"Member added: {c.email} ({c.role})"

    async def _update_member(self, c: cmd.UpdateMember) -> str:
        await self._directory.update_group_member(c.group, c.member, c.role)
        return f"Membership updated: {c.member} ({c.role})"

    async def _list_members(self, c: cmd.ListMembers) -> str:
        members = await self._directory.list_group_members(c.group)
        return format_list(
            [f"- {m.get('email')} ({m.get('role')})" for m in members],
            title="Members",
            noun="members",
        )

    async def _remove_member(self, c: cmd.RemoveMember) -> str:
        await self._directory.remove_group_member(c.group, c.member)
        return f"Membership removed: {c.member}"

    # ── org units ────────────────────────────────────────────

    async def _create_org_unit(self, c: cmd.CreateOrgUnit) -> str:
        created = await self._directory.create_org_unit(_compact({
            "name": c.name,
            "parentOrgUnitPath": c.parent or "/",
            "description": c.description,
        }))
        return f"Org unit created: {created.get('orgUnitPath') or c.name}"

    async def _update_org_unit(self, c: cmd.UpdateOrgUnit) -> str:
        updated = await self._directory.update_org_unit(c.path, _compact({
            "name": c.name,
            "description": c.description,
            "parentOrgUnitPath": c.parent,
        }))
        return f"Org unit updated: {updated.get('orgUnitPath') or c.path}"

    async def _get_org_unit(self, c: cmd.GetOrgUnit) -> str:
        unit = await self._directory.get_org_unit(c.path)
        return f"Org unit: {unit.get('name') or '-'} ({unit.get('orgUnitPath') or c.path})"

    async def _list_org_units(self, c: cmd.ListOrgUnits) -> str:
        units = await self._directory.list_org_units()
        return format_list([f"- {u.get('orgUnitPath')}" for u in units], noun="org units")

    async def _delete_org_unit(self, c: cmd.DeleteOrgUnit) -> str:
        await self._directory.delete_org_unit(c.path)
        return f"Org unit deleted: {c.path}"

    # ── roles ────────────────────────────────────────────────

    async def _list_roles(self, c: cmd.ListRoles) -> str:
        roles = await self._directory.list_roles()
        return format_list(
            [f"- {r.get('roleId')}: {r.get('roleName')}" for r in roles], noun="roles"
        )

    async def _list_role_assignments(self, c: cmd.ListRoleAssignments) -> str:
        assignments = await self._directory.list_role_assignments(c.user)
        return format_list(
            [f"- role {a.get('roleId')} -> {a.get('assignedTo')}" for a in assignments],
            noun="assignments",
        )

    async def _assign_role(self, c: cmd.AssignRole) -> str:
        created = await self._directory.create_role_assignment(_compact({
            "roleId": c.role_id,
            "assignedTo": c.assigned_to,
            "scopeType": c.scope_type or "CUSTOMER",
            "orgUnitId": c.org_unit_id,
        }))
        return f"Role assigned: {created.get('roleAssignmentId') or c.role_id}"
