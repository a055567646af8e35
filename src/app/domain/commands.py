"""Schema de comandos e resolução da árvore de opções.

Uma única tabela (`COMMAND_SPECS`) alimenta tanto a resolução em tempo
de dispatch quanto o registro dos comandos no Discord. Cada caminho
(comando → grupo → subcomando) resolve para um dataclass imutável com
campos já validados.

A resolução é síncrona e não faz I/O: um argumento obrigatório ausente
vira `CommandValidationError` antes de qualquer chamada remota.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.domain.interaction import OptionType, find_option
from utils.errors import CommandValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.interaction import InteractionOption

MEMBER_ROLES: tuple[str, ...] = ("MEMBER", "MANAGER", "OWNER")
SCOPE_TYPES: tuple[str, ...] = ("CUSTOMER", "ORG_UNIT")
BOOLEAN_CHOICES: tuple[str, ...] = ("true", "false")

# Tipo de application command "CHAT_INPUT" (slash command)
CHAT_INPUT_COMMAND = 1


# ──────────────────────────────────────────────────────────────
# Variantes de comando
# ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DirectoryCommand:
    """Base das variantes resolvidas."""


@dataclass(frozen=True, slots=True)
class LookupUser(DirectoryCommand):
    email: str


@dataclass(frozen=True, slots=True)
class LookupGroupMembers(DirectoryCommand):
    email: str


@dataclass(frozen=True, slots=True)
class CreateGroup(DirectoryCommand):
    email: str
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class UpdateGroup(DirectoryCommand):
    group: str
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class GetGroup(DirectoryCommand):
    group: str


@dataclass(frozen=True, slots=True)
class ListGroups(DirectoryCommand):
    domain: str | None = None
    customer: str | None = None


@dataclass(frozen=True, slots=True)
class ListGroupsForUser(DirectoryCommand):
    user: str


@dataclass(frozen=True, slots=True)
class DeleteGroup(DirectoryCommand):
    group: str


@dataclass(frozen=True, slots=True)
class AddMember(DirectoryCommand):
    group: str
    email: str
    role: str = "MEMBER"


@dataclass(frozen=True, slots=True)
class UpdateMember(DirectoryCommand):
    group: str
    member: str
    role: str = "MEMBER"


@dataclass(frozen=True, slots=True)
class ListMembers(DirectoryCommand):
    group: str


@dataclass(frozen=True, slots=True)
class RemoveMember(DirectoryCommand):
    group: str
    member: str


@dataclass(frozen=True, slots=True)
class AddGroupAlias(DirectoryCommand):
    group: str
    alias: str


@dataclass(frozen=True, slots=True)
class ListGroupAliases(DirectoryCommand):
    group: str


@dataclass(frozen=True, slots=True)
class DeleteGroupAlias(DirectoryCommand):
    group: str
    alias: str


@dataclass(frozen=True, slots=True)
class CreateOrgUnit(DirectoryCommand):
    name: str
    parent: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class UpdateOrgUnit(DirectoryCommand):
    path: str
    name: str | None = None
    description: str | None = None
    parent: str | None = None


@dataclass(frozen=True, slots=True)
class GetOrgUnit(DirectoryCommand):
    path: str


@dataclass(frozen=True, slots=True)
class ListOrgUnits(DirectoryCommand):
    pass


@dataclass(frozen=True, slots=True)
class DeleteOrgUnit(DirectoryCommand):
    path: str


@dataclass(frozen=True, slots=True)
class ListRoles(DirectoryCommand):
    pass


@dataclass(frozen=True, slots=True)
class ListRoleAssignments(DirectoryCommand):
    user: str | None = None


@dataclass(frozen=True, slots=True)
class AssignRole(DirectoryCommand):
    role_id: str
    assigned_to: str
    scope_type: str | None = None
    org_unit_id: str | None = None

    def __post_init__(self) -> None:
        if self.scope_type == "ORG_UNIT" and not self.org_unit_id:
            raise CommandValidationError.missing(("org_unit_id",))


@dataclass(frozen=True, slots=True)
class CreateUser(DirectoryCommand):
    email: str
    given_name: str
    family_name: str
    password: str

    def __repr__(self) -> str:
        return (
            f"CreateUser(email={self.email!r}, given_name={self.given_name!r}, "
            f"family_name={self.family_name!r}, password='***')"
        )


@dataclass(frozen=True, slots=True)
class UpdateUser(DirectoryCommand):
    user: str
    org_unit_path: str | None = None


@dataclass(frozen=True, slots=True)
class MakeAdmin(DirectoryCommand):
    user: str
    status: str

    @property
    def is_admin(self) -> bool:
        return self.status == "true"


@dataclass(frozen=True, slots=True)
class GetUser(DirectoryCommand):
    user: str


@dataclass(frozen=True, slots=True)
class ListUsers(DirectoryCommand):
    domain: str | None = None
    customer: str | None = None


@dataclass(frozen=True, slots=True)
class DeleteUser(DirectoryCommand):
    user: str


@dataclass(frozen=True, slots=True)
class UndeleteUser(DirectoryCommand):
    user: str


@dataclass(frozen=True, slots=True)
class CreateUserAlias(DirectoryCommand):
    user: str
    alias: str


@dataclass(frozen=True, slots=True)
class ListUserAliases(DirectoryCommand):
    user: str


@dataclass(frozen=True, slots=True)
class DeleteUserAlias(DirectoryCommand):
    user: str
    alias: str


# ──────────────────────────────────────────────────────────────
# Tabela de schema
# ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Opção string de um subcomando."""

    name: str
    description: str
    required: bool = False
    choices: tuple[str, ...] = ()

    def to_discord(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(OptionType.STRING),
            "name": self.name,
            "description": self.description,
        }
        if self.required:
            payload["required"] = True
        if self.choices:
            payload["choices"] = [{"name": c, "value": c} for c in self.choices]
        return payload


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Entrada da tabela: caminho completo → variante tipada."""

    path: tuple[str, ...]
    description: str
    command_type: type[DirectoryCommand]
    options: tuple[OptionSpec, ...] = ()

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(o.name for o in self.options if o.required)

    @property
    def display_path(self) -> str:
        return "/" + " ".join(self.path)


def _req(name: str, description: str, choices: tuple[str, ...] = ()) -> OptionSpec:
    return OptionSpec(name, description, required=True, choices=choices)


def _opt(name: str, description: str, choices: tuple[str, ...] = ()) -> OptionSpec:
    return OptionSpec(name, description, choices=choices)


ROOT_DESCRIPTIONS: dict[str, str] = {
    "user": "Show a Google Directory user",
    "group": "List the members of a group",
    "admin": "Manage the Google Directory",
}

GROUP_DESCRIPTIONS: dict[str, str] = {
    "groups": "Groups",
    "members": "Group members",
    "aliases": "Group aliases",
    "orgunits": "Organizational units",
    "roles": "Admin roles",
    "users": "Users",
    "user-aliases": "User aliases",
}

COMMAND_SPECS: tuple[CommandSpec, ...] = (
    CommandSpec(("user",), ROOT_DESCRIPTIONS["user"], LookupUser, (
        _req("email", "User email"),
    )),
    CommandSpec(("group",), ROOT_DESCRIPTIONS["group"], LookupGroupMembers, (
        _req("email", "Group email"),
    )),
    # groups
    CommandSpec(("admin", "groups", "create"), "Create a group", CreateGroup, (
        _req("email", "group@example.com"),
        _opt("name", "Display name"),
        _opt("description", "Description"),
    )),
    CommandSpec(("admin", "groups", "update"), "Update a group", UpdateGroup, (
        _req("group", "Group key or email"),
        _opt("name", "Display name"),
        _opt("description", "Description"),
    )),
    CommandSpec(("admin", "groups", "get"), "Get a group", GetGroup, (
        _req("group", "Group key or email"),
    )),
    CommandSpec(("admin", "groups", "list"), "List groups", ListGroups, (
        _opt("domain", "example.com"),
        _opt("customer", "my_customer"),
    )),
    CommandSpec(("admin", "groups", "list-for-user"), "List a user's groups", ListGroupsForUser, (
        _req("user", "user@example.com"),
    )),
    CommandSpec(("admin", "groups", "delete"), "Delete a group", DeleteGroup, (
        _req("group", "Group key or email"),
    )),
    # members
    CommandSpec(("admin", "members", "add"), "Add a member", AddMember, (
        _req("group", "Group key or email"),
        _req("email", "Member email"),
        _opt("role", "Member role", MEMBER_ROLES),
    )),
    CommandSpec(("admin", "members", "update"), "Change a member's role", UpdateMember, (
        _req("group", "Group key or email"),
        _req("member", "Member key or email"),
        _opt("role", "Member role", MEMBER_ROLES),
    )),
    CommandSpec(("admin", "members", "list"), "List members", ListMembers, (
        _req("group", "Group key or email"),
    )),
    CommandSpec(("admin", "members", "remove"), "Remove a member", RemoveMember, (
        _req("group", "Group key or email"),
        _req("member", "Member key or email"),
    )),
    # aliases
    CommandSpec(("admin", "aliases", "add"), "Add a group alias", AddGroupAlias, (
        _req("group", "Group key or email"),
        _req("alias", "alias@example.com"),
    )),
    CommandSpec(("admin", "aliases", "list"), "List group aliases", ListGroupAliases, (
        _req("group", "Group key or email"),
    )),
    CommandSpec(("admin", "aliases", "delete"), "Delete a group alias", DeleteGroupAlias, (
        _req("group", "Group key or email"),
        _req("alias", "alias@example.com"),
    )),
    # orgunits
    CommandSpec(("admin", "orgunits", "create"), "Create an org unit", CreateOrgUnit, (
        _req("name", "Org unit name"),
        _opt("parent", "Parent path, e.g. /Sales"),
        _opt("description", "Description"),
    )),
    CommandSpec(("admin", "orgunits", "update"), "Update an org unit", UpdateOrgUnit, (
        _req("path", "Org unit path"),
        _opt("name", "New name"),
        _opt("description", "Description"),
        _opt("parent", "New parent path"),
    )),
    CommandSpec(("admin", "orgunits", "get"), "Get an org unit", GetOrgUnit, (
        _req("path", "Org unit path"),
    )),
    CommandSpec(("admin", "orgunits", "list"), "List org units", ListOrgUnits),
    CommandSpec(("admin", "orgunits", "delete"), "Delete an org unit", DeleteOrgUnit, (
        _req("path", "Org unit path"),
    )),
    # roles
    CommandSpec(("admin", "roles", "list"), "List admin roles", ListRoles),
    CommandSpec(("admin", "roles", "assignments"), "List role assignments", ListRoleAssignments, (
        _opt("user", "user@example.com"),
    )),
    CommandSpec(("admin", "roles", "assign"), "Assign a role", AssignRole, (
        _req("role_id", "Role id"),
        _req("assigned_to", "User id"),
        _opt("scope_type", "Assignment scope", SCOPE_TYPES),
        _opt("org_unit_id", "Org unit id (ORG_UNIT scope)"),
    )),
    # users
    CommandSpec(("admin", "users", "create"), "Create a user", CreateUser, (
        _req("email", "Primary email"),
        _req("given_name", "Given name"),
        _req("family_name", "Family name"),
        _req("password", "Initial password"),
    )),
    CommandSpec(("admin", "users", "update"), "Update a user", UpdateUser, (
        _req("user", "user@example.com"),
        _opt("org_unit_path", "New org unit path"),
    )),
    CommandSpec(("admin", "users", "make-admin"), "Grant or revoke super admin", MakeAdmin, (
        _req("user", "user@example.com"),
        _req("status", "Admin status", BOOLEAN_CHOICES),
    )),
    CommandSpec(("admin", "users", "get"), "Get a user", GetUser, (
        _req("user", "user@example.com"),
    )),
    CommandSpec(("admin", "users", "list"), "List users", ListUsers, (
        _opt("domain", "example.com"),
        _opt("customer", "my_customer"),
    )),
    CommandSpec(("admin", "users", "delete"), "Delete a user", DeleteUser, (
        _req("user", "user@example.com"),
    )),
    CommandSpec(("admin", "users", "undelete"), "Restore a deleted user", UndeleteUser, (
        _req("user", "user@example.com"),
    )),
    # user-aliases
    CommandSpec(("admin", "user-aliases", "create"), "Add a user alias", CreateUserAlias, (
        _req("user", "user@example.com"),
        _req("alias", "alias@example.com"),
    )),
    CommandSpec(("admin", "user-aliases", "list"), "List user aliases", ListUserAliases, (
        _req("user", "user@example.com"),
    )),
    CommandSpec(("admin", "user-aliases", "delete"), "Delete a user alias", DeleteUserAlias, (
        _req("user", "user@example.com"),
        _req("alias", "alias@example.com"),
    )),
)

_SPECS_BY_PATH: dict[tuple[str, ...], CommandSpec] = {s.path: s for s in COMMAND_SPECS}


# ──────────────────────────────────────────────────────────────
# Resolução
# ──────────────────────────────────────────────────────────────


def is_known_command(name: str | None) -> bool:
    return name is not None and name in ROOT_DESCRIPTIONS


def is_simple_command(name: str | None) -> bool:
    """Comando raiz sem subcomandos (`/user`, `/group`)."""
    return name is not None and (name,) in _SPECS_BY_PATH


def get_command_spec(path: tuple[str, ...]) -> CommandSpec | None:
    return _SPECS_BY_PATH.get(path)


def resolve_command(
    name: str | None,
    options: Sequence[InteractionOption],
) -> DirectoryCommand:
    """Resolve nome + árvore de opções para a variante tipada.

    A descida segue sempre o primeiro nó do nível (grupo, depois
    subcomando); argumentos são buscados por nome exato e a primeira
    ocorrência vence.

    Raises:
        CommandValidationError: comando/subcomando desconhecido, campo
            obrigatório ausente ou valor fora das escolhas permitidas.
    """
    if not name or name not in ROOT_DESCRIPTIONS:
        raise CommandValidationError(f"Unknown command: {name or '-'}")

    path, leaf_options = _walk_path(name, list(options))
    spec = _SPECS_BY_PATH.get(path)
    if spec is None:
        if len(path) == 1:
            raise CommandValidationError(
                f"Subcommand required: /{name}", subcommand_missing=True
            )
        raise CommandValidationError(f"Unknown subcommand: /{' '.join(path)}")
    return _build_command(spec, leaf_options)


def _walk_path(
    name: str,
    options: list[InteractionOption],
) -> tuple[tuple[str, ...], list[InteractionOption]]:
    path = [name]
    current = options
    while current and current[0].type in (OptionType.SUB_COMMAND_GROUP, OptionType.SUB_COMMAND):
        node = current[0]
        path.append(node.name)
        current = list(node.options)
    return tuple(path), current


def _build_command(spec: CommandSpec, options: list[InteractionOption]) -> DirectoryCommand:
    values: dict[str, str] = {}
    for option_spec in spec.options:
        node = find_option(options, option_spec.name)
        if node is None or node.value is None:
            continue
        value = str(node.value).strip()
        if value:
            values[option_spec.name] = value

    missing = tuple(name for name in spec.required_fields if name not in values)
    if missing:
        raise CommandValidationError.missing(missing)

    for option_spec in spec.options:
        value = values.get(option_spec.name)
        if value is not None and option_spec.choices and value not in option_spec.choices:
            raise CommandValidationError(
                f"Invalid value for {option_spec.name}: {value} "
                f"(expected one of {', '.join(option_spec.choices)})"
            )

    return spec.command_type(**values)


# ──────────────────────────────────────────────────────────────
# Registro
# ──────────────────────────────────────────────────────────────


def to_discord_schema() -> list[dict[str, Any]]:
    """Payload de registro de todos os comandos raiz."""
    commands: list[dict[str, Any]] = []
    for root, description in ROOT_DESCRIPTIONS.items():
        simple = _SPECS_BY_PATH.get((root,))
        if simple is not None:
            options = [o.to_discord() for o in simple.options]
        else:
            options = _group_options(root)
        commands.append({
            "name": root,
            "description": description,
            "type": CHAT_INPUT_COMMAND,
            "options": options,
        })
    return commands


def _group_options(root: str) -> list[dict[str, Any]]:
    groups: list[dict[str, Any]] = []
    for group, description in GROUP_DESCRIPTIONS.items():
        subcommands = [
            {
                "type": int(OptionType.SUB_COMMAND),
                "name": spec.path[2],
                "description": spec.description,
                "options": [o.to_discord() for o in spec.options],
            }
            for spec in COMMAND_SPECS
            if spec.path[:2] == (root, group)
        ]
        if subcommands:
            groups.append({
                "type": int(OptionType.SUB_COMMAND_GROUP),
                "name": group,
                "description": description,
                "options": subcommands,
            })
    return groups
