"""Escopos OAuth de menor privilégio por recurso da Directory API."""

_PREFIX = "https://www.googleapis.com/auth/admin.directory."

USER = _PREFIX + "user"
USER_READONLY = _PREFIX + "user.readonly"
USER_ALIAS = _PREFIX + "user.alias"
USER_SECURITY = _PREFIX + "user.security"
GROUP = _PREFIX + "group"
GROUP_READONLY = _PREFIX + "group.readonly"
GROUP_MEMBER = _PREFIX + "group.member"
GROUP_MEMBER_READONLY = _PREFIX + "group.member.readonly"
ORGUNIT = _PREFIX + "orgunit"
ORGUNIT_READONLY = _PREFIX + "orgunit.readonly"
ROLE_MANAGEMENT = _PREFIX + "rolemanagement"
ROLE_MANAGEMENT_READONLY = _PREFIX + "rolemanagement.readonly"
