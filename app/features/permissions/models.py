"""
Role and permission table.

The mapping is static and monotonic: owner ⊇ admin ⊇ editor ⊇ viewer.
"""
import enum
from typing import Mapping


class Role(str, enum.Enum):
    """Role held by a user inside one organization."""
    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class Permission(str, enum.Enum):
    """Atomic capability gating one class of operation."""
    DELETE_ORG = "delete_org"
    MANAGE_BILLING = "manage_billing"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_SETTINGS = "manage_settings"
    EDIT_DOCS = "edit_docs"
    VIEW_DOCS = "view_docs"


_VIEWER = frozenset({Permission.VIEW_DOCS})
_EDITOR = _VIEWER | {Permission.EDIT_DOCS}
_ADMIN = _EDITOR | {Permission.MANAGE_MEMBERS, Permission.MANAGE_SETTINGS}
_OWNER = _ADMIN | {Permission.MANAGE_BILLING, Permission.DELETE_ORG}

ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = {
    Role.OWNER: _OWNER,
    Role.ADMIN: _ADMIN,
    Role.EDITOR: _EDITOR,
    Role.VIEWER: _VIEWER,
}


def permissions_of(role: Role | str | None) -> frozenset[Permission]:
    """
    Permissions granted by ``role``.

    Unknown or missing roles grant nothing.
    """
    if role is None:
        return frozenset()
    try:
        return ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return frozenset()


def has_permission(role: Role | str | None, permission: Permission | str) -> bool:
    """
    Check whether ``role`` grants ``permission``.

    Raises:
        ValueError: if ``permission`` is not a known permission name
    """
    return Permission(permission) in permissions_of(role)
