"""Permission tokens and the per-request authorization policy.

Every handler receives a ``Principal`` built from the session token and asks
it ``can(...)`` instead of re-implementing role checks inline.
"""
import enum
from dataclasses import dataclass, field
from typing import Any

from ensemble.models.user import ADMIN_ROLE


class Permission(str, enum.Enum):
    MANAGE_USERS = "MANAGE_USERS"
    MANAGE_ROLES = "MANAGE_ROLES"
    MANAGE_EVENTS = "MANAGE_EVENTS"
    VIEW_ADMIN = "VIEW_ADMIN"
    VIEW_ATTENDANCE = "VIEW_ATTENDANCE"


ALL_PERMISSIONS = [p.value for p in Permission]


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as described by their session claims."""

    id: str
    email: str
    name: str
    role: str
    roles: tuple[str, ...] = ()
    permissions: frozenset[str] = field(default_factory=frozenset)
    must_change_password: bool = False

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "Principal":
        return cls(
            id=str(claims["id"]),
            email=claims.get("email", ""),
            name=claims.get("name", ""),
            role=claims.get("role", ""),
            roles=tuple(r.upper() for r in claims.get("roles", [])),
            permissions=frozenset(claims.get("permissions", [])),
            must_change_password=bool(claims.get("must_change_password", False)),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE or ADMIN_ROLE in self.roles

    def can(self, *required: Permission) -> bool:
        """True for admins, or when any of ``required`` is held."""
        if self.is_admin:
            return True
        return any(p.value in self.permissions for p in required)

    def owns_or_can(self, user_id: str, *required: Permission) -> bool:
        return self.id == user_id or self.can(*required)
