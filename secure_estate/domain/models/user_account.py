"""User account model as seen by the escalation core.

Only the fields the core needs: identity and role. The role replaces
identity-based admin checks; authorization policies decide from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(Enum):
    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True, eq=True)
class UserAccount:
    """A registered user.

    Attributes:
        user_id: Opaque identifier.
        email: Contact address.
        role: Permission role.
        is_active: False once the account is deactivated.
    """

    user_id: str
    email: str
    role: UserRole = UserRole.MEMBER
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
