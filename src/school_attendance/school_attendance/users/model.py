from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a staff account.

    Note: plain data object, no DB access code here.
    """

    user_id: str
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Viewer:
    """Who is asking; drives role-based scoping of attendance queries."""

    user_id: str
    role: Role

    @property
    def scoped_submitter(self):
        """Beadles only see the records they submitted."""
        return self.user_id if self.role == Role.BEADLE else None
