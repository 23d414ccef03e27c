from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import Viewer
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    full_name: str
    email: str
    role: Role

    @property
    def viewer(self) -> Viewer:
        return Viewer(user_id=self.user_id, role=self.role)


def require_role(viewer: Viewer, minimum: Role) -> None:
    if not viewer.role.at_least(minimum):
        raise AuthorizationError(f"requires {minimum.value} role or above")


class AuthService:
    """Use case: authenticate a staff member (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "email").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        if not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)

    def resolve_viewer(self, user_id: str) -> Viewer:
        """Re-check a session's user on each request; deactivated accounts lose access."""

        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Session is no longer valid")
        return Viewer(user_id=user.user_id, role=user.role)
