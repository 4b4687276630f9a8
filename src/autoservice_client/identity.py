from __future__ import annotations

from dataclasses import dataclass

from .logger import get_logger, log_action
from .models import UserRole

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """Read-only view of the signed-in user handed to each screen."""

    token: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() == UserRole.ADMIN.value


ANONYMOUS = Identity()


class IdentityStore:
    def __init__(self) -> None:
        self._identity = ANONYMOUS

    @property
    def current(self) -> Identity:
        return self._identity

    def save_credentials(self, token: str, role: str) -> Identity:
        self._identity = Identity(token=token, role=role.upper())
        log_action(logger, module="identity", action="save_credentials", outcome="success", role=self._identity.role)
        return self._identity

    def logout(self) -> None:
        self._identity = ANONYMOUS
        log_action(logger, module="identity", action="logout", outcome="success")
