"""Auth gateway port (abstract interface).

The storefront does not issue sessions. It only resolves a bearer token to a
user and looks up that user's role, through whichever identity backend the
deployment uses.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

ADMIN_ROLE = "admin"


class AuthGatewayError(Exception):
    """The identity backend could not be reached or answered unexpectedly."""


@dataclass(frozen=True)
class Principal:
    """The caller behind a request."""

    user_id: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ADMIN_ROLE


ANONYMOUS = Principal()


class AuthGateway(ABC):
    """Abstract identity backend."""

    @abstractmethod
    def resolve_user(self, token: str) -> str | None:
        """Return the user id the token belongs to, or None for an invalid token."""
        ...

    @abstractmethod
    def role_for(self, user_id: str) -> str | None:
        """Return the role recorded on the user's profile, if any."""
        ...
