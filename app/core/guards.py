"""Authorization guards evaluated against the token user before a handler runs.

Each route declares an ordered list of guards; they run in that order and the first
failure raises ForbiddenError. Guards only read the user; none of them touch the database
or mutate anything.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from app.core.exceptions import ForbiddenError
from app.schemas.auth import CurrentUser


class Guard(ABC):
    """A capability predicate. Subclasses raise ForbiddenError from check()."""

    @abstractmethod
    def check(self, user: CurrentUser | None) -> None: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Authenticated(Guard):
    """Fails closed when no user is attached to the request."""

    def check(self, user: CurrentUser | None) -> None:
        if user is None:
            raise ForbiddenError("Authentication required")


class RequireRoles(Guard):
    """Passes if the user has any one of the roles."""

    def __init__(self, roles: Iterable[str]) -> None:
        self.roles = frozenset(roles)
        if not self.roles:
            raise ValueError("RequireRoles needs at least one role")

    def check(self, user: CurrentUser | None) -> None:
        if user is None:
            raise ForbiddenError("Authentication required")
        if not self.roles & user.role_names:
            raise ForbiddenError(
                f"Access denied: requires one of the roles {', '.join(sorted(self.roles))}"
            )

    def __repr__(self) -> str:
        return f"RequireRoles({sorted(self.roles)!r})"


class RequirePermissions(Guard):
    """Passes only if the user holds every permission ('resource:action')."""

    def __init__(self, permissions: Iterable[str]) -> None:
        self.permissions = frozenset(permissions)
        for name in self.permissions:
            resource, sep, action = name.partition(":")
            if not sep or not resource or not action:
                raise ValueError(f"Permission must look like 'resource:action', got {name!r}")

    def check(self, user: CurrentUser | None) -> None:
        if user is None:
            raise ForbiddenError("Authentication required")
        missing = self.permissions - user.permission_names
        if missing:
            raise ForbiddenError(
                f"Access denied: missing permissions {', '.join(sorted(missing))}"
            )

    def __repr__(self) -> str:
        return f"RequirePermissions({sorted(self.permissions)!r})"


class PlatformAdmin(Guard):
    """Passes only for the platform administrator, regardless of roles."""

    def check(self, user: CurrentUser | None) -> None:
        if user is None:
            raise ForbiddenError("Authentication required")
        if user.is_admin is not True:
            raise ForbiddenError("Access denied: Platform administrator privileges required")


authenticated = Authenticated()
platform_admin = PlatformAdmin()


def require_roles(*roles: str) -> RequireRoles:
    return RequireRoles(roles)


def require_permissions(*permissions: str) -> RequirePermissions:
    return RequirePermissions(permissions)


def run_guards(user: CurrentUser | None, guards: Sequence[Guard]) -> None:
    """Evaluate guards in order; the first failing guard raises."""
    for guard in guards:
        guard.check(user)
