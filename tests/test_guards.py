"""Unit tests for authorization guards: roles (any), permissions (all), platform admin."""

import unittest
import uuid

from app.core.exceptions import ForbiddenError
from app.core.guards import (
    Guard,
    RequirePermissions,
    RequireRoles,
    authenticated,
    platform_admin,
    require_permissions,
    require_roles,
    run_guards,
)
from app.schemas.auth import CurrentUser, PermissionClaim, RoleClaim


def _user(roles: dict[str, list[str]] | None = None, is_admin: bool = False) -> CurrentUser:
    """Build a token user; roles maps role name -> ['resource:action', ...]."""
    claims = []
    for name, perms in (roles or {}).items():
        claims.append(
            RoleClaim(
                id=str(uuid.uuid4()),
                name=name,
                permissions=[
                    PermissionClaim(resource=p.split(":")[0], action=p.split(":")[1])
                    for p in perms
                ],
            )
        )
    return CurrentUser(id=uuid.uuid4(), email="u@example.com", roles=claims, is_admin=is_admin)


class TestAuthenticated(unittest.TestCase):
    def test_missing_user_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            authenticated.check(None)

    def test_any_user_passes(self) -> None:
        authenticated.check(_user())


class TestRequireRoles(unittest.TestCase):
    """A user needs at least one of the listed roles."""

    def test_any_role_suffices(self) -> None:
        guard = require_roles("admin", "moderator")
        guard.check(_user({"moderator": []}))
        guard.check(_user({"admin": []}))

    def test_no_matching_role_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            require_roles("admin").check(_user({"user": ["servers:read"]}))

    def test_empty_role_list_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RequireRoles([])


class TestRequirePermissions(unittest.TestCase):
    """A user needs every listed permission, possibly spread across roles."""

    def test_all_required(self) -> None:
        guard = require_permissions("servers:read", "servers:delete")
        with self.assertRaises(ForbiddenError) as ctx:
            guard.check(_user({"user": ["servers:read"]}))
        self.assertIn("servers:delete", ctx.exception.message)

    def test_permissions_union_across_roles(self) -> None:
        guard = require_permissions("servers:read", "servers:update")
        guard.check(_user({"user": ["servers:read"], "moderator": ["servers:update"]}))

    def test_malformed_permission_rejected(self) -> None:
        for bad in ("servers", "servers:", ":read"):
            with self.assertRaises(ValueError):
                RequirePermissions([bad])


class TestPlatformAdmin(unittest.TestCase):
    """Only the isAdmin flag counts; the admin role does not."""

    def test_admin_flag_passes(self) -> None:
        platform_admin.check(_user(is_admin=True))

    def test_admin_role_without_flag_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError) as ctx:
            platform_admin.check(_user({"admin": ["servers:approve"]}))
        self.assertEqual(
            ctx.exception.message,
            "Access denied: Platform administrator privileges required",
        )


class TestGuardBase(unittest.TestCase):
    def test_guard_without_check_cannot_be_built(self) -> None:
        class Incomplete(Guard):
            pass

        with self.assertRaises(TypeError):
            Incomplete()


class TestRunGuards(unittest.TestCase):
    """Guards run in declared order and the first failure wins."""

    def test_first_failure_reported(self) -> None:
        user = _user({"user": ["servers:read"]})
        with self.assertRaises(ForbiddenError) as ctx:
            run_guards(user, [require_roles("admin"), require_permissions("servers:delete")])
        self.assertIn("roles", ctx.exception.message)

        with self.assertRaises(ForbiddenError) as ctx:
            run_guards(user, [require_permissions("servers:delete"), require_roles("admin")])
        self.assertIn("permissions", ctx.exception.message)

    def test_all_pass(self) -> None:
        user = _user({"admin": ["servers:delete"]}, is_admin=True)
        run_guards(
            user,
            [authenticated, require_roles("admin"), require_permissions("servers:delete"), platform_admin],
        )


if __name__ == "__main__":
    unittest.main()
