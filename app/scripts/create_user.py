"""
Create a user (e.g. the platform admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD USERNAME [--role ROLE] [--admin]
Example:
  python -m app.scripts.create_user owner@example.com your-secure-password owner --role admin --admin
"""
import argparse
import re
import sys

from app.core.database import SessionLocal
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
    hash_password,
)
from app.models import User
from app.services.auth import PASSWORD_PROVIDER
from app.services.rbac import DEFAULT_ROLE, DEFAULT_ROLES, ensure_default_roles


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a HyNexus user.")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("--role", default=DEFAULT_ROLE, choices=sorted(DEFAULT_ROLES))
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Mark as platform administrator (can approve/reject servers)",
    )
    args = parser.parse_args()

    email = args.email.strip()
    username = args.username.strip()
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN) or not re.match(
        USERNAME_PATTERN, username
    ):
        print("Username must be 3-20 letters, digits or underscores.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(User)
            .filter((User.email == email) | (User.username == username))
            .first()
        )
        if existing:
            print("A user with that email or username already exists.", file=sys.stderr)
            return 1
        roles = ensure_default_roles(db)
        user = User(
            email=email,
            username=username,
            password=hash_password(args.password),
            auth_provider=PASSWORD_PROVIDER,
            is_active=True,
            email_verified=True,
            is_admin=args.admin,
            roles=[roles[args.role]],
        )
        db.add(user)
        db.commit()
        admin_note = " (platform admin)" if args.admin else ""
        print(f"Created user '{email}' with role '{args.role}'{admin_note}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
