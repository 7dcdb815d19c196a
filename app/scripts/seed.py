"""
Seed default roles and permissions, optionally with demo accounts and a listing.
Run from project root:
  python -m app.scripts.seed [--demo]

Demo accounts (password Foobar1!): admin@admin.com (platform admin) and user@user.com.
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.core.security import hash_password
from app.models import Server, ServerStatus, User
from app.services.auth import PASSWORD_PROVIDER
from app.services.rbac import ADMIN_ROLE, DEFAULT_ROLE, ensure_default_roles
from app.services.servers import generate_slug

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Foobar1!"
DEMO_SERVER_NAME = "Epic Survival Server"


def seed_demo(db: Session) -> None:
    """Create the demo admin, demo user and one approved listing if they are missing."""
    roles = ensure_default_roles(db)
    password = hash_password(DEMO_PASSWORD)
    accounts = (
        ("admin@admin.com", "admin", "Platform Admin", True, ADMIN_ROLE),
        ("user@user.com", "regularuser", "Regular User", False, DEFAULT_ROLE),
    )
    users: dict[str, User] = {}
    for email, username, name, is_admin, role in accounts:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                username=username,
                name=name,
                password=password,
                auth_provider=PASSWORD_PROVIDER,
                is_active=True,
                is_admin=is_admin,
                email_verified=True,
                roles=[roles[role]],
            )
            db.add(user)
        users[email] = user
    db.commit()

    slug = generate_slug(DEMO_SERVER_NAME)
    if db.query(Server.id).filter(Server.slug == slug).first() is None:
        db.add(
            Server(
                owner_id=users["admin@admin.com"].id,
                name=DEMO_SERVER_NAME,
                slug=slug,
                ip_address="play.epicserver.com",
                port=3000,
                description=(
                    "Welcome to Epic Survival Server! Join our friendly community and embark "
                    "on an adventure in a custom-crafted world. We feature custom plugins, "
                    "weekly events, and an active staff team."
                ),
                website_url="https://epicserver.com",
                discord_url="https://discord.gg/epicserver",
                category="Survival",
                region="NA",
                language="en",
                max_players=100,
                current_players=45,
                status=ServerStatus.APPROVED.value,
                is_online=True,
                verified=True,
            )
        )
        db.commit()
    logger.info("Seeded demo accounts (password: %s) and %s", DEMO_PASSWORD, DEMO_SERVER_NAME)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed HyNexus roles and permissions.")
    parser.add_argument("--demo", action="store_true", help="Also create demo users and a server")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        roles = ensure_default_roles(db)
        logger.info("Default roles present: %s", ", ".join(sorted(roles)))
        if args.demo:
            seed_demo(db)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
