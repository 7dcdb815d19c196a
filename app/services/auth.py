"""Authentication: registration, password and OAuth login, token refresh and logout."""

import logging
import re
import uuid
from datetime import UTC, datetime
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.core.security import (
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    create_access_token,
    hash_password,
    verify_password,
)
from app.models import Role, User
from app.schemas.auth import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    OAuthProfile,
    ProfileResponse,
    RegisterRequest,
)
from app.services.rbac import DEFAULT_ROLE, find_role_by_name
from app.services.refresh_tokens import (
    create_refresh_token,
    revoke_refresh_token,
    validate_refresh_token,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

PASSWORD_PROVIDER = "password"
INVALID_CREDENTIALS = "Invalid credentials"
USERNAME_SHORT_PREFIX = "user_"

_USERNAME_DISALLOWED = re.compile(r"[^a-zA-Z0-9_]")
_WHITESPACE = re.compile(r"\s+")


@lru_cache
def _dummy_password_hash() -> str:
    # Stand-in for accounts with no usable hash; every failed login pays one bcrypt check.
    return hash_password("hynexus-no-such-account")


def build_token_claims(user: User) -> dict[str, Any]:
    """
    Access token claims for a user: id, email, admin flag and a snapshot of roles
    with their permissions. Guards trust this snapshot until the token expires.
    """
    roles = [
        {
            "id": str(role.id),
            "name": role.name,
            "permissions": [
                {"resource": p.resource, "action": p.action} for p in role.permissions
            ],
        }
        for role in user.roles
    ]
    return {
        "sub": str(user.id),
        "email": user.email,
        "roles": roles,
        "isAdmin": bool(user.is_admin),
    }


def generate_access_token(user: User) -> str:
    return create_access_token(build_token_claims(user))


def _auth_response(user: User, access_token: str, refresh_token: str) -> AuthResponse:
    return AuthResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=AuthUser(
            id=user.id,
            email=user.email,
            name=user.name,
            auth_provider=user.auth_provider,
        ),
    )


def _issue_tokens(
    db: Session, user: User, user_agent: str | None, ip_address: str | None
) -> AuthResponse:
    access_token = generate_access_token(user)
    refresh_token = create_refresh_token(db, user, user_agent, ip_address)
    return _auth_response(user, access_token, refresh_token)


def _default_roles(db: Session) -> list[Role]:
    role = find_role_by_name(db, DEFAULT_ROLE)
    return [role] if role is not None else []


def register(
    db: Session,
    body: RegisterRequest,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> AuthResponse:
    """Create a password account with the default role and return a token pair."""
    if db.query(User).filter(User.email == body.email).first() is not None:
        raise ConflictError("User with this email already exists")
    if db.query(User).filter(User.username == body.username).first() is not None:
        raise ConflictError("Username is already taken")

    user = User(
        email=body.email,
        password=hash_password(body.password),
        name=body.name,
        username=body.username,
        is_active=True,
        auth_provider=PASSWORD_PROVIDER,
        last_login=datetime.now(UTC),
        roles=_default_roles(db),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email/username.
        db.rollback()
        raise ConflictError("User with this email or username already exists") from e
    db.refresh(user)

    logger.info("Registered user id=%s", user.id)
    return _issue_tokens(db, user, user_agent, ip_address)


def login(
    db: Session,
    body: LoginRequest,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> AuthResponse:
    """
    Password login. Unknown email, OAuth-only account and wrong password all fail with
    the same message so the response does not reveal whether the account exists.
    """
    user = db.query(User).filter(User.email == body.email).first()
    if user is None:
        verify_password(body.password, _dummy_password_hash())
        logger.info("Login failed: unknown email")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not user.password:
        verify_password(body.password, _dummy_password_hash())
        logger.info("Login failed: user_id=%s has no password (OAuth-only)", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not verify_password(body.password, user.password):
        logger.info("Login failed: wrong password for user_id=%s", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not user.is_active:
        raise UnauthorizedError("Account is not active")
    if user.is_banned:
        raise UnauthorizedError("Account has been banned")

    user.last_login = datetime.now(UTC)
    db.commit()
    return _issue_tokens(db, user, user_agent, ip_address)


def validate_user(db: Session, user_id: uuid.UUID) -> User | None:
    """Return the user if it exists and is active."""
    return (
        db.query(User)
        .filter(User.id == user_id, User.is_active.is_(True))
        .first()
    )


def _username_base(profile: OAuthProfile) -> str:
    if profile.name and profile.name.strip():
        return _WHITESPACE.sub("_", profile.name.strip()).lower()
    return profile.email.split("@")[0].lower()


def generate_unique_username(db: Session, base_username: str) -> str:
    """
    Turn an arbitrary name into an unused username of 3-20 [a-zA-Z0-9_] characters.

    Disallowed characters become '_', short names get a 'user_' prefix, and collisions
    are resolved with '_1', '_2', ... while keeping the 20 character cap.
    """
    clean = _USERNAME_DISALLOWED.sub("_", base_username).lower()
    if len(clean) < USERNAME_MIN_LEN:
        clean = f"{USERNAME_SHORT_PREFIX}{clean}"
    clean = clean[:USERNAME_MAX_LEN]

    username = clean
    counter = 1
    while db.query(User.id).filter(User.username == username).first() is not None:
        suffix = f"_{counter}"
        username = clean[: USERNAME_MAX_LEN - len(suffix)] + suffix
        counter += 1
    return username


def find_or_create_oauth_user(
    db: Session,
    profile: OAuthProfile,
    settings: "Settings | None" = None,
) -> User:
    """
    Resolve an OAuth identity to a user.

    1. Same provider and provider id: refresh cached profile data and display name.
    2. Same email: link the identity onto that account. When
       OAUTH_LINK_REQUIRES_VERIFIED_EMAIL is set the account's email must be verified,
       otherwise anyone controlling a provider account with that email could take it over.
    3. Otherwise create a password-less account with the default role.
    """
    settings = settings or get_settings()

    user = (
        db.query(User)
        .filter(
            User.auth_provider == profile.provider,
            User.auth_provider_id == profile.provider_id,
        )
        .first()
    )
    if user is not None:
        user.auth_provider_data = profile.profile_data
        user.name = profile.name or user.name
        db.commit()
        return user

    user = db.query(User).filter(User.email == profile.email).first()
    if user is not None:
        if settings.OAUTH_LINK_REQUIRES_VERIFIED_EMAIL and not user.email_verified:
            logger.warning(
                "Refusing to link %s identity to unverified account user_id=%s",
                profile.provider,
                user.id,
            )
            raise ConflictError(
                "An account with this email already exists. "
                "Verify its email address before linking a sign-in provider."
            )
        user.auth_provider = profile.provider
        user.auth_provider_id = profile.provider_id
        user.auth_provider_data = profile.profile_data
        db.commit()
        logger.info("Linked %s identity to user_id=%s", profile.provider, user.id)
        return user

    user = User(
        email=profile.email,
        name=profile.name,
        username=generate_unique_username(db, _username_base(profile)),
        auth_provider=profile.provider,
        auth_provider_id=profile.provider_id,
        auth_provider_data=profile.profile_data,
        is_active=True,
        password=None,
        last_login=datetime.now(UTC),
        roles=_default_roles(db),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user id=%s from %s sign-in", user.id, profile.provider)
    return user


def oauth_login(
    db: Session,
    profile: OAuthProfile,
    user_agent: str | None = None,
    ip_address: str | None = None,
    settings: "Settings | None" = None,
) -> AuthResponse:
    """Resolve the OAuth identity and issue a token pair."""
    user = find_or_create_oauth_user(db, profile, settings)
    if not user.is_active:
        raise UnauthorizedError("Account is not active")
    if user.is_banned:
        raise UnauthorizedError("Account has been banned")
    user.last_login = datetime.now(UTC)
    db.commit()
    return _issue_tokens(db, user, user_agent, ip_address)


def refresh_access_token(db: Session, refresh_token: str) -> AuthResponse:
    """Mint a new access token; the refresh token itself is returned unchanged."""
    user = validate_refresh_token(db, refresh_token)
    return _auth_response(user, generate_access_token(user), refresh_token)


def logout(db: Session, refresh_token: str) -> None:
    """Revoke the refresh token. Logging out twice is not an error."""
    revoke_refresh_token(db, refresh_token)


def get_profile(db: Session, user_id: uuid.UUID) -> ProfileResponse:
    user = validate_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return ProfileResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        username=user.username,
        avatar_url=user.avatar_url,
        bio=user.bio,
        auth_provider=user.auth_provider,
        email_verified=user.email_verified,
        is_admin=user.is_admin,
        roles=sorted(role.name for role in user.roles),
    )
