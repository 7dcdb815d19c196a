"""Auth routes plus the token and guard dependencies used by every protected route."""

import secrets
import uuid
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.exceptions import UnauthorizedError
from app.core.guards import Guard, authenticated, run_guards
from app.core.security import decode_access_token
from app.integrations.oauth import get_provider
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileResponse,
    RefreshRequest,
    RegisterRequest,
    RoleClaim,
)
from app.services import auth as auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_MAX_AGE = 600


def _invalid_token(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the user it describes.

    The user is built from the token claims alone (no database lookup), so role and
    permission changes apply once the client obtains a new access token.
    """
    if credentials is None:
        raise _invalid_token("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _invalid_token("Invalid or expired token")

    sub = payload.get("sub")
    email = payload.get("email")
    if not sub or not email:
        raise _invalid_token("Invalid token payload")
    try:
        return CurrentUser(
            id=uuid.UUID(str(sub)),
            email=email,
            roles=[RoleClaim.model_validate(r) for r in payload.get("roles") or []],
            is_admin=payload.get("isAdmin") is True,
        )
    except (ValueError, ValidationError):
        raise _invalid_token("Invalid token payload")


def guarded(*guards: Guard) -> Callable[..., CurrentUser]:
    """
    Build a dependency that authenticates the request and then runs the guards in the
    order given. The first failing guard rejects the request with 403.
    """
    pipeline = (authenticated, *guards)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        run_guards(current_user, pipeline)
        return current_user

    return dependency


def _client_meta(request: Request) -> tuple[str | None, str | None]:
    user_agent = request.headers.get("user-agent")
    ip_address = request.client.host if request.client else None
    return user_agent, ip_address


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create a password account and return an access/refresh token pair."""
    return auth_service.register(db, body, *_client_meta(request))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns an access/refresh token pair.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    return auth_service.login(db, body, *_client_meta(request))


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Exchange a refresh token for a new access token. The refresh token is unchanged."""
    return auth_service.refresh_access_token(db, body.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Revoke the refresh token. Repeating the call is harmless."""
    auth_service.logout(db, body.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=ProfileResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    return auth_service.get_profile(db, current_user.id)


@router.get("/oauth/{provider}")
def oauth_start(
    provider: str,
    settings: Annotated[Settings, Depends(get_settings)],
) -> RedirectResponse:
    """Redirect to the provider's consent page."""
    oauth = get_provider(provider, settings)
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(oauth.get_authorize_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        secure=settings.APP_ENV == "prod",
        samesite="lax",
    )
    return response


@router.get("/oauth/{provider}/callback", response_model=AuthResponse)
async def oauth_callback(
    provider: str,
    request: Request,
    response: Response,
    code: Annotated[str, Query(min_length=1)],
    state: Annotated[str, Query(min_length=1)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Finish provider sign-in: find, link or create the account and issue tokens."""
    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if not expected_state or not secrets.compare_digest(expected_state, state):
        raise UnauthorizedError("Invalid OAuth state")
    oauth = get_provider(provider, settings)
    profile = await oauth.authenticate(code)
    # oauth_login uses the synchronous session; keep it off the event loop.
    result = await run_in_threadpool(
        auth_service.oauth_login, db, profile, *_client_meta(request), settings=settings
    )
    response.delete_cookie(OAUTH_STATE_COOKIE)
    return result
