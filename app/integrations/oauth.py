"""OAuth 2.0 authorization-code sign-in with Google and Discord.

Each provider builds its authorize URL, exchanges the callback code for a provider access
token and maps the provider's user info onto an OAuthProfile.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
from fastapi import status

from app.core.exceptions import HyNexusError
from app.schemas.auth import OAuthProfile

if TYPE_CHECKING:
    from pydantic import SecretStr

    from app.core.config import Settings

logger = logging.getLogger(__name__)


class OAuthError(HyNexusError):
    """Provider rejected the code, or returned an unusable profile."""

    status_code = status.HTTP_401_UNAUTHORIZED


class OAuthNotConfiguredError(HyNexusError):
    """Unknown provider, or the provider's client id/secret are not set."""

    status_code = status.HTTP_404_NOT_FOUND


class OAuthProvider(ABC):
    """Base authorization-code flow. Subclasses set the endpoints and map user info."""

    name: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scope: str

    def __init__(
        self,
        client_id: str | None,
        client_secret: SecretStr | None,
        settings: Settings,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(
            self.client_id
            and self.client_secret is not None
            and self.client_secret.get_secret_value()
        )

    @property
    def redirect_uri(self) -> str:
        return (
            f"{self.settings.OAUTH_REDIRECT_BASE_URL}"
            f"{self.settings.API_V1_PREFIX}/auth/oauth/{self.name}/callback"
        )

    def _extra_authorize_params(self) -> dict[str, str]:
        return {}

    def get_authorize_url(self, state: str) -> str:
        if not self.is_configured:
            raise OAuthNotConfiguredError(f"{self.name} sign-in is not configured")
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
            **self._extra_authorize_params(),
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, client: httpx.AsyncClient, code: str) -> str:
        """Exchange the callback code for the provider's access token."""
        if self.client_secret is None:
            raise OAuthNotConfiguredError(f"{self.name} sign-in is not configured")
        response = await client.post(
            self.token_url,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret.get_secret_value(),
                "code": code,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            logger.error(
                "%s token exchange failed: status=%s", self.name, response.status_code
            )
            raise OAuthError(f"{self.name} token exchange failed ({response.status_code})")
        access_token = response.json().get("access_token")
        if not access_token:
            raise OAuthError(f"{self.name} token response missing access_token")
        return access_token

    async def fetch_user_info(self, client: httpx.AsyncClient, access_token: str) -> dict[str, Any]:
        response = await client.get(
            self.userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if response.status_code != 200:
            logger.error(
                "%s user info request failed: status=%s", self.name, response.status_code
            )
            raise OAuthError(f"Failed to get {self.name} user info ({response.status_code})")
        return response.json()

    @abstractmethod
    def to_profile(self, data: dict[str, Any]) -> OAuthProfile: ...

    async def authenticate(self, code: str) -> OAuthProfile:
        """Complete the flow: exchange the code and map the user info."""
        if not self.is_configured:
            raise OAuthNotConfiguredError(f"{self.name} sign-in is not configured")
        timeout = httpx.Timeout(self.settings.OAUTH_REQUEST_TIMEOUT_SEC)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                access_token = await self.exchange_code(client, code)
                data = await self.fetch_user_info(client, access_token)
        except httpx.HTTPError as e:
            logger.error("%s request failed: %s", self.name, e)
            raise OAuthError(f"{self.name} is unreachable") from e
        return self.to_profile(data)


class GoogleOAuth(OAuthProvider):
    name = "google"
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://www.googleapis.com/oauth2/v2/userinfo"
    scope = "openid email profile"

    def _extra_authorize_params(self) -> dict[str, str]:
        return {"prompt": "select_account"}

    def to_profile(self, data: dict[str, Any]) -> OAuthProfile:
        if not data.get("id") or not data.get("email"):
            raise OAuthError("google profile is missing id or email")
        return OAuthProfile(
            provider=self.name,
            provider_id=str(data["id"]),
            email=data["email"],
            name=data.get("name"),
            profile_data={
                "picture": data.get("picture"),
                "emailVerified": data.get("verified_email", False),
                "locale": data.get("locale"),
            },
        )


class DiscordOAuth(OAuthProvider):
    name = "discord"
    authorize_url = "https://discord.com/oauth2/authorize"
    token_url = "https://discord.com/api/oauth2/token"
    userinfo_url = "https://discord.com/api/users/@me"
    scope = "identify email"

    def to_profile(self, data: dict[str, Any]) -> OAuthProfile:
        if not data.get("id") or not data.get("email"):
            raise OAuthError("discord profile is missing id or email")
        return OAuthProfile(
            provider=self.name,
            provider_id=str(data["id"]),
            email=data["email"],
            name=data.get("global_name") or data.get("username"),
            profile_data={
                "username": data.get("username"),
                "avatar": data.get("avatar"),
                "emailVerified": data.get("verified", False),
            },
        )


def get_provider(name: str, settings: Settings) -> OAuthProvider:
    """Return the configured provider called name."""
    if name == GoogleOAuth.name:
        provider: OAuthProvider = GoogleOAuth(
            settings.GOOGLE_OAUTH_CLIENT_ID, settings.GOOGLE_OAUTH_CLIENT_SECRET, settings
        )
    elif name == DiscordOAuth.name:
        provider = DiscordOAuth(
            settings.DISCORD_OAUTH_CLIENT_ID, settings.DISCORD_OAUTH_CLIENT_SECRET, settings
        )
    else:
        raise OAuthNotConfiguredError(f"Unknown sign-in provider {name!r}")
    if not provider.is_configured:
        raise OAuthNotConfiguredError(f"{name} sign-in is not configured")
    return provider
