"""Tests for OAuth providers: authorize URLs, code exchange and profile mapping (HTTP mocked)."""

import unittest
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import httpx

from app.core.config import Settings
from app.integrations.oauth import (
    DiscordOAuth,
    GoogleOAuth,
    OAuthError,
    OAuthNotConfiguredError,
    OAuthProvider,
    get_provider,
)

_AsyncClient = httpx.AsyncClient


def _settings(**overrides) -> Settings:
    values = {
        "GOOGLE_OAUTH_CLIENT_ID": "google-client",
        "GOOGLE_OAUTH_CLIENT_SECRET": "google-secret",
        "DISCORD_OAUTH_CLIENT_ID": "discord-client",
        "DISCORD_OAUTH_CLIENT_SECRET": "discord-secret",
        "OAUTH_REDIRECT_BASE_URL": "https://hynexus.example",
    }
    values.update(overrides)
    return Settings(**values)


def _client_factory(transport: httpx.MockTransport):
    """Stand-in for httpx.AsyncClient that keeps the caller's options but routes to transport."""

    def build(**kwargs) -> httpx.AsyncClient:
        return _AsyncClient(transport=transport, **kwargs)

    return build


def _transport(token_status: int = 200, userinfo: dict | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "provider-token"})
        assert request.headers["Authorization"] == "Bearer provider-token"
        return httpx.Response(200, json=userinfo or {})

    return httpx.MockTransport(handler)


class TestGetProvider(unittest.TestCase):
    def test_known_providers(self) -> None:
        self.assertIsInstance(get_provider("google", _settings()), GoogleOAuth)
        self.assertIsInstance(get_provider("discord", _settings()), DiscordOAuth)

    def test_unknown_provider(self) -> None:
        with self.assertRaises(OAuthNotConfiguredError):
            get_provider("github", _settings())

    def test_unconfigured_provider(self) -> None:
        with self.assertRaises(OAuthNotConfiguredError):
            get_provider("google", _settings(GOOGLE_OAUTH_CLIENT_ID=None))


class TestProviderBase(unittest.TestCase):
    def test_provider_must_map_profiles(self) -> None:
        class Incomplete(OAuthProvider):
            name = "incomplete"

        with self.assertRaises(TypeError):
            Incomplete("id", None, _settings())


class TestAuthorizeUrl(unittest.TestCase):
    def test_google_url(self) -> None:
        url = get_provider("google", _settings()).get_authorize_url("state-123")
        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        self.assertEqual(parsed.netloc, "accounts.google.com")
        self.assertEqual(params["state"], ["state-123"])
        self.assertEqual(params["client_id"], ["google-client"])
        self.assertEqual(
            params["redirect_uri"],
            ["https://hynexus.example/api/v1/auth/oauth/google/callback"],
        )


class TestProfileMapping(unittest.TestCase):
    def test_discord_prefers_global_name(self) -> None:
        provider = get_provider("discord", _settings())
        profile = provider.to_profile(
            {"id": 42, "email": "d@example.com", "username": "dguy", "global_name": "D Guy"}
        )
        self.assertEqual(profile.provider_id, "42")
        self.assertEqual(profile.name, "D Guy")

    def test_missing_email_rejected(self) -> None:
        with self.assertRaises(OAuthError):
            get_provider("google", _settings()).to_profile({"id": "1"})


class TestExchange(unittest.IsolatedAsyncioTestCase):
    async def test_code_exchange_and_user_info(self) -> None:
        provider = get_provider("google", _settings())
        transport = _transport(userinfo={"id": "g-1", "email": "g@example.com", "name": "G"})
        async with httpx.AsyncClient(transport=transport) as client:
            token = await provider.exchange_code(client, "code-1")
            data = await provider.fetch_user_info(client, token)
        profile = provider.to_profile(data)
        self.assertEqual(profile.provider, "google")
        self.assertEqual(profile.email, "g@example.com")

    async def test_rejected_code(self) -> None:
        provider = get_provider("google", _settings())
        async with httpx.AsyncClient(transport=_transport(token_status=400)) as client:
            with self.assertRaises(OAuthError):
                await provider.exchange_code(client, "bad-code")

    async def test_exchange_without_secret_is_not_configured(self) -> None:
        provider = GoogleOAuth("google-client", None, _settings())
        async with httpx.AsyncClient(transport=_transport()) as client:
            with self.assertRaises(OAuthNotConfiguredError):
                await provider.exchange_code(client, "code-1")


class TestAuthenticate(unittest.IsolatedAsyncioTestCase):
    """authenticate() runs the whole exchange with its own client."""

    async def test_success(self) -> None:
        provider = get_provider("discord", _settings())
        transport = _transport(userinfo={"id": "d-9", "email": "d@example.com", "username": "dguy"})
        with patch(
            "app.integrations.oauth.httpx.AsyncClient", side_effect=_client_factory(transport)
        ) as factory:
            profile = await provider.authenticate("code-1")
        self.assertEqual(profile.provider, "discord")
        self.assertEqual(profile.provider_id, "d-9")
        self.assertEqual(profile.name, "dguy")
        timeout = factory.call_args.kwargs["timeout"]
        self.assertEqual(timeout.connect, 10.0)

    async def test_timeout_becomes_oauth_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        provider = get_provider("google", _settings())
        transport = httpx.MockTransport(handler)
        with patch(
            "app.integrations.oauth.httpx.AsyncClient", side_effect=_client_factory(transport)
        ):
            with self.assertRaises(OAuthError) as ctx:
                await provider.authenticate("code-1")
        self.assertIsInstance(ctx.exception.__cause__, httpx.HTTPError)
        self.assertEqual(ctx.exception.status_code, 401)

    async def test_unconfigured_provider(self) -> None:
        provider = GoogleOAuth(None, None, _settings())
        with self.assertRaises(OAuthNotConfiguredError):
            await provider.authenticate("code-1")


if __name__ == "__main__":
    unittest.main()
