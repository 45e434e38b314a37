from __future__ import annotations

import json
from unittest.mock import MagicMock

import httpx
import pytest

from filmsync.core.errors import IdentityProviderError
from filmsync.core.identity import IdentityProvider

AUTH_URL = "https://project.supabase.test/auth/v1"


class GoTrueStub:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses[request.url.path]


@pytest.fixture
def gotrue() -> GoTrueStub:
    return GoTrueStub()


@pytest.fixture
def admin() -> MagicMock:
    return MagicMock()


@pytest.fixture
def provider(gotrue: GoTrueStub, admin: MagicMock) -> IdentityProvider:
    http = httpx.Client(transport=httpx.MockTransport(gotrue.handler))
    return IdentityProvider(admin=admin, http=http, auth_url=AUTH_URL, api_key="anon-key")


def test_verify_password_returns_subject_and_probe_token(
    provider: IdentityProvider, gotrue: GoTrueStub
) -> None:
    gotrue.responses["/auth/v1/token"] = httpx.Response(
        200, json={"access_token": "probe", "refresh_token": "r", "user": {"id": "sub-1"}}
    )

    grant = provider.verify_password("leia@rebels.org", "alderaan")

    assert grant.subject_id == "sub-1"
    assert grant.access_token == "probe"
    request = gotrue.requests[0]
    assert request.url.params["grant_type"] == "password"
    assert request.headers["apikey"] == "anon-key"
    assert json.loads(request.content) == {"email": "leia@rebels.org", "password": "alderaan"}


def test_rejected_password_raises_with_provider_message(
    provider: IdentityProvider, gotrue: GoTrueStub
) -> None:
    gotrue.responses["/auth/v1/token"] = httpx.Response(
        400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
    )

    with pytest.raises(IdentityProviderError, match="Invalid login credentials"):
        provider.verify_password("leia@rebels.org", "wrong")


def test_transport_failure_raises_identity_error(admin: MagicMock) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    provider = IdentityProvider(
        admin=admin,
        http=httpx.Client(transport=httpx.MockTransport(handler)),
        auth_url=AUTH_URL,
        api_key="anon-key",
    )

    with pytest.raises(IdentityProviderError):
        provider.exchange_custom_token("hash")


def test_exchange_returns_session_verbatim(provider: IdentityProvider, gotrue: GoTrueStub) -> None:
    session = {"access_token": "a", "refresh_token": "r", "expires_in": 3600, "token_type": "bearer"}
    gotrue.responses["/auth/v1/verify"] = httpx.Response(200, json=session)

    assert provider.exchange_custom_token("hashed") == session
    assert json.loads(gotrue.requests[0].content) == {"type": "magiclink", "token_hash": "hashed"}


def test_set_custom_claims_writes_app_metadata(provider: IdentityProvider, admin: MagicMock) -> None:
    provider.set_custom_claims("sub-1", {"role": "admin"})

    admin.auth.admin.update_user_by_id.assert_called_once_with(
        "sub-1", {"app_metadata": {"role": "admin"}}
    )


def test_revoke_sessions_signs_out_globally(provider: IdentityProvider, admin: MagicMock) -> None:
    provider.revoke_sessions("probe")

    admin.auth.admin.sign_out.assert_called_once_with("probe", "global")


def test_mint_custom_token_generates_magic_link_for_user_email(
    provider: IdentityProvider, admin: MagicMock
) -> None:
    admin.auth.admin.get_user_by_id.return_value.user.email = "han@falcon.org"
    admin.auth.admin.generate_link.return_value.properties.hashed_token = "one-time"

    assert provider.mint_custom_token("sub-2") == "one-time"
    admin.auth.admin.get_user_by_id.assert_called_once_with("sub-2")
    admin.auth.admin.generate_link.assert_called_once_with(
        {"type": "magiclink", "email": "han@falcon.org"}
    )


def test_create_user_confirms_email_and_returns_json(provider: IdentityProvider, admin: MagicMock) -> None:
    admin.auth.admin.create_user.return_value.user.model_dump.return_value = {
        "id": "sub-3",
        "email": "chewie@falcon.org",
    }

    created = provider.create_user("chewie@falcon.org", "rrraaargh")

    assert created == {"id": "sub-3", "email": "chewie@falcon.org"}
    admin.auth.admin.create_user.assert_called_once_with(
        {"email": "chewie@falcon.org", "password": "rrraaargh", "email_confirm": True}
    )
