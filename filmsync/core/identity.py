# filmsync/core/identity.py
"""
Identity provider adapter over Supabase Auth (GoTrue).

Admin operations go through the supabase-py service-role client. The two
end-user grants (password sign-in and one-time token exchange) are plain
REST calls made with the public api key, so no per-user session state is
ever kept on a shared client.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import httpx
from supabase import AuthError, Client

from filmsync.core.config import get_settings
from filmsync.core.errors import IdentityProviderError
from filmsync.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PasswordGrant:
    """Outcome of a successful password check."""

    subject_id: str
    access_token: str


class IdentityProvider:
    """
    Thin wrapper exposing the identity operations the backend needs.

    Every failure is raised as IdentityProviderError.
    """

    def __init__(
        self,
        admin: Client,
        http: httpx.Client,
        auth_url: str,
        api_key: str,
    ):
        self.admin = admin
        self.http = http
        self.auth_url = auth_url.rstrip("/")
        self.api_key = api_key

    # ----- REST helpers -----

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.http.post(
                f"{self.auth_url}{path}",
                json=payload,
                headers={"apikey": self.api_key},
            )
        except httpx.HTTPError as exc:
            raise IdentityProviderError(f"Auth request failed: {exc}") from exc

        if response.is_error:
            raise IdentityProviderError(
                f"Auth request to {path} rejected ({response.status_code}): "
                f"{_error_message(response)}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise IdentityProviderError("Auth response is not JSON") from exc

    # ----- Operations -----

    def create_user(self, email: str, password: str) -> dict[str, Any]:
        """Create an auth user (email pre-confirmed) and return it as JSON."""
        try:
            response = self.admin.auth.admin.create_user(
                {"email": email, "password": password, "email_confirm": True}
            )
        except AuthError as exc:
            raise IdentityProviderError(str(exc)) from exc
        return response.user.model_dump(mode="json")

    def verify_password(self, email: str, password: str) -> PasswordGrant:
        """Check credentials with a password grant."""
        body = self._post(
            "/token?grant_type=password",
            {"email": email, "password": password},
        )
        user = body.get("user") or {}
        if not user.get("id") or not body.get("access_token"):
            raise IdentityProviderError("Password grant returned no user")
        return PasswordGrant(subject_id=user["id"], access_token=body["access_token"])

    def set_custom_claims(self, subject_id: str, claims: dict[str, Any]) -> None:
        """Store `claims` in app_metadata so they appear in issued JWTs."""
        try:
            self.admin.auth.admin.update_user_by_id(subject_id, {"app_metadata": claims})
        except AuthError as exc:
            raise IdentityProviderError(str(exc)) from exc

    def revoke_sessions(self, access_token: str) -> None:
        """Revoke every refresh token of the user owning `access_token`."""
        try:
            self.admin.auth.admin.sign_out(access_token, "global")
        except AuthError as exc:
            raise IdentityProviderError(str(exc)) from exc

    def mint_custom_token(self, subject_id: str) -> str:
        """Issue a one-time sign-in token (magic-link hash) for the user."""
        try:
            user = self.admin.auth.admin.get_user_by_id(subject_id).user
            link = self.admin.auth.admin.generate_link(
                {"type": "magiclink", "email": user.email}
            )
        except AuthError as exc:
            raise IdentityProviderError(str(exc)) from exc
        token = link.properties.hashed_token
        if not token:
            raise IdentityProviderError("No one-time token issued")
        return token

    def exchange_custom_token(self, token: str) -> dict[str, Any]:
        """Trade a one-time token for a fresh access/refresh token pair."""
        return self._post("/verify", {"type": "magiclink", "token_hash": token})

    def close(self) -> None:
        self.http.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """
    Process-wide identity provider, built on first use.

    FastAPI dependency; tests override it.
    """
    settings = get_settings()
    return IdentityProvider(
        admin=supabase_admin(),
        http=httpx.Client(timeout=settings.AUTH_TIMEOUT_SECONDS),
        auth_url=f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1",
        api_key=settings.SUPABASE_KEY,
    )
