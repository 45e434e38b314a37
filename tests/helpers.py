from __future__ import annotations

from typing import Any

import httpx

from filmsync.core.catalog_client import CatalogClient
from filmsync.core.errors import IdentityProviderError
from filmsync.core.identity import PasswordGrant

CATALOG_URL = "https://catalog.test/api/films/"


def film_payload(episode_id: int, title: str, **extra: Any) -> dict[str, Any]:
    payload = {
        "title": title,
        "episode_id": episode_id,
        "opening_crawl": "...",
        "director": "George Lucas",
        "producer": "Rick McCallum",
        "release_date": "1999-05-19",
        "characters": [],
        "created": "2014-12-19T16:52:55.740000Z",
        "edited": "2014-12-20T10:52:14.024000Z",
        "url": f"{CATALOG_URL}{episode_id}/",
    }
    payload.update(extra)
    return payload


DEFAULT_FILMS = [
    film_payload(4, "A New Hope", director="George Lucas", producer="Gary Kurtz"),
    film_payload(5, "The Empire Strikes Back", director="Irvin Kershner"),
]


class CatalogStub:
    """Serves a film list through httpx.MockTransport and counts requests."""

    def __init__(self, films: list[dict[str, Any]] | None = None) -> None:
        self.films = list(DEFAULT_FILMS if films is None else films)
        self.status_code = 200
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"detail": "boom"})
        return httpx.Response(
            200,
            json={"count": len(self.films), "next": None, "results": self.films},
        )

    def client(self) -> CatalogClient:
        http = httpx.Client(transport=httpx.MockTransport(self.handler))
        return CatalogClient(http, CATALOG_URL)


class FakeIdentity:
    """In-memory identity provider recording every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.passwords: dict[str, tuple[str, str]] = {}  # email -> (password, subject)
        self.fail_on: str | None = None

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail_on == name:
            raise IdentityProviderError(f"{name} exploded")

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def create_user(self, email: str, password: str) -> dict[str, Any]:
        self._record("create_user", email)
        if email in self.passwords:
            raise IdentityProviderError("User already registered")
        subject = f"sub-{len(self.passwords) + 1}"
        self.passwords[email] = (password, subject)
        return {"id": subject, "email": email}

    def verify_password(self, email: str, password: str) -> PasswordGrant:
        self._record("verify_password", email)
        stored = self.passwords.get(email)
        if stored is None or stored[0] != password:
            raise IdentityProviderError("Invalid login credentials")
        return PasswordGrant(subject_id=stored[1], access_token=f"probe-{stored[1]}")

    def set_custom_claims(self, subject_id: str, claims: dict[str, Any]) -> None:
        self._record("set_custom_claims", subject_id, claims)

    def revoke_sessions(self, access_token: str) -> None:
        self._record("revoke_sessions", access_token)

    def mint_custom_token(self, subject_id: str) -> str:
        self._record("mint_custom_token", subject_id)
        return f"one-time-{subject_id}"

    def exchange_custom_token(self, token: str) -> dict[str, Any]:
        self._record("exchange_custom_token", token)
        return {"access_token": f"access-{token}", "refresh_token": f"refresh-{token}"}


