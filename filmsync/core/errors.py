# filmsync/core/errors.py
"""
Infrastructure errors raised below the service layer.

Repositories return None for an absent record and raise StoreError when
the store itself fails, so callers can tell "nothing there" from "could
not look". The HTTP mapping lives in `filmsync.main`.
"""


class StoreError(RuntimeError):
    """The document store could not complete a read or write."""


class CatalogError(RuntimeError):
    """The upstream film catalog failed or returned an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IdentityProviderError(RuntimeError):
    """Any failed call to the identity provider (Supabase Auth)."""
