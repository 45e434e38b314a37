# filmsync/services/auth_service.py
import logging
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session

from filmsync.core.errors import IdentityProviderError
from filmsync.core.identity import IdentityProvider
from filmsync.schemas.auth import LoginRequest, RegisterRequest
from filmsync.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration and login against Supabase Auth.

    Login is one linear chain; any failing step aborts it and the caller
    only ever sees "Authentication failed". The failing step is logged.
    """

    def __init__(self, identity: IdentityProvider, users: UserService):
        self.identity = identity
        self.users = users

    def register(self, payload: RegisterRequest) -> dict[str, Any]:
        """
        Create the auth user and return it verbatim.

        No role record is written here; it is provisioned on first login.

        Raises:
            HTTPException(400): with the provider's reason attached.
        """
        try:
            return self.identity.create_user(payload.email, payload.password)
        except IdentityProviderError as exc:
            logger.warning("Registration failed for %s: %s", payload.email, exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Registration failed: {exc}",
            ) from exc

    def login(self, session: Session, payload: LoginRequest) -> dict[str, Any]:
        """
        Exchange credentials for a fresh session carrying the role claim.

        Steps:
          1. verify the password => subject id
          2. load or provision the role record (default "user")
          3. write {"role": ...} into the user's app_metadata
          4. revoke every existing refresh token of the user
          5. mint a one-time sign-in token
          6. exchange it for an access/refresh pair, returned verbatim

        Revoking before re-issuing means the returned tokens are the only
        live ones, and they carry the current role.

        Raises:
            HTTPException(400): on any failure.
        """
        step = "verify password"
        try:
            grant = self.identity.verify_password(payload.email, payload.password)
            subject_id = grant.subject_id

            step = "resolve role"
            user = self.users.ensure_user(session, subject_id)

            step = "set role claim"
            self.identity.set_custom_claims(subject_id, {"role": user.role})

            step = "revoke sessions"
            self.identity.revoke_sessions(grant.access_token)

            step = "mint token"
            token = self.identity.mint_custom_token(subject_id)

            step = "exchange token"
            return self.identity.exchange_custom_token(token)
        except Exception as exc:
            logger.warning("Login failed for %s at '%s': %s", payload.email, step, exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Authentication failed",
            ) from exc
