# filmsync/routers/auth.py
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from filmsync.core.identity import IdentityProvider, get_identity_provider
from filmsync.database import get_session
from filmsync.repositories.document_repo import UserRepository
from filmsync.schemas.auth import LoginRequest, RegisterRequest
from filmsync.services.auth_service import AuthService
from filmsync.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(
    identity: IdentityProvider = Depends(get_identity_provider),
) -> AuthService:
    return AuthService(identity, UserService(UserRepository()))


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """
    Create a Supabase Auth user.

    No bearer token required. The role record is created on first login.
    """
    return service.register(payload)


@router.post("/login")
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """
    Sign in and receive a session (access + refresh token) whose
    app_metadata carries the caller's role.

    No bearer token required. Older sessions of the user are revoked.
    """
    return service.login(session, payload)
