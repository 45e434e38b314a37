# filmsync/core/auth.py
from typing import Any, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from filmsync.core.config import get_settings

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header is handled below
#   so we can answer with our own 401 message.
bearer_scheme = HTTPBearer(auto_error=False)

# Claim key that carries the application role inside Supabase JWTs
ROLE_CLAIM = "role"


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Args:
        token: raw JWT from the Authorization header.

    Returns:
        Decoded JWT claims.

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def role_from_claims(claims: dict[str, Any]) -> str | None:
    """
    Read the application role set at login.

    Supabase copies app_metadata into every issued JWT, so the custom
    claim lives at claims["app_metadata"]["role"]. The top-level "role"
    claim is Supabase's own Postgres role and is ignored.
    """
    app_metadata = claims.get("app_metadata") or {}
    if not isinstance(app_metadata, dict):
        return None
    return app_metadata.get(ROLE_CLAIM)


def is_allowed(claims: dict[str, Any] | None, roles: frozenset[str]) -> bool:
    """Pure policy check: does the caller's role belong to `roles`?"""
    if claims is None:
        return False
    return role_from_claims(claims) in roles


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """
    Resolve the caller's verified token claims.

    Raises:
        HTTPException(401): if the token is missing, invalid or has no 'sub'.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token not provided",
        )

    claims = decode_access_token(credentials.credentials)
    if not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )
    return claims


def require_roles(*roles: str) -> Callable[..., dict[str, Any]]:
    """
    Build a dependency that admits only callers holding one of `roles`.

    Usage:

        @router.get("", dependencies=[Depends(require_roles("user", "admin"))])

    Raises:
        HTTPException(401): no valid token (from get_current_claims).
        HTTPException(403): token valid but role not permitted.
    """
    allowed = frozenset(roles)

    def guard(claims: dict[str, Any] = Depends(get_current_claims)) -> dict[str, Any]:
        if not is_allowed(claims, allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return claims

    return guard


require_admin = require_roles("admin")
require_member = require_roles("user", "admin")
