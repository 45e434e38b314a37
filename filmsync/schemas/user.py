# filmsync/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

# App-level roles, mirrored into the Supabase app_metadata claim at login.
Role = Literal["user", "admin"]

DEFAULT_ROLE: Role = "user"


class UserRead(SQLModel):
    """
    Application role record.

    Identity:
      - id: matches the Supabase auth user id (JWT "sub")
    """

    id: str
    role: Role = DEFAULT_ROLE
    created_at: datetime | None = None
    deleted: bool | None = None


class UserCreate(SQLModel):
    """
    Admin payload for creating a role record.

    id should be the Supabase user id; a random one is generated if omitted.
    """

    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(default=None, max_length=64)
    role: Role = DEFAULT_ROLE


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role
