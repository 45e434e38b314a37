# filmsync/schemas/auth.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Credentials(BaseModel):
    """Email/password pair used by both register and login."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class RegisterRequest(Credentials):
    pass


class LoginRequest(Credentials):
    pass
