# ecofinds/schemas/auth.py
import re

from pydantic import EmailStr, field_validator
from sqlmodel import Field

from ecofinds.schemas.common import CamelModel

# upper, lower, digit and one special character
PASSWORD_PATTERN = re.compile(r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z])(?=.*[!@#$%^&*])")


class SignupRequest(CamelModel):
    """
    Payload for account creation.

    Validation rules:
      - display_name: 2..50 chars after trimming
      - email: valid address, normalized to lower-case
      - password: >= 8 chars with upper, lower, digit and one of !@#$%^&*
    """

    display_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)

    @field_validator("display_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase "
                "letter, one number, and one special character"
            )
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class AuthUser(CamelModel):
    id: int
    email: str
    display_name: str


class AuthPayload(CamelModel):
    """Token + public user fields returned by signup and login."""

    token: str
    user: AuthUser
