# ecofinds/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Account used both for buying and selling.

    Identity:
      - email is unique and stored lower-cased
      - password_hash is a passlib hash, never the raw password
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)

    email: str = Field(
        unique=True,
        index=True,
        max_length=255,
        description="Login email (lower-cased)",
    )

    password_hash: str = Field(
        description="passlib hash of the password",
    )

    display_name: str = Field(
        max_length=50,
        description="Public name shown to other users",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class UserImage(SQLModel, table=True):
    """
    Profile picture of a user (at most one per user).
    """

    __tablename__ = "user_images"

    id: int | None = Field(default=None, primary_key=True)

    user_id: int = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    url: str = Field(
        description="Public URL stored in object storage",
    )

    is_primary: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow)


class UserProfile(SQLModel, table=True):
    """
    1:1 contact extension of a User, created/updated via upsert.
    """

    __tablename__ = "user_profiles"

    id: int | None = Field(default=None, primary_key=True)

    user_id: int = Field(
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    full_name: str = Field(max_length=100)

    phone_number: str = Field(
        unique=True,
        max_length=30,
        description="Contact phone, unique across profiles",
    )

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class Address(SQLModel, table=True):
    """
    Postal address attached to a profile (1:1).
    """

    __tablename__ = "addresses"

    id: int | None = Field(default=None, primary_key=True)

    profile_id: int = Field(
        foreign_key="user_profiles.id",
        unique=True,
        index=True,
    )

    street: str | None = None
    city: str
    state: str
    country: str
    zip_code: str | None = None
