# ecofinds/schemas/user.py
from datetime import datetime

from pydantic import field_validator
from sqlmodel import Field

from ecofinds.schemas.common import CamelModel


class SellerSummary(CamelModel):
    """
    Public seller fields attached to product views.
    """

    id: int
    display_name: str
    email: str
    image_url: str | None = None


class SellerAddress(CamelModel):
    city: str | None = None
    state: str | None = None
    country: str | None = None


class SellerProfile(CamelModel):
    full_name: str
    phone_number: str
    address: SellerAddress | None = None


class SellerDetail(SellerSummary):
    """Seller block of the product detail page (adds contact profile)."""

    profile: SellerProfile | None = None


class UserMeRead(CamelModel):
    id: int
    email: str
    display_name: str
    image_url: str | None = None
    created_at: datetime


# ----- Profile -----


class AddressIn(CamelModel):
    street: str | None = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    country: str = Field(min_length=1)
    zip_code: str | None = None


class AddressRead(CamelModel):
    id: int
    street: str | None = None
    city: str
    state: str
    country: str
    zip_code: str | None = None


class ProfileUpsert(CamelModel):
    """
    Payload for creating or replacing the caller's profile.
    All three blocks are required.
    """

    full_name: str = Field(min_length=1, max_length=100)
    phone_number: str = Field(min_length=1, max_length=30)
    address: AddressIn

    @field_validator("full_name", "phone_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProfileUser(CamelModel):
    email: str
    display_name: str
    image_url: str | None = None


class ProfileRead(CamelModel):
    id: int
    user_id: int
    full_name: str
    phone_number: str
    address: AddressRead | None = None
    user: ProfileUser
    created_at: datetime
    updated_at: datetime
