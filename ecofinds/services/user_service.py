# ecofinds/services/user_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ecofinds.core.errors import ConflictError, NotFoundError
from ecofinds.models.user import Address, User, UserProfile
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.user import (
    AddressRead,
    ProfileRead,
    ProfileUpsert,
    ProfileUser,
    UserMeRead,
)

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for the caller's own account and contact profile.

    Responsibilities:
      - shape the current user for /me
      - upsert / read / delete the 1:1 profile + address
      - map phone-number uniqueness violations to a 400
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Self -----

    def get_me(self, session: Session, current_user: User) -> UserMeRead:
        image = self.repo.get_image(session, current_user.id)
        return UserMeRead(
            id=current_user.id,
            email=current_user.email,
            display_name=current_user.display_name,
            image_url=image.url if image else None,
            created_at=current_user.created_at,
        )

    # ----- Profile -----

    def _profile_read(
        self,
        session: Session,
        user: User,
        profile: UserProfile,
        address: Address | None,
    ) -> ProfileRead:
        image = self.repo.get_image(session, user.id)
        return ProfileRead(
            id=profile.id,
            user_id=profile.user_id,
            full_name=profile.full_name,
            phone_number=profile.phone_number,
            address=AddressRead.model_validate(address) if address else None,
            user=ProfileUser(
                email=user.email,
                display_name=user.display_name,
                image_url=image.url if image else None,
            ),
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )

    def get_profile(self, session: Session, current_user: User) -> ProfileRead:
        profile = self.repo.get_profile(session, current_user.id)
        if profile is None:
            raise NotFoundError("Profile not found")
        address = self.repo.get_address(session, profile.id)
        return self._profile_read(session, current_user, profile, address)

    def upsert_profile(
        self,
        session: Session,
        current_user: User,
        payload: ProfileUpsert,
    ) -> ProfileRead:
        """
        Create the caller's profile, or replace its fields if it exists.

        The address is replaced as a whole (street/zip left out become null).

        Raises:
            ConflictError(400): phone number belongs to another profile.
        """
        profile = self.repo.get_profile(session, current_user.id)
        if profile is None:
            profile = UserProfile(user_id=current_user.id, full_name="", phone_number="")
            address = Address(profile_id=0, city="", state="", country="")
        else:
            address = self.repo.get_address(session, profile.id) or Address(
                profile_id=profile.id, city="", state="", country=""
            )

        profile.full_name = payload.full_name
        profile.phone_number = payload.phone_number
        address.street = payload.address.street
        address.city = payload.address.city
        address.state = payload.address.state
        address.country = payload.address.country
        address.zip_code = payload.address.zip_code

        try:
            profile, address = self.repo.save_profile(session, profile, address)
        except IntegrityError:
            session.rollback()
            logger.info("Profile upsert rejected for user %s: duplicate phone", current_user.id)
            raise ConflictError("Phone number already exists")

        return self._profile_read(session, current_user, profile, address)

    def delete_profile(self, session: Session, current_user: User) -> None:
        profile = self.repo.get_profile(session, current_user.id)
        if profile is None:
            raise NotFoundError("Profile not found")
        self.repo.delete_profile(session, profile)
