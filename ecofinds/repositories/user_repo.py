# ecofinds/repositories/user_repo.py
from sqlmodel import Session, select

from ecofinds.models.user import Address, User, UserImage, UserProfile


class UserRepository:
    """
    Data access layer for User and its 1:1 satellites
    (UserImage, UserProfile, Address).

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Users -----

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def get_many(self, session: Session, user_ids: set[int]) -> dict[int, User]:
        """Batch lookup keyed by id; unknown ids are simply absent."""
        if not user_ids:
            return {}
        stmt = select(User).where(User.id.in_(user_ids))
        return {u.id: u for u in session.exec(stmt).all()}

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    # ----- Profile image -----

    def get_image(self, session: Session, user_id: int) -> UserImage | None:
        stmt = select(UserImage).where(UserImage.user_id == user_id)
        return session.exec(stmt).first()

    def images_for_users(
        self,
        session: Session,
        user_ids: set[int],
    ) -> dict[int, UserImage]:
        if not user_ids:
            return {}
        stmt = select(UserImage).where(UserImage.user_id.in_(user_ids))
        return {img.user_id: img for img in session.exec(stmt).all()}

    def save_image(self, session: Session, image: UserImage) -> UserImage:
        session.add(image)
        session.commit()
        session.refresh(image)
        return image

    # ----- Profile + address -----

    def get_profile(self, session: Session, user_id: int) -> UserProfile | None:
        stmt = select(UserProfile).where(UserProfile.user_id == user_id)
        return session.exec(stmt).first()

    def profiles_for_users(
        self,
        session: Session,
        user_ids: set[int],
    ) -> dict[int, UserProfile]:
        if not user_ids:
            return {}
        stmt = select(UserProfile).where(UserProfile.user_id.in_(user_ids))
        return {p.user_id: p for p in session.exec(stmt).all()}

    def get_address(self, session: Session, profile_id: int) -> Address | None:
        stmt = select(Address).where(Address.profile_id == profile_id)
        return session.exec(stmt).first()

    def save_profile(
        self,
        session: Session,
        profile: UserProfile,
        address: Address,
    ) -> tuple[UserProfile, Address]:
        """
        Persist a profile and its address in one transaction.

        The profile is flushed first so a new row has an id for the address FK.
        """
        session.add(profile)
        session.flush()
        address.profile_id = profile.id
        session.add(address)
        session.commit()
        session.refresh(profile)
        session.refresh(address)
        return profile, address

    def delete_profile(self, session: Session, profile: UserProfile) -> None:
        address = self.get_address(session, profile.id)
        if address is not None:
            session.delete(address)
            session.flush()
        session.delete(profile)
        session.commit()
