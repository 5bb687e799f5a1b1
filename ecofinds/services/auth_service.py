# ecofinds/services/auth_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ecofinds.core.auth import create_access_token, hash_password, verify_password
from ecofinds.core.errors import ConflictError, UnauthorizedError
from ecofinds.models.user import User
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.auth import AuthPayload, AuthUser, LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email is already registered"


class AuthService:
    """
    Account creation and credential checks.

    Both operations answer with a signed bearer token plus the public
    user fields.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def _payload(user: User) -> AuthPayload:
        return AuthPayload(
            token=create_access_token(user),
            user=AuthUser(id=user.id, email=user.email, display_name=user.display_name),
        )

    def signup(self, session: Session, payload: SignupRequest) -> AuthPayload:
        """
        Register a new account.

        Rules:
          - email must not be registered yet (checked up front and again
            by the unique index if two signups race)
          - only the password hash is stored
        """
        if self.repo.get_by_email(session, payload.email) is not None:
            raise ConflictError(EMAIL_TAKEN)

        user = User(
            email=payload.email,
            password_hash=hash_password(payload.password),
            display_name=payload.display_name,
        )
        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            session.rollback()
            logger.info("Signup raced on existing email %s", payload.email)
            raise ConflictError(EMAIL_TAKEN)

        return self._payload(user)

    def login(self, session: Session, payload: LoginRequest) -> AuthPayload:
        """
        Check credentials.

        Unknown email and wrong password produce the same 401 so callers
        cannot probe which accounts exist.
        """
        user = self.repo.get_by_email(session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return self._payload(user)
