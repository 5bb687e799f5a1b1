# ecofinds/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ecofinds.database import get_session
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.auth import AuthPayload, LoginRequest, SignupRequest
from ecofinds.schemas.common import ApiResponse
from ecofinds.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = AuthService(repo)


@router.post(
    "/signup",
    response_model=ApiResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
def signup(
    payload: SignupRequest,
    session: Session = Depends(get_session),
):
    """
    Create an account and return a bearer token.

    - Public endpoint.
    - 400 if the email is already registered.
    """
    data = service.signup(session, payload)
    return ApiResponse(message="User registered successfully", data=data)


@router.post("/login", response_model=ApiResponse[AuthPayload])
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for a bearer token.

    - Public endpoint.
    - 401 on unknown email or wrong password.
    """
    data = service.login(session, payload)
    return ApiResponse(message="Login successful", data=data)
