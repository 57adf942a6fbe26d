import logging
from fastapi import APIRouter, Depends, Query, status

from ..core.auth import get_current_user, CurrentUser
from ..schemas.user import (
    AuthResponse, AvailabilityResponse, UserLoginRequest, UserRegistrationRequest, UserResponse
)
from ..services import get_user_service
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserRegistrationRequest, service: UserService = Depends(get_user_service)):
    logger.info(f"Received registration request for user: {user_in.username}")
    user = service.register(user_in.username, user_in.email, user_in.password)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=AuthResponse)
def login(login_in: UserLoginRequest, service: UserService = Depends(get_user_service)):
    logger.info(f"Received login request for user: {login_in.username}")
    return service.authenticate(login_in.username, login_in.password)


@router.get("/check-username", response_model=AvailabilityResponse)
def check_username(username: str = Query(...), service: UserService = Depends(get_user_service)):
    return AvailabilityResponse(available=service.is_username_available(username))


@router.get("/check-email", response_model=AvailabilityResponse)
def check_email(email: str = Query(...), service: UserService = Depends(get_user_service)):
    return AvailabilityResponse(available=service.is_email_available(email))


@router.get("/me", response_model=UserResponse)
def me(
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.model_validate(service.get_by_id(current_user.user_id))
