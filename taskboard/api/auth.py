import logging

from fastapi import APIRouter, Depends, status

from ..dependencies.auth import get_current_user
from ..dependencies.services import get_user_service
from ..errors import AuthenticationError, NotFoundError
from ..models import User
from ..schemas.user import LoginResponse, UserCreate, UserLogin, UserOut, UserSummary
from ..services.users import UserService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, users: UserService = Depends(get_user_service)):
    return users.create_user(payload.email, payload.password, payload.phone)


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, users: UserService = Depends(get_user_service)):
    result = users.login(payload.email, payload.password)
    if result is None:
        raise AuthenticationError("Invalid credentials")
    token, user = result
    return LoginResponse(token=token, user=UserSummary(id=user.id, email=user.email))


@router.post("/logout")
def logout(user: User = Depends(get_current_user)):
    # Tokens are not revoked; the next login replaces it
    logger.info("User logged out id=%s", user.id)
    return {"success": True}


@router.get("/me")
def me(user: User = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    current = users.find_user_by_id(user.id)
    if current is None:
        raise NotFoundError("User not found")
    return {"user": UserOut(id=current.id, email=current.email, phone=current.phone or "")}


@router.get("/validate")
def validate(user: User = Depends(get_current_user)):
    return {"user": UserSummary(id=user.id, email=user.email)}
