import logging
from typing import Optional

from fastapi import Depends, Header

from ..errors import AuthenticationError
from ..models import User
from ..services.session import parse_bearer
from ..services.users import UserService
from .services import get_user_service

logger = logging.getLogger(__name__)


def get_current_user(
    authorization: Optional[str] = Header(None),
    users: UserService = Depends(get_user_service),
) -> User:
    """Resolve the bearer token in the Authorization header to a user."""
    token = parse_bearer(authorization)
    if token is None:
        if authorization:
            logger.warning("Invalid auth header format")
        raise AuthenticationError("Authentication required")

    user = users.find_user_by_token(token)
    if user is None:
        logger.warning("Invalid token")
        raise AuthenticationError("Invalid token")
    return user
