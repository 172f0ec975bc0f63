"""Credential store: registration, lookup and login for users."""

import logging
from typing import Optional

from ..errors import ValidationError
from ..models import User
from ..schemas.user import UserOut
from ..storage import Storage
from .session import generate_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """User operations on top of whichever storage backend is active."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def create_user(self, email: Optional[str], password: Optional[str], phone: Optional[str] = None) -> UserOut:
        """Register a user.

        Raises:
            ValidationError: email or password missing
            ConflictError: email already registered
        """
        if not email or not password:
            raise ValidationError("email and password required")

        user = self.storage.add_user(email, get_password_hash(password), phone or "")
        logger.info("User registered id=%s", user.id)
        return UserOut(id=user.id, email=user.email, phone=user.phone or "")

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self.storage.get_user_by_email(email)

    def find_user_by_id(self, user_id: int) -> Optional[User]:
        return self.storage.get_user_by_id(user_id)

    def find_user_by_token(self, token: str) -> Optional[User]:
        return self.storage.get_user_by_token(token)

    def verify_user(self, email: str, password: str) -> Optional[User]:
        """Return the user if the password matches, else None.

        Unknown email and wrong password are not distinguished.
        """
        user = self.find_user_by_email(email)
        if user is None:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def attach_token_to_user(self, user_id: int, token: str) -> Optional[User]:
        return self.storage.set_user_token(user_id, token)

    def login(self, email: Optional[str], password: Optional[str]) -> Optional[tuple[str, User]]:
        """Verify credentials and issue a fresh token, replacing any previous one."""
        if not email or not password:
            raise ValidationError("email and password required")

        user = self.verify_user(email, password)
        if user is None:
            logger.info("Login rejected")
            return None

        token = generate_token()
        user = self.attach_token_to_user(user.id, token)
        logger.info("User logged in id=%s", user.id)
        return token, user
