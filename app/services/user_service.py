"""
User service.

Business logic for user management and authentication.
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError, ConflictError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.repositories.user import UserRepository
from app.models.user import User
from app.schemas.user import Token, UserCreate, UserLogin

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related business logic."""

    def __init__(self, session: Session):
        """
        Initialize service with database session.

        Args:
            session: SQLModel database session
        """
        self.repository = UserRepository(session)

    def register(self, user_data: UserCreate) -> User:
        """
        Register a new user.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.repository.exists_by_email(user_data.email):
            raise ConflictError("User already registered", code="email_taken")

        user = User(email=user_data.email, hashed_password=get_password_hash(user_data.password),
                    full_name=user_data.full_name, is_coach=user_data.is_coach, )
        user = self.repository.create(user)
        logger.info("Registered user %s (coach=%s)", user.id, user.is_coach)
        return user

    def authenticate(self, login_data: UserLogin) -> Token:
        """
        Authenticate user and return access token.

        Raises:
            AuthenticationError: If credentials are invalid
            AuthorizationError: If the account is inactive
        """
        user = self.repository.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.hashed_password):
            raise AuthenticationError("Incorrect email or password")

        if not user.is_active:
            raise AuthorizationError("User account is inactive")

        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(data={ "sub": user.email }, expires_delta=access_token_expires)
        return Token(access_token=access_token, token_type="bearer")

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.repository.get_by_email(email)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.repository.get_by_id(user_id)
