"""
Shared API dependencies.

Reusable FastAPI dependencies for authentication and database access.
"""

from fastapi import Depends
from sqlmodel import Session

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import decode_access_token, oauth2_scheme
from app.db.session import get_db
from app.models.user import User
from app.services.user_service import UserService


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db), ) -> User:
    """Extract and validate the current user from the JWT token."""
    email = decode_access_token(token)
    if not email:
        raise AuthenticationError("Invalid or expired token")
    user = UserService(db).get_user_by_email(email)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthorizationError("User account is inactive")
    return user


def get_current_coach(user: User = Depends(get_current_user)) -> User:
    if not user.is_coach:
        raise AuthorizationError("Coach account required")
    return user
