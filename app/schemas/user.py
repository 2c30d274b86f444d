"""
User API schemas.

Pydantic models for user-related request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# Shared properties
class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None


# Request schemas
class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    is_coach: bool = False


class UserLogin(BaseModel):
    email: EmailStr
    password: str


# Response schemas
class UserResponse(UserBase):
    """User data in API responses (no credentials)."""
    id: int
    is_active: bool
    is_coach: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Token schemas
class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
