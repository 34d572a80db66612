"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr
from datetime import datetime
from passiify.models.user import UserRole


class UserCreate(BaseModel):
    """Schema for user registration."""
    name: str
    email: EmailStr
    password: str
    role: UserRole = UserRole.USER


class UserLogin(BaseModel):
    """Schema for user login."""
    email: str
    password: str


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Login response; the client stores `token` under its role key."""
    token: str
    user: UserResponse
