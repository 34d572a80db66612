"""
Pydantic schemas for Admin entity.
"""
from pydantic import BaseModel, Field


class AdminLogin(BaseModel):
    """Schema for admin login."""
    email: str
    password: str


class AdminCreate(AdminLogin):
    """Schema for the one-time admin bootstrap."""
    role: str = "admin"


class AdminTokenResponse(BaseModel):
    """Admin login response."""
    id: int = Field(alias="_id")
    email: str
    role: str
    token: str

    class Config:
        populate_by_name = True
