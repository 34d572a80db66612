"""
Admin model for the moderation and settlement console.
"""
from sqlalchemy import Column, String, DateTime
from passiify.db.base import BaseModel


class Admin(BaseModel):
    """Platform administrator account."""
    __tablename__ = "admins"

    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(30), default="admin", nullable=False)
    last_login = Column(DateTime, nullable=True)
