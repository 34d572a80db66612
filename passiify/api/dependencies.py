"""
Authentication dependencies for user, partner and admin routes.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging
from passiify.db.session import get_db
from passiify.models.user import User
from passiify.models.admin import Admin
from passiify.core.security import decode_access_token, USER_TOKEN, ADMIN_TOKEN

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the user (or partner) behind a user bearer token."""
    if credentials is None:
        raise _unauthorized("No token provided. Please log in.")

    payload = decode_access_token(credentials.credentials, USER_TOKEN)
    if not payload:
        raise _unauthorized("Invalid or expired token. Please log in again.")

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if not user or not user.is_active:
        raise _unauthorized("User not found. Please log in again.")
    return user


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Admin:
    """Resolve the admin behind an admin bearer token."""
    if credentials is None:
        raise _unauthorized("Not authorized as admin (no token)")

    payload = decode_access_token(credentials.credentials, ADMIN_TOKEN)
    if not payload:
        logger.warning("Rejected admin request with invalid or expired token")
        raise _unauthorized("Invalid or expired admin token")

    admin = db.query(Admin).filter(Admin.id == int(payload["sub"])).first()
    if not admin:
        raise _unauthorized("Admin not found")
    return admin
