"""
Security utilities for JWT authentication and password hashing.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import bcrypt
from jose import JWTError, jwt
from passiify.core.config import settings

# Token "type" claims; a token signed for one audience is rejected by the other.
USER_TOKEN = "user"
ADMIN_TOKEN = "admin"


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    Returns bytes (32 bytes) which is well under bcrypt's 72-byte limit.
    """
    return hashlib.sha256(password.encode('utf-8')).digest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pre_hashed = _pre_hash_password(plain_password)
    return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt (after the SHA256 pre-hash)."""
    pre_hashed = _pre_hash_password(password)
    hashed = bcrypt.hashpw(pre_hashed, bcrypt.gensalt())
    return hashed.decode('utf-8')


def create_access_token(
    subject: int,
    token_type: str = USER_TOKEN,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token for a user or admin id."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {"sub": str(subject), "type": token_type, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, token_type: str = USER_TOKEN) -> Optional[dict]:
    """Decode and verify a JWT token. Returns None on any mismatch."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload
