"""
Admin account routes: login, bootstrap and profile.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging
from passiify.db.session import get_db
from passiify.models.admin import Admin
from passiify.schemas.admin import AdminLogin, AdminCreate, AdminTokenResponse
from passiify.core.security import verify_password, get_password_hash, create_access_token, ADMIN_TOKEN
from passiify.api.dependencies import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=AdminTokenResponse)
async def admin_login(credentials: AdminLogin, db: Session = Depends(get_db)):
    """Login as admin and get an admin JWT."""
    email = (credentials.email or "").strip().lower()
    admin = db.query(Admin).filter(Admin.email == email).first()

    if not admin or not verify_password((credentials.password or "").strip(), admin.hashed_password):
        logger.warning(f"Failed admin login attempt for {email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email or password"
        )

    admin.last_login = datetime.now(timezone.utc).replace(tzinfo=None)
    db.commit()

    logger.info(f"Admin {admin.id} logged in")
    return AdminTokenResponse(
        id=admin.id,
        email=admin.email,
        role=admin.role or "admin",
        token=create_access_token(admin.id, ADMIN_TOKEN)
    )


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_admin(admin_data: AdminCreate, db: Session = Depends(get_db)):
    """One-time admin bootstrap; refused once any admin exists."""
    if db.query(Admin).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin already exists"
        )

    admin = Admin(
        email=admin_data.email.strip().lower(),
        hashed_password=get_password_hash(admin_data.password.strip()),
        role=admin_data.role or "admin"
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)

    return {"message": "Admin created successfully", "adminId": admin.id}


@router.get("/me")
async def admin_profile(current_admin: Admin = Depends(get_current_admin)):
    """Current admin profile."""
    return {
        "_id": current_admin.id,
        "email": current_admin.email,
        "role": current_admin.role,
        "lastLogin": current_admin.last_login,
    }
