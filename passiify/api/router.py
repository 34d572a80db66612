"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from passiify.api.routes import auth, admin, settlements, partner

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(admin.router)
api_router.include_router(settlements.router)
api_router.include_router(partner.router)
