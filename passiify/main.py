"""
FastAPI entrypoint for the Passiify backend application.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from passiify.core.config import settings
from passiify.core.utils import format_error
from passiify.api.router import api_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

app = FastAPI(
    title="Passiify API",
    description="Backend API for gym day passes, event tickets and partner settlements",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"message": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error(exc.detail),
        headers=getattr(exc, "headers", None)
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Passiify API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
