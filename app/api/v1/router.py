"""API v1 router configuration."""

from fastapi import APIRouter

from app.api.v1.endpoints import collections, health, upload

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(collections.router, tags=["Collections"])
api_router.include_router(upload.router, tags=["Upload"])
