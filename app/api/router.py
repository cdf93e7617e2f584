from fastapi import APIRouter
from app.api.endpoints import plans, profile

api_router = APIRouter()

api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
