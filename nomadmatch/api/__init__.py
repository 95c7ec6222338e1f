from fastapi import APIRouter
from nomadmatch.api import auth, dating, profile

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(dating.router, prefix="/dating", tags=["dating"])
