from fastapi import APIRouter

from src.api.endpoints import health, resize

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(resize.router, tags=["resize"])
