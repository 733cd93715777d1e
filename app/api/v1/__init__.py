"""API routes, mounted under API_PREFIX."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, donations, donors, export, health, leaders, provinces, stats

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(provinces.router, prefix="/provinces", tags=["provinces"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(donors.router, prefix="/donors", tags=["donors"])
router.include_router(donations.router, prefix="/donations", tags=["donations"])
router.include_router(stats.router, prefix="/stats", tags=["stats"])
router.include_router(leaders.router, tags=["users"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(export.router, prefix="/export", tags=["export"])
