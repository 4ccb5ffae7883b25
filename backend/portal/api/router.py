"""Aggregate all API sub-routers."""

from fastapi import APIRouter

from portal.api.analytics import router as analytics_router
from portal.api.health import router as health_router
from portal.api.icons import router as icons_router
from portal.api.links import router as links_router
from portal.api.objects import router as objects_router
from portal.api.subsites import router as subsites_router
from portal.api.themes import router as themes_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(themes_router, prefix="/themes", tags=["themes"])
api_router.include_router(subsites_router, prefix="/subsites", tags=["subsites"])
api_router.include_router(links_router, prefix="/links", tags=["links"])
api_router.include_router(analytics_router, prefix="/analytics", tags=["analytics"])
api_router.include_router(icons_router, prefix="/icons", tags=["icons"])
api_router.include_router(objects_router, tags=["objects"])
