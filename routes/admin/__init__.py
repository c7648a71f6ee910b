# routes/admin/__init__.py
"""
Admin module combining all admin-related routers.

- analytics: Dashboard statistics and user growth
- moderation: Roles, content status, reports, warnings and announcements

All routers are combined into a single main router for easy inclusion in the app.
"""
from fastapi import APIRouter

# Import all sub-routers
from .analytics import router as analytics_router
from .moderation import router as moderation_router

# Create main router that combines all admin routes
router = APIRouter()

# Note: The main app.py will add the /v1/admin prefix
router.include_router(analytics_router, tags=["Admin - Analytics"])
router.include_router(moderation_router, tags=["Admin - Moderation"])

__all__ = ["router"]
