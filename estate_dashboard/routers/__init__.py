"""
API route handlers for the Estate Dashboard API.
Provides organized routing for different API endpoints.
"""

from .dashboard import router as dashboard_router
from .admins import router as admins_router
from .admin_content import router as admin_router
from .properties import router as properties_router
from .blogs import router as blogs_router
from .sell import router as sell_router

__all__ = ["dashboard_router", "admins_router", "admin_router", "properties_router", "blogs_router", "sell_router"]
