"""
Service layer for business logic implementation.
Contains the dashboard reports, catalogue, moderation, staff and error handling services.
"""

from .dashboard import DashboardService
from .listing import ListingService
from .moderation import ModerationService
from .review import ReviewService
from .sell import SellService
from .admin import AdminService
from .blog import BlogService
from .newsletter import NewsletterService
from .error_handler import ErrorHandlerService

__all__ = [
    "DashboardService",
    "ListingService",
    "ModerationService",
    "ReviewService",
    "SellService",
    "AdminService",
    "BlogService",
    "NewsletterService",
    "ErrorHandlerService"
]
