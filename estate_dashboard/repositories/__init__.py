"""
Repository layer for data access operations.
Each repository wraps one table and exposes its parameterized aggregate queries.
"""

from estate_dashboard.repositories.base import BaseRepository
from estate_dashboard.repositories.property import PropertyRepository, PropertySearchFilters
from estate_dashboard.repositories.review import ReviewRepository
from estate_dashboard.repositories.blog import BlogRepository, CommentRepository
from estate_dashboard.repositories.user import UserRepository, AdminRepository
from estate_dashboard.repositories.newsletter import NewsletterRepository, BroadcastRepository
from estate_dashboard.repositories.sell import SellSubmissionRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "ReviewRepository",
    "BlogRepository",
    "CommentRepository",
    "UserRepository",
    "AdminRepository",
    "NewsletterRepository",
    "BroadcastRepository",
    "SellSubmissionRepository",
]
