"""
Database models for the Estate Dashboard API.
Importing this package registers every table on Base.metadata.
"""

from estate_dashboard.models.property import Property, PropertyType, PropertyStatus, PropertyCondition
from estate_dashboard.models.review import Review, ModerationStatus
from estate_dashboard.models.blog import Blog, BlogStatus, Comment, blog_properties
from estate_dashboard.models.user import User, Admin, AdminRole
from estate_dashboard.models.newsletter import Newsletter, Broadcast
from estate_dashboard.models.sell import SellSubmission, OfferStatus

__all__ = [
    "Property",
    "PropertyType",
    "PropertyStatus",
    "PropertyCondition",
    "Review",
    "ModerationStatus",
    "Blog",
    "BlogStatus",
    "Comment",
    "blog_properties",
    "User",
    "Admin",
    "AdminRole",
    "Newsletter",
    "Broadcast",
    "SellSubmission",
    "OfferStatus",
]
