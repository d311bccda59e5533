"""
Pydantic schemas for request/response validation.
"""

from estate_dashboard.schemas.common import CamelModel, DataResponse, MessageResponse, PageMeta
from estate_dashboard.schemas.dashboard import (
    DashboardStats,
    SuperAdminDashboardStats,
    DashboardSnapshot,
    PropertyStats,
    BlogStats,
    UserStats,
    ContentModerationStats,
    RevenueStats,
    TopPerformers,
    RecentActivityFeed,
)
from estate_dashboard.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    ListingItem,
    ListingPage,
    PropertyPage,
    PropertySearchResults,
    PropertyDetail,
)
from estate_dashboard.schemas.review import (
    ReviewCreate,
    ReviewResponse,
    ReviewPage,
    StatusUpdate,
    ModerationStats,
    ReviewStats,
)
from estate_dashboard.schemas.blog import (
    BlogCreate,
    BlogUpdate,
    BlogResponse,
    BlogPage,
    BlogSearchResults,
    BlogDetail,
    BlogViewCount,
    CommentCreate,
    CommentUpdate,
    CommentResponse,
    CommentPage,
)
from estate_dashboard.schemas.user import UserResponse, UserPage, UserDetails, AdminResponse, AdminPage, AdminUpdate
from estate_dashboard.schemas.sell import (
    SellSubmissionCreate,
    SellSubmissionResponse,
    SellSubmissionPage,
    OfferStatusUpdate,
    SellStats,
)
from estate_dashboard.schemas.newsletter import (
    NewsletterSubscription,
    NewsletterStats,
    BroadcastResponse,
    BroadcastList,
)

__all__ = [
    "CamelModel",
    "DataResponse",
    "MessageResponse",
    "PageMeta",
    "DashboardStats",
    "SuperAdminDashboardStats",
    "DashboardSnapshot",
    "PropertyStats",
    "BlogStats",
    "UserStats",
    "ContentModerationStats",
    "RevenueStats",
    "TopPerformers",
    "RecentActivityFeed",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "ListingItem",
    "ListingPage",
    "PropertyPage",
    "PropertySearchResults",
    "PropertyDetail",
    "ReviewCreate",
    "ReviewResponse",
    "ReviewPage",
    "StatusUpdate",
    "ModerationStats",
    "ReviewStats",
    "BlogCreate",
    "BlogUpdate",
    "BlogResponse",
    "BlogPage",
    "BlogSearchResults",
    "BlogDetail",
    "BlogViewCount",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentPage",
    "UserResponse",
    "UserPage",
    "UserDetails",
    "AdminResponse",
    "AdminPage",
    "AdminUpdate",
    "SellSubmissionCreate",
    "SellSubmissionResponse",
    "SellSubmissionPage",
    "OfferStatusUpdate",
    "SellStats",
    "NewsletterSubscription",
    "NewsletterStats",
    "BroadcastResponse",
    "BroadcastList",
]
