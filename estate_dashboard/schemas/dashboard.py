"""
Dashboard report schemas.
Every report section is a typed model; the revenue section only exists on the
super admin variant of the snapshot.
"""

from pydantic import Field
from typing import List, Optional, Union
from datetime import datetime
import uuid

from estate_dashboard.schemas.common import CamelModel


# Snapshot sections

class PropertyOverview(CamelModel):
    total: int
    available: int
    sold: int
    added_this_month: int
    added_last_month: int
    inventory_rate: float = Field(..., description="Available share of inventory in percent, 0 when empty")
    sold_this_month: int
    sold_last_month: int
    sales_change: float


class SellingToUsOverview(CamelModel):
    this_year: int
    last_year: int
    this_month: int
    last_month: int
    change: float
    yearly_change: float
    total: int
    pending: int
    offer_sent: int
    accepted: int
    rejected: int


class BlogOverview(CamelModel):
    total: int
    published: int
    drafts: int
    total_views: int
    average_views: int = Field(..., description="Views per published post, 0 when none published")


class UserOverview(CamelModel):
    total: int
    new_this_month: int


class EngagementOverview(CamelModel):
    total_comments: int
    pending_comments: int
    total_reviews: int
    pending_reviews: int
    newsletter_subscribers: int


class RecentActivityOverview(CamelModel):
    new_users_this_month: int
    new_comments_this_week: int
    new_reviews_this_week: int


class RevenueOverview(CamelModel):
    total_revenue: str = Field(..., examples=["$1,000,000"])
    monthly_revenue: str
    average_property_price: str


class DashboardStats(CamelModel):
    """Snapshot visible to every admin."""

    properties: PropertyOverview
    selling_to_us: SellingToUsOverview
    blogs: BlogOverview
    users: UserOverview
    engagement: EngagementOverview
    recent_activity: RecentActivityOverview


class SuperAdminDashboardStats(DashboardStats):
    """Snapshot for super admins, which always carries revenue."""

    revenue: RevenueOverview


# Listed first so a snapshot carrying revenue never validates as the plain variant
DashboardSnapshot = Union[SuperAdminDashboardStats, DashboardStats]


# Segmented reports

class MonthOverMonth(CamelModel):
    this_month: int
    last_month: int
    change: float


class TypeCount(CamelModel):
    type: str
    count: int
    average_price: float


class CityCount(CamelModel):
    city: str
    count: int
    sold_count: int


class PriceRangeCount(CamelModel):
    range: str
    count: int


class PropertyStats(CamelModel):
    by_type: List[TypeCount]
    by_city: List[CityCount]
    price_distribution: List[PriceRangeCount]
    monthly_trend: MonthOverMonth


class CategoryCount(CamelModel):
    category: Optional[str]
    count: int
    total_views: int


class BlogSummary(CamelModel):
    id: uuid.UUID
    title: str
    category: Optional[str] = None
    view_count: int
    published_at: Optional[datetime] = None


class StatusCount(CamelModel):
    status: str
    count: int


class BlogStats(CamelModel):
    by_category: List[CategoryCount]
    top_performing: List[BlogSummary]
    status_breakdown: List[StatusCount]
    monthly_trend: MonthOverMonth


class DailyCount(CamelModel):
    date: str
    count: int


class UserStats(CamelModel):
    registration_trend: List[DailyCount]
    active_users: int = Field(..., description="Distinct users who commented in the last 30 days")
    monthly_growth: MonthOverMonth


class PendingComment(CamelModel):
    id: uuid.UUID
    content: str
    username: str
    created_at: datetime
    blog_id: uuid.UUID


class PendingReview(CamelModel):
    id: uuid.UUID
    content: str
    name: str
    created_at: datetime
    property_id: uuid.UUID


class ModerationSection(CamelModel):
    status_breakdown: List[StatusCount]


class ContentModerationStats(CamelModel):
    comments: ModerationSection
    reviews: ModerationSection
    pending_comments: List[PendingComment]
    pending_reviews: List[PendingReview]


class MonthlyRevenue(CamelModel):
    month: str = Field(..., examples=["2026-10"])
    revenue: str
    properties_sold: int


class CityRevenue(CamelModel):
    city: str
    revenue: str
    units_sold: int
    average_price: str


class RevenueStats(CamelModel):
    overview: RevenueOverview
    total_properties_sold: int
    monthly_trend: List[MonthlyRevenue]
    by_city: List[CityRevenue]


class ReviewedProperty(CamelModel):
    id: uuid.UUID
    title: str
    city: str
    review_count: int


class SellingCity(CamelModel):
    city: str
    sold_count: int
    total_revenue: str


class TopPerformers(CamelModel):
    top_blogs: List[BlogSummary]
    top_reviewed_properties: List[ReviewedProperty] = Field(
        ...,
        description="Ranked by approved reviews; properties without one are not listed"
    )
    top_selling_cities: List[SellingCity]


class RecentProperty(CamelModel):
    id: uuid.UUID
    title: str
    city: str
    price: float
    status: str
    created_at: datetime


class RecentComment(CamelModel):
    id: uuid.UUID
    username: str
    content: str
    status: str
    created_at: datetime


class RecentReview(CamelModel):
    id: uuid.UUID
    name: str
    content: str
    status: str
    created_at: datetime


class RecentActivityFeed(CamelModel):
    recent_properties: List[RecentProperty]
    recent_blogs: List[BlogSummary]
    recent_comments: List[RecentComment]
    recent_reviews: List[RecentReview]
