"""
Dashboard API endpoints: statistics snapshot, segmented reports, listings,
user directory and moderation queues.
All routes require an admin bearer token.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from decimal import Decimal
from uuid import UUID

from estate_dashboard.models.user import Admin
from estate_dashboard.services import DashboardService, ListingService, ModerationService, AdminService
from estate_dashboard.schemas.common import DataResponse
from estate_dashboard.schemas.dashboard import (
    DashboardSnapshot,
    PropertyStats,
    BlogStats,
    UserStats,
    ContentModerationStats,
    RevenueStats,
    TopPerformers,
    RecentActivityFeed,
)
from estate_dashboard.schemas.property import ListingPage
from estate_dashboard.schemas.user import UserPage, UserDetails, AdminPage
from estate_dashboard.schemas.blog import CommentPage, CommentResponse
from estate_dashboard.schemas.review import ReviewPage, ReviewResponse, ModerationStats, ReviewStats, StatusUpdate
from estate_dashboard.schemas.error import get_common_error_responses, get_auth_error_responses
from estate_dashboard.utils.dependencies import (
    get_current_admin,
    require_permission,
    get_dashboard_service,
    get_listing_service,
    get_moderation_service,
    get_admin_service,
)


router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=DataResponse[DashboardSnapshot],
    summary="Dashboard statistics snapshot",
    description="Inventory, sell-to-us, blog, user and engagement figures. "
                "Super admins also receive the revenue section.",
    responses=get_auth_error_responses()
)
async def get_dashboard_stats(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    stats = await dashboard_service.get_dashboard_stats(current_admin)
    return DataResponse(data=stats)


@router.get(
    "/properties/stats",
    response_model=DataResponse[PropertyStats],
    summary="Property statistics",
    responses=get_auth_error_responses()
)
async def get_property_stats(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_property_stats())


@router.get(
    "/blogs/stats",
    response_model=DataResponse[BlogStats],
    summary="Blog statistics",
    responses=get_auth_error_responses()
)
async def get_blog_stats(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_blog_stats())


@router.get(
    "/users/stats",
    response_model=DataResponse[UserStats],
    summary="User statistics",
    responses=get_auth_error_responses()
)
async def get_user_stats(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_user_stats())


@router.get(
    "/content/stats",
    response_model=DataResponse[ContentModerationStats],
    summary="Content moderation statistics",
    responses=get_auth_error_responses()
)
async def get_content_stats(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_content_stats())


@router.get(
    "/revenue/stats",
    response_model=DataResponse[RevenueStats],
    summary="Revenue statistics",
    description="Monthly revenue for the trailing 12 months and revenue by city. Super admins only.",
    responses=get_auth_error_responses()
)
async def get_revenue_stats(
    current_admin: Admin = Depends(require_permission("view_revenue", "view revenue statistics")),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_revenue_stats())


@router.get(
    "/top-performers",
    response_model=DataResponse[TopPerformers],
    summary="Top blogs, reviewed properties and selling cities",
    responses=get_auth_error_responses()
)
async def get_top_performers(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_top_performers())


@router.get(
    "/recent-activity",
    response_model=DataResponse[RecentActivityFeed],
    summary="Latest properties, blogs, comments and reviews",
    responses=get_auth_error_responses()
)
async def get_recent_activity(
    current_admin: Admin = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return DataResponse(data=await dashboard_service.get_recent_activity())


@router.get(
    "/listings",
    response_model=DataResponse[ListingPage],
    summary="Property listings with review rollup",
    responses=get_common_error_responses()
)
async def get_listings(
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(20, ge=1, le=100, description="Number of listings per page"),
    type: Optional[str] = Query(None, description="Property type"),
    status_filter: Optional[str] = Query(None, alias="status", description="Listing status"),
    condition: Optional[str] = Query(None, description="Property condition"),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    zip_code: Optional[str] = Query(None, alias="zipCode"),
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[float] = Query(None, ge=0),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    current_admin: Admin = Depends(get_current_admin),
    listing_service: ListingService = Depends(get_listing_service)
):
    filters = ListingService.build_filters(
        type=type,
        status=status_filter,
        condition=condition,
        city=city,
        state=state,
        zip_code=zip_code,
        bedrooms=str(bedrooms) if bedrooms is not None else None,
        bathrooms=bathrooms,
        min_price=min_price,
        max_price=max_price
    )
    return DataResponse(data=await listing_service.get_listings(filters, page=page, limit=limit))


# User directory and staff

@router.get(
    "/users",
    response_model=DataResponse[UserPage],
    summary="Search users",
    responses=get_common_error_responses()
)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Matches username or email"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="createdAt, username, email or fullName"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    users = await admin_service.list_users(
        page=page, limit=limit, search=search, sort_by=sort_by, sort_order=sort_order
    )
    return DataResponse(data=users)


@router.get(
    "/users/{user_id}",
    response_model=DataResponse[UserDetails],
    summary="User details with comments, reviews and newsletter status",
    responses=get_common_error_responses()
)
async def get_user_details(
    user_id: UUID,
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return DataResponse(data=await admin_service.get_user_details(user_id))


@router.get(
    "/staffs",
    response_model=DataResponse[AdminPage],
    summary="Staff directory",
    responses=get_auth_error_responses()
)
async def list_staff(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return DataResponse(data=await admin_service.list_admins(page=page, limit=limit))


# Moderation

@router.get(
    "/comments",
    response_model=DataResponse[CommentPage],
    summary="Comment moderation queue",
    responses=get_common_error_responses()
)
async def list_comments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status", description="pending, approved, rejected or spam"),
    blog_id: Optional[UUID] = Query(None, alias="blogId"),
    current_admin: Admin = Depends(require_permission("moderate_content", "moderate content")),
    moderation_service: ModerationService = Depends(get_moderation_service)
):
    comments = await moderation_service.list_comments(status=status_filter, blog_id=blog_id, page=page, limit=limit)
    return DataResponse(data=comments)


@router.get(
    "/comments/stats",
    response_model=DataResponse[ModerationStats],
    summary="Comment counts per status",
    responses=get_auth_error_responses()
)
async def get_comment_stats(
    current_admin: Admin = Depends(require_permission("moderate_content", "moderate content")),
    moderation_service: ModerationService = Depends(get_moderation_service)
):
    return DataResponse(data=await moderation_service.get_comment_stats())


@router.put(
    "/comments/{comment_id}/status",
    response_model=DataResponse[CommentResponse],
    status_code=status.HTTP_200_OK,
    summary="Moderate a comment",
    description="Move a pending comment to approved, rejected or spam.",
    responses=get_common_error_responses()
)
async def update_comment_status(
    comment_id: UUID,
    status_update: StatusUpdate,
    current_admin: Admin = Depends(require_permission("moderate_content", "moderate content")),
    moderation_service: ModerationService = Depends(get_moderation_service)
):
    comment = await moderation_service.update_comment_status(comment_id, status_update.status, current_admin)
    return DataResponse(data=comment)


@router.get(
    "/reviews",
    response_model=DataResponse[ReviewPage],
    summary="Review moderation queue",
    responses=get_common_error_responses()
)
async def list_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status", description="pending, approved, rejected or spam"),
    property_id: Optional[UUID] = Query(None, alias="propertyId"),
    current_admin: Admin = Depends(require_permission("moderate_content", "moderate content")),
    moderation_service: ModerationService = Depends(get_moderation_service)
):
    reviews = await moderation_service.list_reviews(
        status=status_filter, property_id=property_id, page=page, limit=limit
    )
    return DataResponse(data=reviews)


@router.get(
    "/reviews/stats",
    response_model=DataResponse[ReviewStats],
    summary="Review counts per status and average ratings",
    responses=get_auth_error_responses()
)
async def get_review_stats(
    current_admin: Admin = Depends(require_permission("moderate_content", "moderate content")),
    moderation_service: ModerationService = Depends(get_moderation_service)
):
    return DataResponse(data=await moderation_service.get_review_stats())


@router.put(
    "/reviews/{review_id}/status",
    response_model=DataResponse[ReviewResponse],
    summary="Moderate a review",
    description="Move a pending review to approved, rejected or spam.",
    responses=get_common_error_responses()
)
async def update_review_status(
    review_id: UUID,
    status_update: StatusUpdate,
    current_admin: Admin = Depends(require_permission("moderate_content", "moderate content")),
    moderation_service: ModerationService = Depends(get_moderation_service)
):
    review = await moderation_service.update_review_status(review_id, status_update.status, current_admin)
    return DataResponse(data=review)
