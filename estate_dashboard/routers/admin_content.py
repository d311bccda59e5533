"""
Admin back office endpoints for properties, blogs, sell submissions and the newsletter.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from uuid import UUID

from estate_dashboard.models.user import Admin
from estate_dashboard.services import ListingService, BlogService, SellService, NewsletterService
from estate_dashboard.schemas.common import DataResponse, MessageResponse
from estate_dashboard.schemas.property import PropertyCreate, PropertyUpdate, PropertyResponse
from estate_dashboard.schemas.blog import BlogCreate, BlogUpdate, BlogResponse
from estate_dashboard.schemas.sell import SellStats, SellSubmissionPage, SellSubmissionResponse, OfferStatusUpdate
from estate_dashboard.schemas.newsletter import NewsletterStats, BroadcastList
from estate_dashboard.schemas.error import get_crud_error_responses, get_common_error_responses, get_auth_error_responses
from estate_dashboard.utils.dependencies import (
    get_current_admin,
    require_permission,
    get_listing_service,
    get_blog_service,
    get_sell_service,
    get_newsletter_service,
)


router = APIRouter(prefix="/admin", tags=["Admin"])

manage_content = require_permission("manage_content", "manage content")
manage_sell_submissions = require_permission("manage_sell_submissions", "manage sell submissions")


# Properties

@router.post(
    "/properties",
    response_model=DataResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_admin: Admin = Depends(manage_content),
    listing_service: ListingService = Depends(get_listing_service)
):
    return DataResponse(data=await listing_service.create_property(property_data, current_admin))


@router.put(
    "/properties/{property_id}",
    response_model=DataResponse[PropertyResponse],
    summary="Update property",
    responses=get_crud_error_responses()
)
async def update_property(
    property_id: UUID,
    property_data: PropertyUpdate,
    current_admin: Admin = Depends(manage_content),
    listing_service: ListingService = Depends(get_listing_service)
):
    return DataResponse(data=await listing_service.update_property(property_id, property_data, current_admin))


@router.delete(
    "/properties/{property_id}",
    response_model=MessageResponse,
    summary="Delete property",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID,
    current_admin: Admin = Depends(manage_content),
    listing_service: ListingService = Depends(get_listing_service)
):
    await listing_service.delete_property(property_id, current_admin)
    return MessageResponse(message="Property deleted successfully")


# Blogs

@router.post(
    "/blogs",
    response_model=DataResponse[BlogResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create blog post",
    responses=get_crud_error_responses()
)
async def create_blog(
    blog_data: BlogCreate,
    current_admin: Admin = Depends(manage_content),
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.create_blog(blog_data, current_admin))


@router.put(
    "/blogs/{blog_id}",
    response_model=DataResponse[BlogResponse],
    summary="Update blog post",
    description="Publishing a draft for the first time stamps its publish date.",
    responses=get_crud_error_responses()
)
async def update_blog(
    blog_id: UUID,
    blog_data: BlogUpdate,
    current_admin: Admin = Depends(manage_content),
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.update_blog(blog_id, blog_data, current_admin))


@router.delete(
    "/blogs/{blog_id}",
    response_model=MessageResponse,
    summary="Delete blog post",
    responses=get_crud_error_responses()
)
async def delete_blog(
    blog_id: UUID,
    current_admin: Admin = Depends(manage_content),
    blog_service: BlogService = Depends(get_blog_service)
):
    await blog_service.delete_blog(blog_id, current_admin)
    return MessageResponse(message="Blog deleted successfully")


# Sell submissions

@router.get(
    "/sell/stats",
    response_model=DataResponse[SellStats],
    summary="Sell submission counts per offer status",
    responses=get_auth_error_responses()
)
async def get_sell_stats(
    current_admin: Admin = Depends(manage_sell_submissions),
    sell_service: SellService = Depends(get_sell_service)
):
    return DataResponse(data=await sell_service.get_stats())


@router.get(
    "/sell/submissions",
    response_model=DataResponse[SellSubmissionPage],
    summary="List sell submissions",
    responses=get_common_error_responses()
)
async def list_sell_submissions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    offer_status: Optional[str] = Query(None, alias="offerStatus", description="Pending, Offer Sent, Accepted or Rejected"),
    current_admin: Admin = Depends(manage_sell_submissions),
    sell_service: SellService = Depends(get_sell_service)
):
    submissions = await sell_service.list_submissions(offer_status=offer_status, page=page, limit=limit)
    return DataResponse(data=submissions)


@router.put(
    "/sell/submissions/{submission_id}",
    response_model=DataResponse[SellSubmissionResponse],
    summary="Update offer status",
    responses=get_crud_error_responses()
)
async def update_offer_status(
    submission_id: UUID,
    status_update: OfferStatusUpdate,
    current_admin: Admin = Depends(manage_sell_submissions),
    sell_service: SellService = Depends(get_sell_service)
):
    submission = await sell_service.update_offer_status(submission_id, status_update.offer_status, current_admin)
    return DataResponse(data=submission)


# Newsletter

@router.get(
    "/newsletter/stats",
    response_model=DataResponse[NewsletterStats],
    summary="Newsletter subscriber counts",
    responses=get_auth_error_responses()
)
async def get_newsletter_stats(
    current_admin: Admin = Depends(get_current_admin),
    newsletter_service: NewsletterService = Depends(get_newsletter_service)
):
    return DataResponse(data=await newsletter_service.get_stats())


@router.get(
    "/newsletter/broadcasts",
    response_model=DataResponse[BroadcastList],
    summary="Recent newsletter broadcasts",
    responses=get_auth_error_responses()
)
async def get_recent_broadcasts(
    limit: int = Query(10, ge=1, le=100),
    current_admin: Admin = Depends(get_current_admin),
    newsletter_service: NewsletterService = Depends(get_newsletter_service)
):
    return DataResponse(data=await newsletter_service.get_recent_broadcasts(limit))
