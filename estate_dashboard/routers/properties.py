"""
Public property catalogue endpoints: listing, search, detail and review submission.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from decimal import Decimal
from uuid import UUID

from estate_dashboard.models.user import User
from estate_dashboard.services import ListingService, ReviewService
from estate_dashboard.schemas.common import DataResponse
from estate_dashboard.schemas.property import PropertyPage, PropertySearchResults, PropertyDetail
from estate_dashboard.schemas.review import ReviewCreate, ReviewResponse
from estate_dashboard.schemas.error import get_common_error_responses, get_crud_error_responses
from estate_dashboard.utils.dependencies import get_current_user, get_listing_service, get_review_service


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=DataResponse[PropertyPage],
    status_code=status.HTTP_200_OK,
    summary="List properties with filtering",
    description="Paginated catalogue. `type` and `bedrooms` accept comma-separated values.",
    responses=get_common_error_responses()
)
async def list_properties(
    # Search parameters
    query: Optional[str] = Query(None, description="Free text matched against title, address, city and description"),

    # Property filters
    type: Optional[str] = Query(None, description="Property types, e.g. House,Villa"),
    status_filter: Optional[str] = Query(None, alias="status", description="Listing status"),
    condition: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    zip_code: Optional[str] = Query(None, alias="zipCode"),
    bedrooms: Optional[str] = Query(None, description="Exact bedroom counts, e.g. 2,3"),
    min_bedrooms: Optional[int] = Query(None, alias="minBedrooms", ge=0),
    min_bathrooms: Optional[float] = Query(None, alias="minBathrooms", ge=0),
    min_sqft: Optional[int] = Query(None, alias="minSqft", ge=0),

    # Price filters
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),

    # Pagination
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(20, ge=1, le=100, description="Number of properties per page"),

    listing_service: ListingService = Depends(get_listing_service)
):
    filters = ListingService.build_filters(
        type=type,
        status=status_filter,
        condition=condition,
        city=city,
        state=state,
        zip_code=zip_code,
        bedrooms=bedrooms,
        min_bedrooms=min_bedrooms,
        min_bathrooms=min_bathrooms,
        min_sqft=min_sqft,
        min_price=min_price,
        max_price=max_price,
        search_text=query
    )
    return DataResponse(data=await listing_service.list_properties(filters, page=page, limit=limit))


@router.get(
    "/search",
    response_model=DataResponse[PropertySearchResults],
    summary="Search properties",
    description="Free-text search returning at most 20 properties. The query is required.",
    responses=get_common_error_responses()
)
async def search_properties(
    query: Optional[str] = Query(None, description="Search text"),
    listing_service: ListingService = Depends(get_listing_service)
):
    return DataResponse(data=await listing_service.search_properties(query, limit=20))


@router.get(
    "/{property_id}",
    response_model=DataResponse[PropertyDetail],
    summary="Get property details",
    description="A property with up to 4 related properties and its approved reviews.",
    responses=get_common_error_responses()
)
async def get_property(
    property_id: UUID,
    listing_service: ListingService = Depends(get_listing_service)
):
    return DataResponse(data=await listing_service.get_property_detail(property_id))


@router.post(
    "/{property_id}/reviews",
    response_model=DataResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a property",
    description="Signed-in users can review each property once. Reviews start out pending moderation.",
    responses=get_crud_error_responses()
)
async def submit_review(
    property_id: UUID,
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    return DataResponse(data=await review_service.submit_review(property_id, review_data, current_user))
