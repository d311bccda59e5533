"""
Listing service for the property catalogue.
Covers the dashboard listings with review rollups, the public catalogue and
admin property management.
"""

from typing import Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories.property import PropertyRepository, PropertySearchFilters
from estate_dashboard.repositories.review import ReviewRepository
from estate_dashboard.models.property import Property, PropertyType, PropertyStatus, PropertyCondition
from estate_dashboard.models.user import Admin
from estate_dashboard.database import utc_now
from estate_dashboard.schemas.common import page_meta, page_offset
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
from estate_dashboard.schemas.review import ReviewResponse
from estate_dashboard.utils.exceptions import NotFoundError, ValidationError
from estate_dashboard.utils.reporting import to_float
from estate_dashboard.utils.validators import ValidationUtils
import uuid
import logging

logger = logging.getLogger(__name__)


class ListingService:
    """
    Property catalogue service.
    Filters arrive as raw query values and are validated here so bad values surface as 400s.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.review_repo = ReviewRepository(db_session)

    @staticmethod
    def build_filters(
        type: Optional[str] = None,
        status: Optional[str] = None,
        condition: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
        bedrooms: Optional[str] = None,
        min_bedrooms: Optional[int] = None,
        bathrooms: Optional[float] = None,
        min_bathrooms: Optional[float] = None,
        min_sqft: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        search_text: Optional[str] = None
    ) -> PropertySearchFilters:
        """
        Validate raw filter values and build repository search filters.
        `type` and `bedrooms` accept comma-separated lists, e.g. "House,Villa" or "2,3".

        Raises:
            ValidationError: If an enum value or list is malformed, or the price range is inverted
        """
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("minPrice cannot be greater than maxPrice")

        return PropertySearchFilters(
            types=ValidationUtils.parse_enum_list(type, PropertyType, "type"),
            status=ValidationUtils.validate_enum(status, PropertyStatus, "status") if status else None,
            condition=ValidationUtils.validate_enum(condition, PropertyCondition, "condition") if condition else None,
            city=city.strip() if city else None,
            state=state.strip() if state else None,
            zip_code=zip_code.strip() if zip_code else None,
            bedrooms=ValidationUtils.parse_int_list(bedrooms, "bedrooms"),
            min_bedrooms=min_bedrooms,
            bathrooms=bathrooms,
            min_bathrooms=min_bathrooms,
            min_sqft=min_sqft,
            min_price=min_price,
            max_price=max_price,
            search_text=search_text.strip() if search_text and search_text.strip() else None
        )

    async def get_listings(self, filters: PropertySearchFilters, page: int = 1, limit: int = 20) -> ListingPage:
        """
        Dashboard listings: one page of properties with their average rating and review count.
        totalItems counts properties only, so reviews never inflate it.
        """
        rows, total = await self.property_repo.get_listings_with_ratings(
            filters, skip=page_offset(page, limit), limit=limit
        )

        listings = [
            ListingItem(
                **PropertyResponse.model_validate(prop).model_dump(),
                average_rating=to_float(average, 2),
                review_count=review_count
            )
            for prop, average, review_count in rows
        ]
        return ListingPage(**page_meta(total, page, limit), listings=listings)

    async def list_properties(self, filters: PropertySearchFilters, page: int = 1, limit: int = 20) -> PropertyPage:
        properties, total = await self.property_repo.search_properties(
            filters, skip=page_offset(page, limit), limit=limit
        )
        return PropertyPage(
            **page_meta(total, page, limit),
            properties=[PropertyResponse.model_validate(prop) for prop in properties]
        )

    async def search_properties(self, query: Optional[str], limit: int = 20) -> PropertySearchResults:
        """
        Free-text search over title, address, city and description.

        Raises:
            ValidationError: If the query is missing or blank
        """
        text = ValidationUtils.validate_search_query(query)
        properties = await self.property_repo.text_search(text, limit=limit)
        logger.debug(f"Search for '{text}' matched {len(properties)} properties")
        return PropertySearchResults(
            properties=[PropertyResponse.model_validate(prop) for prop in properties],
            count=len(properties)
        )

    async def get_property_detail(self, property_id: uuid.UUID) -> PropertyDetail:
        """
        A property with up to four related listings and its approved reviews.

        Raises:
            NotFoundError: If property doesn't exist
        """
        property_obj = await self._get_property_or_404(property_id)
        related = await self.property_repo.get_related_properties(property_obj, limit=4)
        reviews = await self.review_repo.get_approved_for_property(property_id)

        return PropertyDetail(
            property=PropertyResponse.model_validate(property_obj),
            related_properties=[PropertyResponse.model_validate(prop) for prop in related],
            reviews=[ReviewResponse.model_validate(review) for review in reviews]
        )

    # Admin management

    async def create_property(self, property_data: PropertyCreate, admin: Admin) -> PropertyResponse:
        data = property_data.model_dump()
        if data.get("status") == PropertyStatus.SOLD:
            data["sold_at"] = utc_now()
        property_obj = await self.property_repo.create(data)
        logger.info(f"Property created by admin {admin.email}: {property_obj.title} (ID: {property_obj.id})")
        return PropertyResponse.model_validate(property_obj)

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        admin: Admin
    ) -> PropertyResponse:
        """
        Update the given fields of a property. Marking it Sold dates the sale to now.

        Raises:
            NotFoundError: If property doesn't exist
        """
        current = await self._get_property_or_404(property_id)
        update_data = property_data.model_dump(exclude_none=True)
        if update_data.get("status") == PropertyStatus.SOLD and current.status != PropertyStatus.SOLD:
            update_data["sold_at"] = utc_now()

        updated = await self.property_repo.update(property_id, update_data)

        logger.info(f"Property updated by admin {admin.email}: {property_id} ({', '.join(update_data)})")
        return PropertyResponse.model_validate(updated)

    async def delete_property(self, property_id: uuid.UUID, admin: Admin) -> None:
        deleted = await self.property_repo.delete(property_id)
        if not deleted:
            raise NotFoundError("Property", str(property_id))
        logger.info(f"Property deleted by admin {admin.email}: {property_id}")

    async def _get_property_or_404(self, property_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise NotFoundError("Property", str(property_id))
        return property_obj
