"""
Property repository for listings, catalogue search and inventory/revenue aggregates.
All monetary aggregates are restricted to SOLD listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func, case, desc, asc, literal
from estate_dashboard.repositories.base import BaseRepository, count_if
from estate_dashboard.models.property import Property, PropertyType, PropertyStatus, PropertyCondition
from estate_dashboard.models.review import Review, ModerationStatus, RATING_FIELDS
from estate_dashboard.utils.reporting import DateRanges, PRICE_BUCKETS
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Data class for property search filters."""

    def __init__(
        self,
        types: Optional[List[PropertyType]] = None,
        status: Optional[PropertyStatus] = None,
        condition: Optional[PropertyCondition] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
        bedrooms: Optional[List[int]] = None,
        min_bedrooms: Optional[int] = None,
        bathrooms: Optional[float] = None,
        min_bathrooms: Optional[float] = None,
        min_sqft: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        search_text: Optional[str] = None
    ):
        self.types = types or []
        self.status = status
        self.condition = condition
        self.city = city
        self.state = state
        self.zip_code = zip_code
        self.bedrooms = bedrooms or []
        self.min_bedrooms = min_bedrooms
        self.bathrooms = bathrooms
        self.min_bathrooms = min_bathrooms
        self.min_sqft = min_sqft
        self.min_price = min_price
        self.max_price = max_price
        self.search_text = search_text


def sale_date():
    """When a Sold listing was sold: `sold_at`, or its last update if never stamped."""
    return func.coalesce(Property.sold_at, Property.updated_at)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Hosts the catalogue search plus every property-level aggregate used by reports.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    # Catalogue

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
        order_direction: str = "desc"
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = select(func.count(Property.id)).where(*conditions)
            total_count = (await self.db.execute(count_query)).scalar() or 0

            order_field = getattr(Property, order_by, Property.created_at)
            ordering = desc(order_field) if order_direction.lower() == "desc" else asc(order_field)

            query = select(Property).where(*conditions).order_by(ordering).offset(skip).limit(limit)
            properties = list((await self.db.execute(query)).scalars().all())

            logger.debug(f"Property search returned {len(properties)} of {total_count} results")
            return properties, total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def get_listings_with_ratings(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Tuple[Property, Optional[Any], int]], int]:
        """
        Page of properties with their average rating and review count.
        Only approved reviews are rolled up, as on the property detail page.

        Review aggregates are computed per property in a subquery and left-joined,
        and the total is counted on properties alone, so multiple reviews per
        property never inflate the row count or the total.

        Returns:
            Tuple of ([(property, average_rating, review_count)], total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            rating_sum = sum(getattr(Review, field) for field in RATING_FIELDS)
            review_stats = (
                select(
                    Review.property_id.label("property_id"),
                    func.avg(rating_sum / 4.0).label("average_rating"),
                    func.count(Review.id).label("review_count")
                )
                .where(Review.status == ModerationStatus.APPROVED)
                .group_by(Review.property_id)
                .subquery()
            )

            total_query = select(func.count(Property.id)).where(*conditions)
            total_items = (await self.db.execute(total_query)).scalar() or 0

            query = (
                select(Property, review_stats.c.average_rating, review_stats.c.review_count)
                .outerjoin(review_stats, review_stats.c.property_id == Property.id)
                .where(*conditions)
                .order_by(desc(Property.created_at))
                .offset(skip)
                .limit(limit)
            )
            result = await self.db.execute(query)
            rows = [(prop, average, count or 0) for prop, average, count in result.all()]

            logger.debug(f"Listings page returned {len(rows)} of {total_items} properties")
            return rows, total_items
        except Exception as e:
            logger.error(f"Failed to get listings with ratings: {e}")
            raise

    async def get_related_properties(self, property_obj: Property, limit: int = 4) -> List[Property]:
        """Properties sharing the city, type or zip code of the given one."""
        try:
            query = (
                select(Property)
                .where(
                    Property.id != property_obj.id,
                    or_(
                        Property.city == property_obj.city,
                        Property.type == property_obj.type,
                        Property.zip_code == property_obj.zip_code
                    )
                )
                .order_by(desc(Property.created_at))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to get related properties for {property_obj.id}: {e}")
            raise

    async def text_search(self, text: str, limit: int = 20) -> List[Property]:
        try:
            filters = PropertySearchFilters(search_text=text)
            query = (
                select(Property)
                .where(*self._build_filter_conditions(filters))
                .order_by(desc(Property.created_at))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to search properties for '{text}': {e}")
            raise

    # Inventory and revenue aggregates

    async def get_inventory_snapshot(self, ranges: DateRanges) -> Dict[str, int]:
        """
        Counts for the dashboard inventory section in one conditional-aggregate query.
        Sales are dated by `sold_at`, falling back to the last update for
        listings that were never stamped.
        """
        try:
            sold = Property.status == PropertyStatus.SOLD
            query = select(
                func.count(Property.id).label("total"),
                count_if(sold).label("sold"),
                count_if(Property.created_at >= ranges.this_month.start).label("added_this_month"),
                count_if(
                    Property.created_at.between(ranges.last_month.start, ranges.last_month.end)
                ).label("added_last_month"),
                count_if(and_(sold, sale_date() >= ranges.this_month.start)).label("sold_this_month"),
                count_if(
                    and_(sold, sale_date().between(ranges.last_month.start, ranges.last_month.end))
                ).label("sold_last_month"),
            )
            row = (await self.db.execute(query)).one()
            return {key: int(value or 0) for key, value in row._mapping.items()}
        except Exception as e:
            logger.error(f"Failed to get inventory snapshot: {e}")
            raise

    async def get_revenue_totals(self, since: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Total revenue and units sold over SOLD listings, plus revenue from
        listings sold on or after `since` when given.
        """
        try:
            recent = sale_date() >= since if since is not None else literal(False)
            query = (
                select(
                    func.coalesce(func.sum(Property.price), 0).label("total_revenue"),
                    func.coalesce(func.sum(case((recent, Property.price), else_=0)), 0).label("recent_revenue"),
                    func.count(Property.id).label("units_sold"),
                )
                .where(Property.status == PropertyStatus.SOLD)
            )
            row = (await self.db.execute(query)).one()
            return {
                "total_revenue": row.total_revenue or 0,
                "recent_revenue": row.recent_revenue or 0,
                "units_sold": int(row.units_sold or 0),
            }
        except Exception as e:
            logger.error(f"Failed to get revenue totals: {e}")
            raise

    async def count_created_between(self, start: datetime, end: Optional[datetime] = None) -> int:
        """Listings created at or after start, and at or before end when given."""
        if end is None:
            return await self.count([Property.created_at >= start])
        return await self.count([Property.created_at.between(start, end)])

    async def count_by_type_with_avg_price(self) -> List[Dict[str, Any]]:
        try:
            query = (
                select(Property.type, func.count(Property.id), func.avg(Property.price))
                .where(Property.type.is_not(None))
                .group_by(Property.type)
                .order_by(desc(func.count(Property.id)))
            )
            result = await self.db.execute(query)
            return [
                {"type": prop_type, "count": count, "average_price": avg_price}
                for prop_type, count, avg_price in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to count properties by type: {e}")
            raise

    async def get_top_cities(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Cities with the most listings, with the number sold in each."""
        try:
            listing_count = func.count(Property.id)
            query = (
                select(Property.city, listing_count, count_if(Property.status == PropertyStatus.SOLD))
                .group_by(Property.city)
                .order_by(desc(listing_count), asc(Property.city))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return [
                {"city": city, "count": count, "sold_count": int(sold or 0)}
                for city, count, sold in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to get top cities: {e}")
            raise

    async def get_price_distribution(self) -> List[Dict[str, Any]]:
        """
        Listing counts per fixed price bucket, in bucket order, including empty buckets.
        A price on a breakpoint falls in the lower bucket (1M is "$500K-$1M").
        """
        try:
            whens = []
            for bucket in PRICE_BUCKETS:
                if bucket.upper is None:
                    continue
                below_upper = Property.price <= bucket.upper if bucket.includes_upper else Property.price < bucket.upper
                whens.append((below_upper, bucket.label))
            bucket_label = case(*whens, else_=PRICE_BUCKETS[-1].label).label("price_range")

            labelled = select(bucket_label, Property.id.label("property_id")).subquery()
            query = (
                select(labelled.c.price_range, func.count(labelled.c.property_id))
                .group_by(labelled.c.price_range)
            )
            counts = {label: count for label, count in (await self.db.execute(query)).all()}
            return [{"range": bucket.label, "count": counts.get(bucket.label, 0)} for bucket in PRICE_BUCKETS]
        except Exception as e:
            logger.error(f"Failed to get price distribution: {e}")
            raise

    async def get_monthly_revenue(self, windows: List[Tuple[str, datetime, datetime]]) -> List[Dict[str, Any]]:
        """
        Revenue and units sold per calendar month window, oldest first.
        Months without sales are reported with zero values.
        """
        try:
            month_key = case(
                *[(sale_date().between(start, end), key) for key, start, end in windows],
                else_=None
            ).label("month")

            labelled = (
                select(month_key, Property.price.label("price"), Property.id.label("property_id"))
                .where(
                    Property.status == PropertyStatus.SOLD,
                    sale_date() >= windows[0][1]
                )
                .subquery()
            )
            query = (
                select(
                    labelled.c.month,
                    func.coalesce(func.sum(labelled.c.price), 0),
                    func.count(labelled.c.property_id)
                )
                .where(labelled.c.month.is_not(None))
                .group_by(labelled.c.month)
            )
            totals = {month: (revenue, sold) for month, revenue, sold in (await self.db.execute(query)).all()}

            return [
                {
                    "month": key,
                    "revenue": totals.get(key, (0, 0))[0],
                    "properties_sold": totals.get(key, (0, 0))[1],
                }
                for key, _, _ in windows
            ]
        except Exception as e:
            logger.error(f"Failed to get monthly revenue: {e}")
            raise

    async def get_revenue_by_city(self, limit: int = 10) -> List[Dict[str, Any]]:
        try:
            revenue = func.sum(Property.price)
            query = (
                select(Property.city, revenue, func.count(Property.id), func.avg(Property.price))
                .where(Property.status == PropertyStatus.SOLD)
                .group_by(Property.city)
                .order_by(desc(revenue))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return [
                {"city": city, "revenue": total, "units_sold": units, "average_price": average}
                for city, total, units, average in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to get revenue by city: {e}")
            raise

    async def get_top_selling_cities(self, limit: int = 5) -> List[Dict[str, Any]]:
        try:
            sold_count = func.count(Property.id)
            query = (
                select(Property.city, sold_count, func.sum(Property.price))
                .where(Property.status == PropertyStatus.SOLD)
                .group_by(Property.city)
                .order_by(desc(sold_count), asc(Property.city))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return [
                {"city": city, "sold_count": count, "total_revenue": total}
                for city, count, total in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to get top selling cities: {e}")
            raise

    async def get_top_reviewed(self, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Properties ranked by number of approved reviews.
        Inner join: properties without an approved review do not appear.
        """
        try:
            review_count = func.count(Review.id)
            query = (
                select(Property.id, Property.title, Property.city, review_count)
                .join(
                    Review,
                    and_(Review.property_id == Property.id, Review.status == ModerationStatus.APPROVED)
                )
                .group_by(Property.id, Property.title, Property.city)
                .order_by(desc(review_count), asc(Property.title))
                .limit(limit)
            )
            result = await self.db.execute(query)
            return [
                {"id": prop_id, "title": title, "city": city, "review_count": count}
                for prop_id, title, city, count in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to get top reviewed properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> list:
        """Translate search filters into SQL conditions combined with AND by the caller."""
        conditions = []

        if filters.types:
            conditions.append(Property.type.in_(filters.types))
        if filters.status:
            conditions.append(Property.status == filters.status)
        if filters.condition:
            conditions.append(Property.condition == filters.condition)
        if filters.city:
            conditions.append(Property.city == filters.city)
        if filters.state:
            conditions.append(Property.state == filters.state)
        if filters.zip_code:
            conditions.append(Property.zip_code == filters.zip_code)

        if filters.bedrooms:
            conditions.append(Property.bedrooms.in_(filters.bedrooms))
        elif filters.min_bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.min_bedrooms)

        if filters.bathrooms is not None:
            conditions.append(Property.bathrooms == filters.bathrooms)
        elif filters.min_bathrooms is not None:
            conditions.append(Property.bathrooms >= filters.min_bathrooms)

        if filters.min_sqft is not None:
            conditions.append(Property.sqft >= filters.min_sqft)
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.search_text:
            pattern = f"%{filters.search_text}%"
            conditions.append(or_(
                Property.title.ilike(pattern),
                Property.address.ilike(pattern),
                Property.city.ilike(pattern),
                Property.description.ilike(pattern)
            ))

        return conditions
