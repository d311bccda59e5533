"""
Review repository: moderation queue, approved reviews per property and rating aggregates.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from estate_dashboard.repositories.base import BaseRepository
from estate_dashboard.models.review import Review, ModerationStatus, RATING_FIELDS
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
import uuid
import logging

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Repository for property reviews."""

    def __init__(self, db: AsyncSession):
        super().__init__(Review, db)

    async def create_review(self, review_data: Dict[str, Any]) -> Review:
        """
        Insert a review, relying on the (property_id, user_id) unique index.

        Raises:
            IntegrityError: If the user already reviewed the property
        """
        try:
            review = await self.create(review_data)
            logger.info(f"Created review {review.id} for property {review.property_id}")
            return review
        except IntegrityError:
            logger.warning(
                f"Duplicate review rejected for property {review_data.get('property_id')} "
                f"by user {review_data.get('user_id')}"
            )
            raise

    async def list_reviews(
        self,
        status: Optional[ModerationStatus] = None,
        property_id: Optional[uuid.UUID] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Review], int]:
        conditions = []
        if status:
            conditions.append(Review.status == status)
        if property_id:
            conditions.append(Review.property_id == property_id)
        return await self.paginate(skip=skip, limit=limit, conditions=conditions)

    async def get_approved_for_property(self, property_id: uuid.UUID) -> List[Review]:
        return await self.get_multi(
            limit=1000,
            conditions=[Review.property_id == property_id, Review.status == ModerationStatus.APPROVED]
        )

    async def get_recent_pending(self, limit: int = 10) -> List[Review]:
        return await self.get_multi(limit=limit, conditions=[Review.status == ModerationStatus.PENDING])

    async def get_for_user(self, user_id: uuid.UUID) -> List[Review]:
        return await self.get_multi(limit=1000, conditions=[Review.user_id == user_id])

    async def count_created_since(self, since: datetime) -> int:
        return await self.count([Review.created_at >= since])

    async def get_status_breakdown(self) -> Dict[ModerationStatus, int]:
        return await self.count_by(Review.status)

    async def get_average_ratings(self) -> Dict[str, Optional[Any]]:
        """Average of each rating category across approved reviews."""
        try:
            query = (
                select(*[func.avg(getattr(Review, field)).label(field) for field in RATING_FIELDS])
                .where(Review.status == ModerationStatus.APPROVED)
            )
            row = (await self.db.execute(query)).one()
            return dict(row._mapping)
        except Exception as e:
            logger.error(f"Failed to get average review ratings: {e}")
            raise
