"""
Review submission service.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from estate_dashboard.repositories.property import PropertyRepository
from estate_dashboard.repositories.review import ReviewRepository
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.models.user import User
from estate_dashboard.schemas.review import ReviewCreate, ReviewResponse
from estate_dashboard.utils.exceptions import NotFoundError, DuplicateReviewError
import uuid
import logging

logger = logging.getLogger(__name__)


class ReviewService:
    """Lets signed-in users review a property once."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.review_repo = ReviewRepository(db_session)

    async def submit_review(self, property_id: uuid.UUID, review_data: ReviewCreate, user: User) -> ReviewResponse:
        """
        Create a pending review for a property.

        The (property, user) unique index decides duplicates, so two concurrent
        submissions cannot both succeed.

        Raises:
            NotFoundError: If property doesn't exist
            DuplicateReviewError: If the user already reviewed the property
        """
        if not await self.property_repo.exists(property_id):
            raise NotFoundError("Property", str(property_id))

        data = review_data.model_dump()
        data.update(
            name=review_data.name or user.full_name or user.username,
            property_id=property_id,
            user_id=user.id,
            status=ModerationStatus.PENDING,
        )

        try:
            review = await self.review_repo.create_review(data)
        except IntegrityError:
            raise DuplicateReviewError()

        logger.info(f"User {user.id} submitted review {review.id} for property {property_id}")
        return ReviewResponse.model_validate(review)
