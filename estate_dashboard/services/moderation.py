"""
Moderation service for blog comments and property reviews.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories.blog import CommentRepository
from estate_dashboard.repositories.review import ReviewRepository
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.models.user import Admin
from estate_dashboard.schemas.common import page_meta, page_offset
from estate_dashboard.schemas.blog import CommentResponse, CommentPage
from estate_dashboard.schemas.review import ReviewResponse, ReviewPage, ModerationStats, ReviewStats, RatingAverages
from estate_dashboard.utils.exceptions import NotFoundError, ModerationStateError
from estate_dashboard.utils.reporting import to_float
from estate_dashboard.utils.validators import ValidationUtils
import uuid
import logging

logger = logging.getLogger(__name__)


class ModerationService:
    """
    Moderation queues and decisions.

    Items start out pending. A pending item may be approved, rejected or marked
    as spam; once moderated its status is final.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.comment_repo = CommentRepository(db_session)
        self.review_repo = ReviewRepository(db_session)

    @staticmethod
    def check_transition(current: ModerationStatus, requested: ModerationStatus) -> None:
        """
        Raises:
            ModerationStateError: Unless moving a pending item to a moderated status
        """
        if current != ModerationStatus.PENDING or requested == ModerationStatus.PENDING:
            raise ModerationStateError(current.value, requested.value)

    # Comments

    async def list_comments(
        self,
        status: Optional[str] = None,
        blog_id: Optional[uuid.UUID] = None,
        page: int = 1,
        limit: int = 20
    ) -> CommentPage:
        status_filter = ValidationUtils.validate_enum(status, ModerationStatus, "status") if status else None
        comments, total = await self.comment_repo.list_comments(
            status=status_filter, blog_id=blog_id, skip=page_offset(page, limit), limit=limit
        )
        return CommentPage(
            **page_meta(total, page, limit),
            comments=[CommentResponse.model_validate(comment) for comment in comments]
        )

    async def get_comment_stats(self) -> ModerationStats:
        breakdown = await self.comment_repo.get_status_breakdown()
        return ModerationStats(**self._count_fields(breakdown))

    async def update_comment_status(self, comment_id: uuid.UUID, status: str, admin: Admin) -> CommentResponse:
        """
        Moderate a comment.

        Raises:
            ValidationError: If status is not a moderation status
            NotFoundError: If comment doesn't exist
            ModerationStateError: If the comment was already moderated or status is pending
        """
        new_status = ValidationUtils.validate_enum(status, ModerationStatus, "status")

        comment = await self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))

        self.check_transition(comment.status, new_status)

        updated = await self.comment_repo.update(comment_id, {"status": new_status})
        logger.info(f"Comment {comment_id} marked {new_status.value} by admin {admin.email}")
        return CommentResponse.model_validate(updated)

    # Reviews

    async def list_reviews(
        self,
        status: Optional[str] = None,
        property_id: Optional[uuid.UUID] = None,
        page: int = 1,
        limit: int = 20
    ) -> ReviewPage:
        status_filter = ValidationUtils.validate_enum(status, ModerationStatus, "status") if status else None
        reviews, total = await self.review_repo.list_reviews(
            status=status_filter, property_id=property_id, skip=page_offset(page, limit), limit=limit
        )
        return ReviewPage(
            **page_meta(total, page, limit),
            reviews=[ReviewResponse.model_validate(review) for review in reviews]
        )

    async def get_review_stats(self) -> ReviewStats:
        breakdown = await self.review_repo.get_status_breakdown()
        averages = await self.review_repo.get_average_ratings()

        return ReviewStats(
            **self._count_fields(breakdown),
            average_ratings=RatingAverages(
                location=to_float(averages["location_rating"], 1),
                condition=to_float(averages["condition_rating"], 1),
                value=to_float(averages["value_rating"], 1),
                amenities=to_float(averages["amenities_rating"], 1),
            )
        )

    async def update_review_status(self, review_id: uuid.UUID, status: str, admin: Admin) -> ReviewResponse:
        """
        Moderate a review.

        Raises:
            ValidationError: If status is not a moderation status
            NotFoundError: If review doesn't exist
            ModerationStateError: If the review was already moderated or status is pending
        """
        new_status = ValidationUtils.validate_enum(status, ModerationStatus, "status")

        review = await self.review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError("Review", str(review_id))

        self.check_transition(review.status, new_status)

        updated = await self.review_repo.update(review_id, {"status": new_status})
        logger.info(f"Review {review_id} marked {new_status.value} by admin {admin.email}")
        return ReviewResponse.model_validate(updated)

    @staticmethod
    def _count_fields(breakdown) -> dict:
        counts = {status.value: breakdown.get(status, 0) for status in ModerationStatus}
        return {"total": sum(counts.values()), **counts}
