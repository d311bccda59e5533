"""
Sell-to-us submission service.
"""

from typing import Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories.sell import SellSubmissionRepository
from estate_dashboard.models.sell import OfferStatus
from estate_dashboard.models.user import Admin
from estate_dashboard.schemas.common import page_meta, page_offset
from estate_dashboard.schemas.sell import (
    SellSubmissionCreate,
    SellSubmissionResponse,
    SellSubmissionPage,
    SellStats,
)
from estate_dashboard.utils.exceptions import NotFoundError
from estate_dashboard.utils.reporting import calculate_date_ranges, calculate_percentage_change
from estate_dashboard.utils.validators import ValidationUtils
import uuid
import logging

logger = logging.getLogger(__name__)


class SellService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.sell_repo = SellSubmissionRepository(db_session)

    async def submit(self, submission: SellSubmissionCreate) -> SellSubmissionResponse:
        """Store a public sell-to-us form; every submission starts as Pending."""
        data = submission.model_dump()
        data["offer_status"] = OfferStatus.PENDING
        created = await self.sell_repo.create(data)
        logger.info(f"Sell submission {created.id} received for {created.address}")
        return SellSubmissionResponse.model_validate(created)

    async def get_stats(self, now: Optional[datetime] = None) -> SellStats:
        ranges = calculate_date_ranges(now)
        pipeline = await self.sell_repo.get_pipeline_snapshot(ranges)

        return SellStats(
            total=pipeline["total"],
            pending=pipeline["pending"],
            offer_sent=pipeline["offer_sent"],
            accepted=pipeline["accepted"],
            rejected=pipeline["rejected"],
            this_month=pipeline["this_month"],
            last_month=pipeline["last_month"],
            change=calculate_percentage_change(pipeline["this_month"], pipeline["last_month"]),
        )

    async def list_submissions(
        self,
        offer_status: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> SellSubmissionPage:
        status_filter = (
            ValidationUtils.validate_enum(offer_status, OfferStatus, "offerStatus") if offer_status else None
        )
        submissions, total = await self.sell_repo.list_submissions(
            offer_status=status_filter, skip=page_offset(page, limit), limit=limit
        )
        return SellSubmissionPage(
            **page_meta(total, page, limit),
            submissions=[SellSubmissionResponse.model_validate(item) for item in submissions]
        )

    async def update_offer_status(
        self,
        submission_id: uuid.UUID,
        offer_status: str,
        admin: Admin
    ) -> SellSubmissionResponse:
        """
        Raises:
            ValidationError: If offer_status is not an offer status
            NotFoundError: If submission doesn't exist
        """
        new_status = ValidationUtils.validate_enum(offer_status, OfferStatus, "offerStatus")

        updated = await self.sell_repo.update(submission_id, {"offer_status": new_status})
        if updated is None:
            raise NotFoundError("Sell submission", str(submission_id))

        logger.info(f"Sell submission {submission_id} set to {new_status.value} by admin {admin.email}")
        return SellSubmissionResponse.model_validate(updated)
