"""
Sell submission repository: direct-sale offers and their pipeline counts.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from estate_dashboard.repositories.base import BaseRepository, count_if
from estate_dashboard.models.sell import SellSubmission, OfferStatus
from estate_dashboard.utils.reporting import DateRanges
from typing import Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class SellSubmissionRepository(BaseRepository[SellSubmission]):
    """Repository for sell-to-us submissions."""

    def __init__(self, db: AsyncSession):
        super().__init__(SellSubmission, db)

    async def get_pipeline_snapshot(self, ranges: DateRanges) -> Dict[str, int]:
        """Submission volume per period and per offer status in one query."""
        try:
            created = SellSubmission.created_at
            status = SellSubmission.offer_status
            query = select(
                func.count(SellSubmission.id).label("total"),
                count_if(created >= ranges.this_year.start).label("this_year"),
                count_if(created.between(ranges.last_year.start, ranges.last_year.end)).label("last_year"),
                count_if(created >= ranges.this_month.start).label("this_month"),
                count_if(created.between(ranges.last_month.start, ranges.last_month.end)).label("last_month"),
                count_if(status == OfferStatus.PENDING).label("pending"),
                count_if(status == OfferStatus.OFFER_SENT).label("offer_sent"),
                count_if(status == OfferStatus.ACCEPTED).label("accepted"),
                count_if(status == OfferStatus.REJECTED).label("rejected"),
            )
            row = (await self.db.execute(query)).one()
            return {key: int(value or 0) for key, value in row._mapping.items()}
        except Exception as e:
            logger.error(f"Failed to get sell submission snapshot: {e}")
            raise

    async def list_submissions(
        self,
        offer_status: Optional[OfferStatus] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[SellSubmission], int]:
        conditions = [SellSubmission.offer_status == offer_status] if offer_status else []
        return await self.paginate(skip=skip, limit=limit, conditions=conditions)
