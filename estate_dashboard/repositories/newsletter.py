"""
Newsletter subscriber and broadcast repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from estate_dashboard.repositories.base import BaseRepository, count_if
from estate_dashboard.models.newsletter import Newsletter, Broadcast
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class NewsletterRepository(BaseRepository[Newsletter]):

    def __init__(self, db: AsyncSession):
        super().__init__(Newsletter, db)

    async def count_active(self) -> int:
        return await self.count([Newsletter.unsubscribed_at.is_(None)])

    async def get_by_email(self, email: str) -> Optional[Newsletter]:
        return await self.get_by_field("email", email.lower().strip())

    async def get_subscription_stats(self) -> Dict[str, int]:
        try:
            query = select(
                func.count(Newsletter.id).label("total"),
                count_if(Newsletter.unsubscribed_at.is_(None)).label("active"),
                count_if(Newsletter.unsubscribed_at.is_not(None)).label("unsubscribed"),
            )
            row = (await self.db.execute(query)).one()
            return {key: int(value or 0) for key, value in row._mapping.items()}
        except Exception as e:
            logger.error(f"Failed to get newsletter stats: {e}")
            raise


class BroadcastRepository(BaseRepository[Broadcast]):

    def __init__(self, db: AsyncSession):
        super().__init__(Broadcast, db)

    async def get_recent(self, limit: int = 10) -> List[Broadcast]:
        return await self.get_multi(limit=limit)
