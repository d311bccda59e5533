"""
Newsletter service: subscriber counts and broadcast history.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories.newsletter import NewsletterRepository, BroadcastRepository
from estate_dashboard.schemas.newsletter import NewsletterStats, BroadcastResponse, BroadcastList


class NewsletterService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.newsletter_repo = NewsletterRepository(db_session)
        self.broadcast_repo = BroadcastRepository(db_session)

    async def get_stats(self) -> NewsletterStats:
        return NewsletterStats(**await self.newsletter_repo.get_subscription_stats())

    async def get_recent_broadcasts(self, limit: int = 10) -> BroadcastList:
        broadcasts = await self.broadcast_repo.get_recent(limit)
        return BroadcastList(broadcasts=[BroadcastResponse.model_validate(item) for item in broadcasts])
