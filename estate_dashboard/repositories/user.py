"""
User and admin repositories.
Provides the user directory, registration trends, activity counts and admin staff lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, desc, asc
from estate_dashboard.repositories.base import BaseRepository
from estate_dashboard.models.user import User, Admin
from estate_dashboard.models.blog import Comment
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for site users.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.get_by_field("email", email.lower().strip())

    async def search_users(
        self,
        search_term: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: str = "desc"
    ) -> Tuple[List[User], int]:
        """
        Search users by username or email.

        Args:
            search_term: Term to search for in username or email
            skip: Number of records to skip
            limit: Maximum number of records to return
            sort_by: Column to sort by
            sort_order: 'asc' or 'desc'

        Returns:
            Tuple of (users list, total count)
        """
        try:
            conditions = []
            if search_term:
                pattern = f"%{search_term}%"
                conditions.append(or_(User.username.ilike(pattern), User.email.ilike(pattern)))

            count_query = select(func.count(User.id)).where(*conditions)
            total_count = (await self.db.execute(count_query)).scalar() or 0

            sort_column = getattr(User, sort_by, User.created_at)
            ordering = desc(sort_column) if sort_order == "desc" else asc(sort_column)
            query = select(User).where(*conditions).order_by(ordering).offset(skip).limit(limit)
            users = list((await self.db.execute(query)).scalars().all())

            logger.debug(f"User search for '{search_term}' returned {len(users)} of {total_count} results")
            return users, total_count
        except Exception as e:
            logger.error(f"Failed to search users with term '{search_term}': {e}")
            raise

    async def count_created_between(self, start: datetime, end: Optional[datetime] = None) -> int:
        if end is None:
            return await self.count([User.created_at >= start])
        return await self.count([User.created_at.between(start, end)])

    async def get_daily_registrations(self, since: datetime) -> List[Dict[str, Any]]:
        """Registration counts per calendar day since the given instant, oldest first."""
        try:
            day = func.date(User.created_at)
            query = (
                select(day, func.count(User.id))
                .where(User.created_at >= since)
                .group_by(day)
                .order_by(day)
            )
            result = await self.db.execute(query)
            return [
                {"date": value if isinstance(value, str) else value.isoformat(), "count": count}
                for value, count in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to get daily registrations: {e}")
            raise

    async def count_active_commenters(self, since: datetime) -> int:
        """
        Number of distinct users with at least one comment since the given instant.
        Counted with DISTINCT so several comments by one user count once.
        """
        try:
            query = (
                select(func.count(func.distinct(User.id)))
                .select_from(User)
                .join(Comment, Comment.user_id == User.id)
                .where(Comment.created_at >= since)
            )
            return (await self.db.execute(query)).scalar() or 0
        except Exception as e:
            logger.error(f"Failed to count active users: {e}")
            raise


class AdminRepository(BaseRepository[Admin]):
    """Repository for back office staff accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(Admin, db)

    async def get_by_email(self, email: str) -> Optional[Admin]:
        return await self.get_by_field("email", email.lower().strip())

    async def find_conflict(
        self,
        email: Optional[str] = None,
        username: Optional[str] = None,
        exclude_id: Optional[uuid.UUID] = None
    ) -> Optional[Admin]:
        """Another admin already using the given email or username, if any."""
        try:
            matches = []
            if email:
                matches.append(Admin.email == email)
            if username:
                matches.append(Admin.username == username)
            if not matches:
                return None

            query = select(Admin).where(or_(*matches))
            if exclude_id:
                query = query.where(Admin.id != exclude_id)

            result = await self.db.execute(query.limit(1))
            return result.scalars().first()
        except Exception as e:
            logger.error(f"Failed to check admin uniqueness: {e}")
            raise
