"""
Blog and comment repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc, asc, delete, insert, update, or_
from estate_dashboard.repositories.base import BaseRepository, count_if
from estate_dashboard.models.blog import Blog, BlogStatus, Comment, blog_properties
from estate_dashboard.models.review import ModerationStatus
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
import uuid
import logging

logger = logging.getLogger(__name__)


class BlogRepository(BaseRepository[Blog]):
    """Repository for blog posts and their view statistics."""

    def __init__(self, db: AsyncSession):
        super().__init__(Blog, db)

    async def get_content_snapshot(self) -> Dict[str, int]:
        """Total, published and draft counts plus views summed over all posts."""
        try:
            query = select(
                func.count(Blog.id).label("total"),
                count_if(Blog.status == BlogStatus.PUBLISHED).label("published"),
                count_if(Blog.status == BlogStatus.DRAFT).label("drafts"),
                func.coalesce(func.sum(Blog.view_count), 0).label("total_views"),
            )
            row = (await self.db.execute(query)).one()
            return {key: int(value or 0) for key, value in row._mapping.items()}
        except Exception as e:
            logger.error(f"Failed to get blog snapshot: {e}")
            raise

    async def get_category_stats(self) -> List[Dict[str, Any]]:
        """Published posts per category with summed views."""
        try:
            views = func.coalesce(func.sum(Blog.view_count), 0)
            query = (
                select(Blog.category, func.count(Blog.id), views)
                .where(Blog.status == BlogStatus.PUBLISHED)
                .group_by(Blog.category)
                .order_by(desc(func.count(Blog.id)))
            )
            result = await self.db.execute(query)
            return [
                {"category": category, "count": count, "total_views": int(total_views or 0)}
                for category, count, total_views in result.all()
            ]
        except Exception as e:
            logger.error(f"Failed to get blog category stats: {e}")
            raise

    async def get_top_by_views(self, limit: int = 10, published_only: bool = False) -> List[Blog]:
        conditions = [Blog.status == BlogStatus.PUBLISHED] if published_only else None
        return await self.get_multi(limit=limit, conditions=conditions, order_by="-view_count")

    async def get_status_breakdown(self) -> Dict[BlogStatus, int]:
        return await self.count_by(Blog.status)

    async def count_published_between(self, start: datetime, end: Optional[datetime] = None) -> int:
        conditions = [Blog.status == BlogStatus.PUBLISHED, Blog.published_at >= start]
        if end is not None:
            conditions.append(Blog.published_at <= end)
        return await self.count(conditions)

    async def get_recent_published(self, limit: int = 5) -> List[Blog]:
        return await self.get_multi(
            limit=limit,
            conditions=[Blog.status == BlogStatus.PUBLISHED],
            order_by="-published_at"
        )

    # Public blog

    async def list_published(
        self,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Blog], int]:
        conditions = [Blog.status == BlogStatus.PUBLISHED]
        if category:
            conditions.append(Blog.category == category)
        return await self.paginate(skip=skip, limit=limit, conditions=conditions, order_by="-published_at")

    async def search_published(self, text: str, limit: int = 20) -> List[Blog]:
        """Published posts whose title, content or category contains the text."""
        pattern = f"%{text}%"
        return await self.get_multi(
            limit=limit,
            conditions=[
                Blog.status == BlogStatus.PUBLISHED,
                or_(Blog.title.ilike(pattern), Blog.content.ilike(pattern), Blog.category.ilike(pattern)),
            ],
            order_by="-published_at"
        )

    async def get_published(self, blog_id: uuid.UUID) -> Optional[Blog]:
        result = await self.db.execute(
            select(Blog).where(Blog.id == blog_id, Blog.status == BlogStatus.PUBLISHED)
        )
        return result.scalar_one_or_none()

    async def get_adjacent(self, blog: Blog) -> Tuple[Optional[Blog], Optional[Blog]]:
        """The published posts immediately before and after this one by publish date."""
        published = [Blog.status == BlogStatus.PUBLISHED, Blog.id != blog.id]
        previous_query = (
            select(Blog)
            .where(*published, Blog.published_at < blog.published_at)
            .order_by(desc(Blog.published_at))
            .limit(1)
        )
        next_query = (
            select(Blog)
            .where(*published, Blog.published_at > blog.published_at)
            .order_by(asc(Blog.published_at))
            .limit(1)
        )
        previous_blog = (await self.db.execute(previous_query)).scalar_one_or_none()
        next_blog = (await self.db.execute(next_query)).scalar_one_or_none()
        return previous_blog, next_blog

    async def increment_view_count(self, blog_id: uuid.UUID) -> Optional[int]:
        """
        Atomically add one view to a published post.

        Returns:
            The new view count, or None when no published post has this id
        """
        try:
            result = await self.db.execute(
                update(Blog)
                .where(Blog.id == blog_id, Blog.status == BlogStatus.PUBLISHED)
                # a view is not an edit
                .values(view_count=Blog.view_count + 1, updated_at=Blog.updated_at)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                return None
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to record a view for blog {blog_id}: {e}")
            raise

        count = await self.db.execute(select(Blog.view_count).where(Blog.id == blog_id))
        return count.scalar_one()

    async def get_property_ids(self, blog_id: uuid.UUID) -> List[uuid.UUID]:
        query = select(blog_properties.c.property_id).where(blog_properties.c.blog_id == blog_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def replace_properties(self, blog_id: uuid.UUID, property_ids: List[uuid.UUID]) -> None:
        """Replace the set of properties featured by a blog post."""
        try:
            await self.db.execute(delete(blog_properties).where(blog_properties.c.blog_id == blog_id))
            if property_ids:
                await self.db.execute(
                    insert(blog_properties),
                    [{"blog_id": blog_id, "property_id": property_id} for property_id in dict.fromkeys(property_ids)]
                )
            await self.db.commit()
            logger.debug(f"Blog {blog_id} now features {len(property_ids)} properties")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to link properties to blog {blog_id}: {e}")
            raise


class CommentRepository(BaseRepository[Comment]):
    """Repository for blog comments and their moderation queue."""

    def __init__(self, db: AsyncSession):
        super().__init__(Comment, db)

    async def list_comments(
        self,
        status: Optional[ModerationStatus] = None,
        blog_id: Optional[uuid.UUID] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Comment], int]:
        conditions = []
        if status:
            conditions.append(Comment.status == status)
        if blog_id:
            conditions.append(Comment.blog_id == blog_id)
        return await self.paginate(skip=skip, limit=limit, conditions=conditions)

    async def get_recent_pending(self, limit: int = 10) -> List[Comment]:
        return await self.get_multi(limit=limit, conditions=[Comment.status == ModerationStatus.PENDING])

    async def get_approved_for_blog(self, blog_id: uuid.UUID, limit: int = 100) -> List[Comment]:
        return await self.get_multi(
            limit=limit,
            conditions=[Comment.blog_id == blog_id, Comment.status == ModerationStatus.APPROVED],
            order_by="created_at"
        )

    async def get_for_user(self, user_id: uuid.UUID) -> List[Comment]:
        return await self.get_multi(limit=1000, conditions=[Comment.user_id == user_id])

    async def count_created_since(self, since: datetime) -> int:
        return await self.count([Comment.created_at >= since])

    async def get_status_breakdown(self) -> Dict[ModerationStatus, int]:
        return await self.count_by(Comment.status)
