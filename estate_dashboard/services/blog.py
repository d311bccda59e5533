"""
Blog service: admin post management, the public blog and reader comments.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories.blog import BlogRepository, CommentRepository
from estate_dashboard.repositories.property import PropertyRepository
from estate_dashboard.models.blog import Blog, BlogStatus
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.models.property import Property
from estate_dashboard.models.user import Admin, User
from estate_dashboard.database import utc_now
from estate_dashboard.schemas.common import page_meta, page_offset
from estate_dashboard.schemas.property import PropertyResponse
from estate_dashboard.schemas.blog import (
    BlogCreate,
    BlogUpdate,
    BlogResponse,
    BlogPage,
    BlogSearchResults,
    BlogDetail,
    BlogLink,
    BlogViewCount,
    CommentCreate,
    CommentUpdate,
    CommentResponse,
)
from estate_dashboard.utils.exceptions import NotFoundError, ValidationError, ForbiddenError, BadRequestError
from estate_dashboard.utils.validators import ValidationUtils
import uuid
import logging

logger = logging.getLogger(__name__)


class BlogService:
    """
    Create, edit and delete blog posts, and serve published posts to readers.
    Publishing a post for the first time stamps its publish date.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.blog_repo = BlogRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.comment_repo = CommentRepository(db_session)

    async def create_blog(self, blog_data: BlogCreate, admin: Admin) -> BlogResponse:
        await self._check_properties_exist(blog_data.property_ids)

        data = blog_data.model_dump(exclude={"property_ids"})
        data["author_id"] = admin.id
        if blog_data.status == BlogStatus.PUBLISHED:
            data["published_at"] = utc_now()

        blog = await self.blog_repo.create(data)
        if blog_data.property_ids:
            await self.blog_repo.replace_properties(blog.id, blog_data.property_ids)

        logger.info(f"Blog created by admin {admin.email}: {blog.title} (ID: {blog.id})")
        return await self._to_response(blog)

    async def update_blog(self, blog_id: uuid.UUID, blog_data: BlogUpdate, admin: Admin) -> BlogResponse:
        """
        Raises:
            NotFoundError: If the blog or a featured property doesn't exist
            ValidationError: If no fields are provided
        """
        blog = await self.blog_repo.get_by_id(blog_id)
        if blog is None:
            raise NotFoundError("Blog", str(blog_id))

        update_data = blog_data.model_dump(exclude_none=True, exclude={"property_ids"})
        if not update_data and blog_data.property_ids is None:
            raise ValidationError("No valid fields provided for update")

        if blog_data.property_ids is not None:
            await self._check_properties_exist(blog_data.property_ids)

        if update_data.get("status") == BlogStatus.PUBLISHED and blog.published_at is None:
            update_data["published_at"] = utc_now()

        if update_data:
            blog = await self.blog_repo.update(blog_id, update_data)
        if blog_data.property_ids is not None:
            await self.blog_repo.replace_properties(blog_id, blog_data.property_ids)

        logger.info(f"Blog {blog_id} updated by admin {admin.email}")
        return await self._to_response(blog)

    async def delete_blog(self, blog_id: uuid.UUID, admin: Admin) -> None:
        deleted = await self.blog_repo.delete(blog_id)
        if not deleted:
            raise NotFoundError("Blog", str(blog_id))
        logger.info(f"Blog {blog_id} deleted by admin {admin.email}")

    # Public blog

    async def list_published_blogs(self, category: Optional[str] = None, page: int = 1, limit: int = 10) -> BlogPage:
        blogs, total = await self.blog_repo.list_published(
            category=category,
            skip=page_offset(page, limit),
            limit=limit
        )
        return BlogPage(
            **page_meta(total, page, limit),
            blogs=[await self._to_response(blog) for blog in blogs]
        )

    async def search_blogs(self, query: Optional[str]) -> BlogSearchResults:
        """
        Raises:
            ValidationError: If the search query is missing or blank
        """
        text = ValidationUtils.validate_search_query(query)
        blogs = await self.blog_repo.search_published(text)
        return BlogSearchResults(
            blogs=[await self._to_response(blog) for blog in blogs],
            count=len(blogs)
        )

    async def get_blog_detail(self, blog_id: uuid.UUID) -> BlogDetail:
        """
        A published post with its featured properties, approved comments
        and links to the neighbouring posts.

        Raises:
            NotFoundError: If no published post has this id
        """
        blog = await self._get_published_or_404(blog_id)
        response = await self._to_response(blog)

        featured = []
        if response.property_ids:
            featured = await self.property_repo.get_multi(
                limit=len(response.property_ids),
                conditions=[Property.id.in_(response.property_ids)]
            )

        comments = await self.comment_repo.get_approved_for_blog(blog.id)
        previous_blog, next_blog = await self.blog_repo.get_adjacent(blog)

        return BlogDetail(
            blog=response,
            featured_properties=[PropertyResponse.model_validate(prop) for prop in featured],
            comments=[CommentResponse.model_validate(comment) for comment in comments],
            previous_blog=BlogLink.model_validate(previous_blog) if previous_blog else None,
            next_blog=BlogLink.model_validate(next_blog) if next_blog else None,
        )

    async def record_view(self, blog_id: uuid.UUID) -> BlogViewCount:
        view_count = await self.blog_repo.increment_view_count(blog_id)
        if view_count is None:
            raise NotFoundError("Blog", str(blog_id))
        return BlogViewCount(id=blog_id, view_count=view_count)

    async def add_comment(self, blog_id: uuid.UUID, comment_data: CommentCreate, user: User) -> CommentResponse:
        """
        Comment on a published post. The comment waits in the moderation
        queue until an admin approves it.

        Raises:
            NotFoundError: If no published post has this id
        """
        blog = await self._get_published_or_404(blog_id)
        comment = await self.comment_repo.create({
            "blog_id": blog.id,
            "user_id": user.id,
            "username": user.username,
            "content": comment_data.content,
            "status": ModerationStatus.PENDING,
        })
        logger.info(f"Comment {comment.id} added to blog {blog.id} by user {user.id}")
        return CommentResponse.model_validate(comment)

    async def update_comment(self, comment_id: uuid.UUID, comment_data: CommentUpdate, user: User) -> CommentResponse:
        """
        Edit the caller's own comment. The edited text goes back to the
        moderation queue.

        Raises:
            NotFoundError: If comment doesn't exist
            ForbiddenError: If the comment belongs to another user
            BadRequestError: If the comment was rejected or marked as spam
        """
        comment = await self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))

        if comment.user_id != user.id:
            raise ForbiddenError("You can only edit your own comments")

        if comment.status in (ModerationStatus.REJECTED, ModerationStatus.SPAM):
            raise BadRequestError(f"A {comment.status.value} comment cannot be edited")

        updated = await self.comment_repo.update(comment_id, {
            "content": comment_data.content,
            "status": ModerationStatus.PENDING,
        })
        logger.info(f"Comment {comment_id} edited by user {user.id}")
        return CommentResponse.model_validate(updated)

    async def _get_published_or_404(self, blog_id: uuid.UUID) -> Blog:
        blog = await self.blog_repo.get_published(blog_id)
        if blog is None:
            raise NotFoundError("Blog", str(blog_id))
        return blog

    async def _check_properties_exist(self, property_ids: Optional[List[uuid.UUID]]) -> None:
        if not property_ids:
            return
        unique_ids = set(property_ids)
        found = await self.property_repo.count([Property.id.in_(unique_ids)])
        if found != len(unique_ids):
            raise NotFoundError("Featured property")

    async def _to_response(self, blog: Blog) -> BlogResponse:
        response = BlogResponse.model_validate(blog)
        response.property_ids = await self.blog_repo.get_property_ids(blog.id)
        return response
