"""
Public blog endpoints: published posts, search, view counting and reader comments.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from uuid import UUID

from estate_dashboard.models.user import User
from estate_dashboard.services import BlogService
from estate_dashboard.schemas.common import DataResponse
from estate_dashboard.schemas.blog import (
    BlogPage,
    BlogSearchResults,
    BlogDetail,
    BlogViewCount,
    CommentCreate,
    CommentUpdate,
    CommentResponse,
)
from estate_dashboard.schemas.error import get_common_error_responses, get_crud_error_responses
from estate_dashboard.utils.dependencies import get_current_user, get_blog_service


router = APIRouter(tags=["Blogs"])


@router.get(
    "/blogs",
    response_model=DataResponse[BlogPage],
    summary="List published blog posts",
    description="Newest first. Drafts are never listed.",
    responses=get_common_error_responses()
)
async def list_blogs(
    category: Optional[str] = Query(None, description="Only posts in this category"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(10, ge=1, le=100, description="Number of posts per page"),
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.list_published_blogs(category=category, page=page, limit=limit))


@router.get(
    "/blogs/search",
    response_model=DataResponse[BlogSearchResults],
    summary="Search published blog posts",
    description="Matches title, content and category. The query is required.",
    responses=get_common_error_responses()
)
async def search_blogs(
    query: Optional[str] = Query(None, description="Search text"),
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.search_blogs(query))


@router.get(
    "/blogs/{blog_id}",
    response_model=DataResponse[BlogDetail],
    summary="Get a published blog post",
    description="The post with its featured properties, approved comments and neighbouring posts.",
    responses=get_common_error_responses()
)
async def get_blog(
    blog_id: UUID,
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.get_blog_detail(blog_id))


@router.get(
    "/blogs/{blog_id}/view",
    response_model=DataResponse[BlogViewCount],
    summary="Count a view",
    description="Adds one to the post's view count and returns the new total.",
    responses=get_common_error_responses()
)
async def record_view(
    blog_id: UUID,
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.record_view(blog_id))


@router.post(
    "/blogs/{blog_id}/comments",
    response_model=DataResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a blog post",
    description="Signed-in users only. Comments start out pending moderation.",
    responses=get_crud_error_responses()
)
async def add_comment(
    blog_id: UUID,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.add_comment(blog_id, comment_data, current_user))


@router.put(
    "/comments/{comment_id}",
    response_model=DataResponse[CommentResponse],
    summary="Edit your comment",
    description="Only the author can edit a comment. The edit goes back to the moderation queue.",
    responses=get_crud_error_responses()
)
async def update_comment(
    comment_id: UUID,
    comment_data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    blog_service: BlogService = Depends(get_blog_service)
):
    return DataResponse(data=await blog_service.update_comment(comment_id, comment_data, current_user))
