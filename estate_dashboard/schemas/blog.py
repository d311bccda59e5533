"""
Blog and comment schemas.
"""

from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from estate_dashboard.models.blog import BlogStatus
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.schemas.common import CamelModel, PageMeta
from estate_dashboard.schemas.property import PropertyResponse


class BlogCreate(CamelModel):
    """Schema for creating a blog post."""

    title: str = Field(..., min_length=3, max_length=255)
    content: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100, examples=["Market Trends"])
    status: BlogStatus = Field(BlogStatus.DRAFT, description="Publishing a post stamps its publish date")
    property_ids: List[uuid.UUID] = Field(default_factory=list, description="Featured properties")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class BlogUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    status: Optional[BlogStatus] = None
    property_ids: Optional[List[uuid.UUID]] = None


class BlogResponse(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    category: Optional[str] = None
    status: BlogStatus
    view_count: int
    published_at: Optional[datetime] = None
    author_id: Optional[uuid.UUID] = None
    property_ids: List[uuid.UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CommentResponse(CamelModel):
    id: uuid.UUID
    blog_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    username: str
    content: str
    status: ModerationStatus
    created_at: datetime


class CommentPage(PageMeta):
    comments: List[CommentResponse]


class BlogPage(PageMeta):
    blogs: List[BlogResponse]


class BlogSearchResults(CamelModel):
    blogs: List[BlogResponse]
    count: int


class BlogLink(CamelModel):
    """Neighbouring post, by publish date."""

    id: uuid.UUID
    title: str


class BlogDetail(CamelModel):
    """A published post with its featured properties and approved comments."""

    blog: BlogResponse
    featured_properties: List[PropertyResponse]
    comments: List[CommentResponse]
    previous_blog: Optional[BlogLink] = None
    next_blog: Optional[BlogLink] = None


class BlogViewCount(CamelModel):
    id: uuid.UUID
    view_count: int


class CommentCreate(CamelModel):
    """Schema for commenting on a blog post. Comments start out pending moderation."""

    content: str = Field(..., min_length=1, max_length=2000)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Comment content cannot be empty")
        return v.strip()


class CommentUpdate(CommentCreate):
    """Schema for editing one's own comment."""
