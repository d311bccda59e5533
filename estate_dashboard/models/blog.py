"""
Blog and comment models.
Blogs are written by admins, can feature many properties and collect user comments.
"""

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, Uuid, Table, Column, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_dashboard.database import Base, enum_values
from estate_dashboard.models.review import ModerationStatus
from datetime import datetime
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_dashboard.models.property import Property
    from estate_dashboard.models.user import User, Admin


blog_properties = Table(
    "blog_properties",
    Base.metadata,
    Column("blog_id", Uuid(as_uuid=True), ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False),
    Column("property_id", Uuid(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("blog_id", "property_id", name="uq_blog_property"),
)


class BlogStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Blog(Base):
    """Blog post; only published posts count towards view and category statistics."""

    __tablename__ = "blogs"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    status: Mapped[BlogStatus] = mapped_column(
        SQLEnum(BlogStatus, name="blog_status", values_callable=enum_values),
        nullable=False,
        default=BlogStatus.DRAFT,
        index=True
    )

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("admins.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    author: Mapped[Optional["Admin"]] = relationship("Admin", back_populates="blogs", lazy="selectin")

    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="blog",
        passive_deletes=True,
        lazy="raise"
    )

    properties: Mapped[List["Property"]] = relationship(
        "Property",
        secondary=blog_properties,
        back_populates="blogs",
        lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title={self.title[:30]}, status={self.status})>"


class Comment(Base):
    """User comment on a blog post, subject to moderation."""

    __tablename__ = "comments"

    blog_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("blogs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    username: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[ModerationStatus] = mapped_column(
        SQLEnum(ModerationStatus, name="moderation_status", values_callable=enum_values),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True
    )

    blog: Mapped["Blog"] = relationship("Blog", back_populates="comments", lazy="raise")

    user: Mapped[Optional["User"]] = relationship("User", back_populates="comments", lazy="raise")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, blog_id={self.blog_id}, status={self.status})>"
