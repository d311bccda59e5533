"""
Pydantic schemas for the user directory and admin staff accounts.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from estate_dashboard.models.user import AdminRole
from estate_dashboard.schemas.common import CamelModel, PageMeta
from estate_dashboard.schemas.blog import CommentResponse
from estate_dashboard.schemas.review import ReviewResponse
from estate_dashboard.schemas.newsletter import NewsletterSubscription


class UserResponse(CamelModel):
    """Schema for user response."""

    id: uuid.UUID
    username: str
    full_name: Optional[str] = None
    email: str
    profile_pic: Optional[str] = None
    created_at: datetime


class UserPage(PageMeta):
    users: List[UserResponse]


class UserDetails(CamelModel):
    """A user with their comments, reviews and newsletter subscription."""

    user: UserResponse
    comments: List[CommentResponse]
    reviews: List[ReviewResponse]
    newsletter: Optional[NewsletterSubscription] = None


class AdminResponse(CamelModel):
    """Schema for admin staff response."""

    id: uuid.UUID
    username: str
    email: str
    position: Optional[str] = None
    role: AdminRole
    avatar: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime


class AdminPage(PageMeta):
    admins: List[AdminResponse]


class AdminUpdate(CamelModel):
    """
    Schema for updating an admin profile.
    Only super admins may change the role.
    """

    username: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    position: Optional[str] = Field(None, max_length=100)
    role: Optional[AdminRole] = None
    avatar: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip() if v else v

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Username cannot be empty")
        return v.strip() if v else v
