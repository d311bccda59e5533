"""
Review and moderation schemas.
"""

from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.schemas.common import CamelModel, PageMeta


class ReviewCreate(CamelModel):
    """Schema for submitting a property review."""

    name: Optional[str] = Field(
        None,
        max_length=255,
        description="Display name, defaults to the reviewer's username"
    )
    content: str = Field(..., min_length=1, max_length=5000)
    location_rating: Optional[int] = Field(None, ge=1, le=5)
    condition_rating: Optional[int] = Field(None, ge=1, le=5)
    value_rating: Optional[int] = Field(None, ge=1, le=5)
    amenities_rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Review content cannot be empty")
        return v.strip()


class ReviewResponse(CamelModel):
    id: uuid.UUID
    name: str
    content: str
    location_rating: Optional[int] = None
    condition_rating: Optional[int] = None
    value_rating: Optional[int] = None
    amenities_rating: Optional[int] = None
    average_rating: Optional[float] = None
    property_id: uuid.UUID
    user_id: uuid.UUID
    status: ModerationStatus
    is_edited: bool = False
    created_at: datetime


class ReviewPage(PageMeta):
    reviews: List[ReviewResponse]


class StatusUpdate(CamelModel):
    """
    Moderation decision for a comment or review.
    The value is checked against the moderation statuses by the service.
    """

    status: str = Field(..., examples=["approved"])


class ModerationStats(CamelModel):
    total: int
    pending: int
    approved: int
    rejected: int
    spam: int


class RatingAverages(CamelModel):
    location: Optional[float] = None
    condition: Optional[float] = None
    value: Optional[float] = None
    amenities: Optional[float] = None


class ReviewStats(ModerationStats):
    """Review counts per status plus rating averages over approved reviews."""

    average_ratings: RatingAverages
