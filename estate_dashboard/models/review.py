"""
Property review model with per-category ratings and moderation status.
"""

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, Uuid, Enum as SQLEnum, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_dashboard.database import Base, enum_values
from datetime import datetime
import enum
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_dashboard.models.property import Property
    from estate_dashboard.models.user import User


class ModerationStatus(str, enum.Enum):
    """Visibility state shared by reviews and blog comments."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SPAM = "spam"


RATING_FIELDS = ("location_rating", "condition_rating", "value_rating", "amenities_rating")


class Review(Base):
    """
    A user's review of a property.
    One review per (property, user) pair, enforced by a unique index.
    """

    __tablename__ = "reviews"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    location_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    condition_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    value_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    amenities_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    status: Mapped[ModerationStatus] = mapped_column(
        SQLEnum(ModerationStatus, name="moderation_status", values_callable=enum_values),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True
    )

    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    edited_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", back_populates="reviews", lazy="selectin")

    user: Mapped["User"] = relationship("User", back_populates="reviews", lazy="selectin")

    __table_args__ = (
        Index("uq_review_property_user", "property_id", "user_id", unique=True),
        CheckConstraint("location_rating BETWEEN 1 AND 5", name="ck_review_location_rating"),
        CheckConstraint("condition_rating BETWEEN 1 AND 5", name="ck_review_condition_rating"),
        CheckConstraint("value_rating BETWEEN 1 AND 5", name="ck_review_value_rating"),
        CheckConstraint("amenities_rating BETWEEN 1 AND 5", name="ck_review_amenities_rating"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, property_id={self.property_id}, status={self.status})>"

    @property
    def average_rating(self) -> Optional[float]:
        """Mean of the four category ratings, or None if any is missing."""
        ratings = [getattr(self, field) for field in RATING_FIELDS]
        if any(rating is None for rating in ratings):
            return None
        return round(sum(ratings) / len(ratings), 2)
