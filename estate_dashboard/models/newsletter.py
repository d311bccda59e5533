"""
Newsletter subscription and broadcast models.
"""

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_dashboard.database import Base, utc_now
from datetime import datetime
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_dashboard.models.user import Admin


class Newsletter(Base):
    """A subscriber; active while unsubscribed_at is null."""

    __tablename__ = "newsletters"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    subscribed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    unsubscribed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def is_active(self) -> bool:
        return self.unsubscribed_at is None


class Broadcast(Base):
    """Record of a newsletter email sent to subscribers."""

    __tablename__ = "broadcasts"

    subject: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    recipient_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sent_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("admins.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    sent_by: Mapped[Optional["Admin"]] = relationship("Admin", back_populates="broadcasts", lazy="selectin")
