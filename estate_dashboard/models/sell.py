"""
Direct-sale submissions: owners offering to sell a property to the agency.
"""

from sqlalchemy import String, Text, Integer, Float, Numeric, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from estate_dashboard.database import Base, enum_values
from decimal import Decimal
import enum
from typing import List, Optional


class OfferStatus(str, enum.Enum):
    PENDING = "Pending"
    OFFER_SENT = "Offer Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class SellSubmission(Base):
    """Sell-to-us form submission and the agency's offer status for it."""

    __tablename__ = "sell_submissions"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)

    email_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    property_type: Mapped[str] = mapped_column(String(50), nullable=False)

    address: Mapped[str] = mapped_column(String(255), nullable=False)

    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    bathrooms: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    sqft: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    asking_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=15, scale=2), nullable=True)

    condition: Mapped[str] = mapped_column(String(50), nullable=False)

    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    additional_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    offer_status: Mapped[OfferStatus] = mapped_column(
        SQLEnum(OfferStatus, name="offer_status", values_callable=enum_values),
        nullable=False,
        default=OfferStatus.PENDING,
        index=True
    )

    def __repr__(self) -> str:
        return f"<SellSubmission(id={self.id}, full_name={self.full_name}, offer_status={self.offer_status})>"
