"""
Property model for sale and rental listings.
Holds pricing, location and physical details plus review and blog relationships.
"""

from sqlalchemy import String, Text, Integer, Float, Numeric, JSON, DateTime, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_dashboard.database import Base, enum_values
from datetime import datetime
from decimal import Decimal
import enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_dashboard.models.review import Review
    from estate_dashboard.models.blog import Blog


class PropertyType(str, enum.Enum):
    """Kind of building being listed."""
    HOUSE = "House"
    APARTMENT = "Apartment"
    CONDO = "Condo"
    LAND = "Land"
    COMMERCIAL = "Commercial"
    TOWNHOUSE = "Townhouse"
    VILLA = "Villa"


class PropertyStatus(str, enum.Enum):
    """Listing status. Revenue figures only ever include SOLD listings."""
    FOR_SALE = "For Sale"
    FOR_RENT = "For Rent"
    SOLD = "Sold"
    PENDING = "Pending"


class PropertyCondition(str, enum.Enum):
    NEW = "New"
    USED = "Used"
    RENOVATED = "Renovated"
    UNDER_CONSTRUCTION = "Under Construction"


class Property(Base):
    """
    Property listing.
    A property owns zero or more reviews and can be featured by many blogs.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=15, scale=2),
        nullable=False,
        index=True,
        comment="Asking or sold price in US dollars"
    )

    address: Mapped[str] = mapped_column(String(255), nullable=False)

    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    state: Mapped[str] = mapped_column(String(100), nullable=False)

    zip_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, name="property_type", values_callable=enum_values),
        nullable=False,
        index=True
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, name="property_status", values_callable=enum_values),
        nullable=False,
        default=PropertyStatus.FOR_SALE,
        index=True
    )

    sold_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Stamped when the listing is marked Sold"
    )

    condition: Mapped[PropertyCondition] = mapped_column(
        SQLEnum(PropertyCondition, name="property_condition", values_callable=enum_values),
        nullable=False,
        default=PropertyCondition.USED
    )

    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    bathrooms: Mapped[float] = mapped_column(Float, nullable=False)

    sqft: Mapped[int] = mapped_column(Integer, nullable=False)

    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Hosted image URLs"
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="property_rel",
        passive_deletes=True,
        lazy="raise"
    )

    blogs: Mapped[List["Blog"]] = relationship(
        "Blog",
        secondary="blog_properties",
        back_populates="properties",
        lazy="raise"
    )

    __table_args__ = (
        Index("idx_property_status_updated", "status", "updated_at"),
        Index("idx_property_status_sold_at", "status", "sold_at"),
        Index("idx_property_city_status", "city", "status"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}, price={self.price})>"

    @property
    def is_sold(self) -> bool:
        return self.status == PropertyStatus.SOLD

    def to_dict(self) -> Dict[str, Any]:
        """Convert property to dictionary for API responses."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "type": self.type,
            "status": self.status,
            "condition": self.condition,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "sqft": self.sqft,
            "year_built": self.year_built,
            "features": list(self.features or []),
            "images": list(self.images or []),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
