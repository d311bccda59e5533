"""
Pydantic schemas for property requests and responses.
Handles admin property management, the public catalogue and the dashboard listings.
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from estate_dashboard.models.property import PropertyType, PropertyStatus, PropertyCondition
from estate_dashboard.schemas.common import CamelModel, PageMeta
from estate_dashboard.schemas.review import ReviewResponse


class PropertyBase(CamelModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=3,
        max_length=255,
        description="Property listing title",
        examples=["Modern Villa with Ocean View"]
    )

    description: str = Field(
        ...,
        min_length=10,
        max_length=5000,
        description="Detailed property description"
    )

    price: Decimal = Field(
        ...,
        gt=0,
        max_digits=15,
        decimal_places=2,
        description="Asking or sold price in US dollars",
        examples=[1250000]
    )

    address: str = Field(..., min_length=3, max_length=255)
    city: str = Field(..., min_length=1, max_length=100, examples=["Miami"])
    state: str = Field(..., min_length=1, max_length=100, examples=["FL"])
    zip_code: str = Field(..., min_length=3, max_length=20, examples=["33101"])

    type: PropertyType = Field(..., description="Property type", examples=["Villa"])
    status: PropertyStatus = Field(PropertyStatus.FOR_SALE, description="Listing status")
    condition: PropertyCondition = Field(PropertyCondition.USED, description="Property condition")

    bedrooms: int = Field(..., ge=0, le=50)
    bathrooms: float = Field(..., ge=0, le=50)
    sqft: int = Field(..., gt=0, le=1000000, description="Living area in square feet")
    year_built: Optional[int] = Field(None, ge=1800, le=2100)

    features: List[str] = Field(default_factory=list, examples=[["Pool", "Garage"]])
    images: List[str] = Field(default_factory=list, description="Hosted image URLs")

    @field_validator('title', 'description', 'address', 'city', 'state', 'zip_code')
    @classmethod
    def strip_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""


class PropertyUpdate(CamelModel):
    """Schema for updating an existing property. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    address: Optional[str] = Field(None, min_length=3, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, min_length=3, max_length=20)
    type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    condition: Optional[PropertyCondition] = None
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[float] = Field(None, ge=0, le=50)
    sqft: Optional[int] = Field(None, gt=0, le=1000000)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None

    @model_validator(mode='after')
    def validate_not_empty(self):
        """Reject an update that carries no fields at all."""
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self


class PropertyResponse(CamelModel):
    """Schema for property response."""

    id: uuid.UUID
    title: str
    description: str
    price: float
    address: str
    city: str
    state: str
    zip_code: str
    type: PropertyType
    status: PropertyStatus
    condition: PropertyCondition
    bedrooms: int
    bathrooms: float
    sqft: int
    year_built: Optional[int] = None
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    sold_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ListingItem(PropertyResponse):
    """Dashboard listing row with its review rollup."""

    average_rating: Optional[float] = Field(
        None,
        description="Mean of the four category ratings across approved reviews, null without any"
    )
    review_count: int = 0


class ListingPage(PageMeta):
    listings: List[ListingItem]


class PropertyPage(PageMeta):
    properties: List[PropertyResponse]


class PropertySearchResults(CamelModel):
    properties: List[PropertyResponse]
    count: int


class PropertyDetail(CamelModel):
    """A property with related listings and its approved reviews."""

    property: PropertyResponse
    related_properties: List[PropertyResponse]
    reviews: List[ReviewResponse]
