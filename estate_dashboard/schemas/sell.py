"""
Sell-to-us submission schemas.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from estate_dashboard.models.sell import OfferStatus
from estate_dashboard.schemas.common import CamelModel, PageMeta
from estate_dashboard.utils.validators import ValidationUtils


class SellSubmissionCreate(CamelModel):
    """Public sell-to-us form."""

    full_name: str = Field(..., min_length=2, max_length=255, examples=["Jane Smith"])
    phone_number: str = Field(..., examples=["+13055550123"])
    email_address: EmailStr
    property_type: str = Field(..., min_length=1, max_length=50, examples=["House"])
    address: str = Field(..., min_length=3, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[float] = Field(None, ge=0, le=50)
    sqft: Optional[int] = Field(None, gt=0)
    asking_price: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    condition: str = Field(..., min_length=1, max_length=50, examples=["Used"])
    images: List[str] = Field(default_factory=list, description="Hosted image URLs")
    additional_notes: Optional[str] = Field(None, max_length=5000)

    @field_validator('phone_number')
    @classmethod
    def validate_phone_number(cls, v):
        """Optional leading +, 10 to 15 digits; spaces, dashes and parentheses are ignored."""
        cleaned = v.strip().replace(' ', '').replace('-', '').replace('(', '').replace(')', '')
        if not ValidationUtils.PHONE_PATTERN.match(cleaned):
            raise ValueError("Invalid phone number format")
        return cleaned

    @field_validator('email_address')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator('full_name', 'address')
    @classmethod
    def strip_text(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class SellSubmissionResponse(CamelModel):
    id: uuid.UUID
    full_name: str
    phone_number: str
    email_address: str
    property_type: str
    address: str
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    sqft: Optional[int] = None
    asking_price: Optional[float] = None
    condition: str
    images: List[str] = Field(default_factory=list)
    additional_notes: Optional[str] = None
    offer_status: OfferStatus
    created_at: datetime


class SellSubmissionPage(PageMeta):
    submissions: List[SellSubmissionResponse]


class OfferStatusUpdate(CamelModel):
    """Offer decision; the value is checked against the offer statuses by the service."""

    offer_status: str = Field(..., examples=["Offer Sent"])


class SellStats(CamelModel):
    total: int
    pending: int
    offer_sent: int
    accepted: int
    rejected: int
    this_month: int
    last_month: int
    change: float
