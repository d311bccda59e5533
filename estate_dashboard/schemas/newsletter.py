"""
Newsletter subscriber and broadcast schemas.
"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime
import uuid

from estate_dashboard.schemas.common import CamelModel


class NewsletterSubscription(CamelModel):
    email: str
    subscribed_at: datetime
    unsubscribed_at: Optional[datetime] = None
    is_active: bool


class NewsletterStats(CamelModel):
    total: int
    active: int = Field(..., description="Subscribers that have not unsubscribed")
    unsubscribed: int


class BroadcastResponse(CamelModel):
    id: uuid.UUID
    subject: str
    content: str
    recipient_count: int
    sent_by_id: Optional[uuid.UUID] = None
    created_at: datetime


class BroadcastList(CamelModel):
    broadcasts: List[BroadcastResponse]
