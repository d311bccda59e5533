"""
Test configuration and fixtures for the estate dashboard API.
Provides an in-memory database per test, an HTTP client bound to the app,
test data factories and token helpers.
"""

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from jose import jwt

from estate_dashboard.config import Settings
from estate_dashboard.database import Database
from estate_dashboard.main import create_app
from estate_dashboard.models.property import Property, PropertyType, PropertyStatus, PropertyCondition
from estate_dashboard.models.review import Review, ModerationStatus
from estate_dashboard.models.blog import Blog, BlogStatus, Comment
from estate_dashboard.models.user import User, Admin, AdminRole
from estate_dashboard.models.newsletter import Newsletter, Broadcast
from estate_dashboard.models.sell import SellSubmission, OfferStatus
from estate_dashboard.repositories import (
    PropertyRepository,
    ReviewRepository,
    BlogRepository,
    CommentRepository,
    UserRepository,
    AdminRepository,
    NewsletterRepository,
    BroadcastRepository,
    SellSubmissionRepository,
)


TEST_JWT_SECRET = "test-supabase-jwt-secret"


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at an in-memory SQLite database."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite://",
        supabase_jwt_secret=TEST_JWT_SECRET,
        cors_origins=["http://test"],
    )


@pytest.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Fresh schema for every test; StaticPool keeps the single in-memory connection alive."""
    db = Database(
        test_settings.database_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
def app(test_settings: Settings, database: Database):
    return create_app(settings=test_settings, database=database)


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client talking to the app in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# Token helpers
def make_token(subject: uuid.UUID, expires_in: timedelta = timedelta(hours=1), **claims) -> str:
    """Sign a Supabase-style access token for the given subject."""
    payload = {
        "sub": str(subject),
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int((datetime.now(timezone.utc) + expires_in).timestamp()),
    }
    payload.update(claims)
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(subject: uuid.UUID) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(subject)}"}


# Test data factories
class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        title: str = "Test Property",
        price: Decimal = Decimal("450000.00"),
        city: str = "Miami",
        property_type: PropertyType = PropertyType.HOUSE,
        status: PropertyStatus = PropertyStatus.FOR_SALE,
        bedrooms: int = 3,
        bathrooms: float = 2.0,
        **overrides
    ) -> dict:
        """Create property data dictionary."""
        data = {
            "title": title,
            "description": "A bright family home close to the beach",
            "price": price,
            "address": "123 Ocean Drive",
            "city": city,
            "state": "FL",
            "zip_code": "33101",
            "type": property_type,
            "status": status,
            "condition": PropertyCondition.USED,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "sqft": 1800,
            "features": ["Pool"],
            "images": [],
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_property(db_session: AsyncSession, **kwargs) -> Property:
        """Create a test property in the database."""
        return await PropertyRepository(db_session).create(PropertyFactory.create_property_data(**kwargs))


class UserFactory:
    """Factory for creating site users and admins."""

    @staticmethod
    async def create_user(
        db_session: AsyncSession,
        username: Optional[str] = None,
        full_name: Optional[str] = "Test User",
        email: Optional[str] = None
    ) -> User:
        suffix = uuid.uuid4().hex[:8]
        return await UserRepository(db_session).create({
            "username": username or f"user_{suffix}",
            "full_name": full_name,
            "email": email or f"user_{suffix}@example.com",
        })

    @staticmethod
    async def create_admin(
        db_session: AsyncSession,
        role: AdminRole = AdminRole.ADMIN,
        username: Optional[str] = None,
        email: Optional[str] = None
    ) -> Admin:
        suffix = uuid.uuid4().hex[:8]
        return await AdminRepository(db_session).create({
            "username": username or f"admin_{suffix}",
            "email": email or f"admin_{suffix}@example.com",
            "position": "Editor",
            "role": role,
        })


class ContentFactory:
    """Factory for reviews, blogs, comments, sell submissions and subscribers."""

    @staticmethod
    async def create_review(
        db_session: AsyncSession,
        property_id: uuid.UUID,
        user_id: uuid.UUID,
        status: ModerationStatus = ModerationStatus.PENDING,
        rating: int = 4
    ) -> Review:
        return await ReviewRepository(db_session).create({
            "name": "Reviewer",
            "content": "Great location and friendly neighbours",
            "location_rating": rating,
            "condition_rating": rating,
            "value_rating": rating,
            "amenities_rating": rating,
            "property_id": property_id,
            "user_id": user_id,
            "status": status,
        })

    @staticmethod
    async def create_blog(
        db_session: AsyncSession,
        title: str = "Buying your first home",
        status: BlogStatus = BlogStatus.PUBLISHED,
        view_count: int = 0,
        category: Optional[str] = "Guides",
        author_id: Optional[uuid.UUID] = None
    ) -> Blog:
        return await BlogRepository(db_session).create({
            "title": title,
            "content": "Everything you need to know before you buy.",
            "category": category,
            "status": status,
            "view_count": view_count,
            "published_at": datetime.now(timezone.utc) if status == BlogStatus.PUBLISHED else None,
            "author_id": author_id,
        })

    @staticmethod
    async def create_comment(
        db_session: AsyncSession,
        blog_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
        status: ModerationStatus = ModerationStatus.PENDING
    ) -> Comment:
        return await CommentRepository(db_session).create({
            "blog_id": blog_id,
            "user_id": user_id,
            "username": "commenter",
            "content": "Very helpful, thanks!",
            "status": status,
        })

    @staticmethod
    async def create_sell_submission(
        db_session: AsyncSession,
        offer_status: OfferStatus = OfferStatus.PENDING
    ) -> SellSubmission:
        return await SellSubmissionRepository(db_session).create({
            "full_name": "Jane Seller",
            "phone_number": "+13055550100",
            "email_address": "jane@example.com",
            "property_type": "House",
            "address": "9 Palm Avenue",
            "condition": "Good",
            "offer_status": offer_status,
        })

    @staticmethod
    async def create_subscriber(db_session: AsyncSession, active: bool = True) -> Newsletter:
        return await NewsletterRepository(db_session).create({
            "email": f"reader_{uuid.uuid4().hex[:8]}@example.com",
            "unsubscribed_at": None if active else datetime.now(timezone.utc),
        })

    @staticmethod
    async def create_broadcast(
        db_session: AsyncSession,
        subject: str = "March market update",
        sent_by_id: Optional[uuid.UUID] = None
    ) -> Broadcast:
        return await BroadcastRepository(db_session).create({
            "subject": subject,
            "content": "Prices held steady across the metro area.",
            "recipient_count": 120,
            "sent_by_id": sent_by_id,
        })


# Common test fixtures
@pytest.fixture
async def test_admin(db_session: AsyncSession) -> Admin:
    return await UserFactory.create_admin(db_session, role=AdminRole.ADMIN)


@pytest.fixture
async def test_super_admin(db_session: AsyncSession) -> Admin:
    return await UserFactory.create_admin(db_session, role=AdminRole.SUPER_ADMIN)


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, full_name="Test Reviewer")


@pytest.fixture
async def test_property(db_session: AsyncSession) -> Property:
    return await PropertyFactory.create_property(db_session)
