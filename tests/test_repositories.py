"""
Tests for repository aggregates used by the dashboard reports.
"""

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.exc import InvalidRequestError

from estate_dashboard.models.property import Property, PropertyType, PropertyStatus
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.models.blog import BlogStatus
from estate_dashboard.repositories import (
    PropertyRepository,
    PropertySearchFilters,
    ReviewRepository,
    BlogRepository,
    UserRepository,
    NewsletterRepository,
    SellSubmissionRepository,
)
from estate_dashboard.models.sell import OfferStatus
from estate_dashboard.utils.reporting import calculate_date_ranges, month_windows
from tests.conftest import PropertyFactory, UserFactory, ContentFactory


class TestBaseRepository:
    """Generic CRUD behaviour through PropertyRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get_by_id(self, db_session):
        repo = PropertyRepository(db_session)
        created = await PropertyFactory.create_property(db_session, title="Seaside Villa")

        retrieved = await repo.get_by_id(created.id)

        assert retrieved is not None
        assert retrieved.title == "Seaside Villa"
        assert retrieved.created_at is not None

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, db_session):
        assert await PropertyRepository(db_session).get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_ignores_none_values(self, db_session):
        repo = PropertyRepository(db_session)
        created = await PropertyFactory.create_property(db_session, title="Original")

        updated = await repo.update(created.id, {"title": "Renamed", "city": None})

        assert updated.title == "Renamed"
        assert updated.city == "Miami"

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        repo = PropertyRepository(db_session)
        created = await PropertyFactory.create_property(db_session)

        assert await repo.delete(created.id) is True
        assert await repo.delete(created.id) is False
        assert await repo.exists(created.id) is False

    @pytest.mark.asyncio
    async def test_unloaded_collections_raise_instead_of_appearing_empty(self, db_session):
        created = await PropertyFactory.create_property(db_session)
        db_session.expunge_all()

        fetched = await PropertyRepository(db_session).get_by_id(created.id)

        with pytest.raises(InvalidRequestError):
            fetched.reviews

    @pytest.mark.asyncio
    async def test_count_by_status(self, db_session):
        await PropertyFactory.create_property(db_session, status=PropertyStatus.SOLD)
        await PropertyFactory.create_property(db_session, status=PropertyStatus.SOLD)
        await PropertyFactory.create_property(db_session, status=PropertyStatus.FOR_RENT)

        breakdown = await PropertyRepository(db_session).count_by(Property.status)

        assert breakdown[PropertyStatus.SOLD] == 2
        assert breakdown[PropertyStatus.FOR_RENT] == 1
        assert PropertyStatus.PENDING not in breakdown


class TestPropertyRepository:
    """Inventory, listing and revenue aggregates."""

    @pytest.mark.asyncio
    async def test_inventory_snapshot(self, db_session):
        """Test 10 properties with 3 sold leaves 7 available."""
        for index in range(10):
            status = PropertyStatus.SOLD if index < 3 else PropertyStatus.FOR_SALE
            await PropertyFactory.create_property(db_session, title=f"Property {index}", status=status)

        snapshot = await PropertyRepository(db_session).get_inventory_snapshot(calculate_date_ranges())

        assert snapshot["total"] == 10
        assert snapshot["sold"] == 3
        assert snapshot["total"] - snapshot["sold"] == 7
        assert snapshot["added_this_month"] == 10
        assert snapshot["added_last_month"] == 0
        assert snapshot["sold_this_month"] == 3

    @pytest.mark.asyncio
    async def test_inventory_snapshot_empty(self, db_session):
        snapshot = await PropertyRepository(db_session).get_inventory_snapshot(calculate_date_ranges())

        assert snapshot == {
            "total": 0,
            "sold": 0,
            "added_this_month": 0,
            "added_last_month": 0,
            "sold_this_month": 0,
            "sold_last_month": 0,
        }

    @pytest.mark.asyncio
    async def test_sale_dated_by_sold_at_not_last_edit(self, db_session):
        ranges = calculate_date_ranges()
        await PropertyFactory.create_property(
            db_session, status=PropertyStatus.SOLD, sold_at=ranges.last_month.start + timedelta(days=1)
        )

        snapshot = await PropertyRepository(db_session).get_inventory_snapshot(ranges)

        assert snapshot["sold_this_month"] == 0
        assert snapshot["sold_last_month"] == 1

    @pytest.mark.asyncio
    async def test_listing_total_not_inflated_by_reviews(self, db_session):
        """Test 25 properties, several with many reviews, paginate as 25 items over 3 pages."""
        users = [await UserFactory.create_user(db_session) for _ in range(3)]
        properties = [
            await PropertyFactory.create_property(db_session, title=f"Listing {index}")
            for index in range(25)
        ]
        for prop in properties[:5]:
            for user in users:
                await ContentFactory.create_review(db_session, prop.id, user.id, rating=4)

        rows, total = await PropertyRepository(db_session).get_listings_with_ratings(
            PropertySearchFilters(), skip=0, limit=10
        )

        assert total == 25
        assert len(rows) == 10
        assert len({prop.id for prop, _, _ in rows}) == 10

    @pytest.mark.asyncio
    async def test_listing_rating_rollup(self, db_session):
        user_a = await UserFactory.create_user(db_session)
        user_b = await UserFactory.create_user(db_session)
        user_c = await UserFactory.create_user(db_session)
        reviewed = await PropertyFactory.create_property(db_session, title="Reviewed")
        await PropertyFactory.create_property(db_session, title="Unreviewed")
        await ContentFactory.create_review(db_session, reviewed.id, user_a.id, status=ModerationStatus.APPROVED, rating=5)
        await ContentFactory.create_review(db_session, reviewed.id, user_b.id, status=ModerationStatus.APPROVED, rating=3)
        await ContentFactory.create_review(db_session, reviewed.id, user_c.id, status=ModerationStatus.PENDING, rating=1)

        rows, _ = await PropertyRepository(db_session).get_listings_with_ratings(PropertySearchFilters())
        by_title = {prop.title: (average, count) for prop, average, count in rows}

        assert float(by_title["Reviewed"][0]) == pytest.approx(4.0)
        assert by_title["Reviewed"][1] == 2
        assert by_title["Unreviewed"] == (None, 0)

    @pytest.mark.asyncio
    async def test_search_filters(self, db_session):
        await PropertyFactory.create_property(db_session, title="Cheap House", price=Decimal("200000"), bedrooms=2)
        await PropertyFactory.create_property(
            db_session, title="Big Villa", price=Decimal("2500000"), bedrooms=5, property_type=PropertyType.VILLA
        )
        await PropertyFactory.create_property(db_session, title="Condo", price=Decimal("600000"), bedrooms=3,
                                              property_type=PropertyType.CONDO, city="Orlando")

        repo = PropertyRepository(db_session)

        _, total = await repo.search_properties(PropertySearchFilters(types=[PropertyType.VILLA, PropertyType.CONDO]))
        assert total == 2

        _, total = await repo.search_properties(PropertySearchFilters(bedrooms=[2, 3]))
        assert total == 2

        properties, total = await repo.search_properties(
            PropertySearchFilters(min_price=Decimal("300000"), max_price=Decimal("1000000"))
        )
        assert total == 1
        assert properties[0].title == "Condo"

        properties, total = await repo.search_properties(PropertySearchFilters(search_text="orlando"))
        assert total == 1

    @pytest.mark.asyncio
    async def test_price_distribution_includes_empty_buckets(self, db_session):
        await PropertyFactory.create_property(db_session, price=Decimal("499999"))
        await PropertyFactory.create_property(db_session, price=Decimal("500000"))
        await PropertyFactory.create_property(db_session, price=Decimal("7000000"))

        distribution = await PropertyRepository(db_session).get_price_distribution()

        assert distribution == [
            {"range": "Under $500K", "count": 1},
            {"range": "$500K-$1M", "count": 1},
            {"range": "$1M-$2M", "count": 0},
            {"range": "$2M-$5M", "count": 0},
            {"range": "Over $5M", "count": 1},
        ]

    @pytest.mark.asyncio
    async def test_price_on_breakpoint_falls_in_lower_bucket(self, db_session):
        for price in ("1000000", "2000000", "5000000"):
            await PropertyFactory.create_property(db_session, price=Decimal(price))

        distribution = await PropertyRepository(db_session).get_price_distribution()
        counts = {row["range"]: row["count"] for row in distribution}

        assert counts == {
            "Under $500K": 0,
            "$500K-$1M": 1,
            "$1M-$2M": 1,
            "$2M-$5M": 1,
            "Over $5M": 0,
        }

    @pytest.mark.asyncio
    async def test_revenue_totals_only_count_sold(self, db_session):
        await PropertyFactory.create_property(db_session, price=Decimal("1000000"), status=PropertyStatus.SOLD)
        await PropertyFactory.create_property(db_session, price=Decimal("500000"), status=PropertyStatus.SOLD)
        await PropertyFactory.create_property(db_session, price=Decimal("900000"), status=PropertyStatus.FOR_SALE)

        totals = await PropertyRepository(db_session).get_revenue_totals(
            since=calculate_date_ranges().this_month.start
        )

        assert float(totals["total_revenue"]) == 1500000
        assert float(totals["recent_revenue"]) == 1500000
        assert totals["units_sold"] == 2

    @pytest.mark.asyncio
    async def test_top_reviewed_excludes_properties_without_approved_reviews(self, db_session):
        user_a = await UserFactory.create_user(db_session)
        user_b = await UserFactory.create_user(db_session)
        popular = await PropertyFactory.create_property(db_session, title="Popular")
        pending_only = await PropertyFactory.create_property(db_session, title="Pending Only")
        await PropertyFactory.create_property(db_session, title="No Reviews")

        await ContentFactory.create_review(db_session, popular.id, user_a.id, status=ModerationStatus.APPROVED)
        await ContentFactory.create_review(db_session, popular.id, user_b.id, status=ModerationStatus.APPROVED)
        await ContentFactory.create_review(db_session, pending_only.id, user_a.id, status=ModerationStatus.PENDING)

        top = await PropertyRepository(db_session).get_top_reviewed(10)

        assert [row["title"] for row in top] == ["Popular"]
        assert top[0]["review_count"] == 2

    @pytest.mark.asyncio
    async def test_monthly_revenue_zero_fills_months(self, db_session):
        await PropertyFactory.create_property(db_session, price=Decimal("750000"), status=PropertyStatus.SOLD)
        now = datetime.now(timezone.utc)
        windows = month_windows(3, now)

        monthly = await PropertyRepository(db_session).get_monthly_revenue(windows)

        assert [row["month"] for row in monthly] == [key for key, _, _ in windows]
        assert monthly[0]["properties_sold"] == 0
        assert monthly[-1]["properties_sold"] == 1
        assert float(monthly[-1]["revenue"]) == 750000


class TestUserRepository:
    """User directory and activity aggregates."""

    @pytest.mark.asyncio
    async def test_active_commenters_counted_once(self, db_session):
        blog = await ContentFactory.create_blog(db_session)
        chatty = await UserFactory.create_user(db_session)
        quiet = await UserFactory.create_user(db_session)
        await UserFactory.create_user(db_session)

        for _ in range(3):
            await ContentFactory.create_comment(db_session, blog.id, user_id=chatty.id)
        await ContentFactory.create_comment(db_session, blog.id, user_id=quiet.id)

        since = datetime.now(timezone.utc) - timedelta(days=30)
        assert await UserRepository(db_session).count_active_commenters(since) == 2

    @pytest.mark.asyncio
    async def test_search_users(self, db_session):
        await UserFactory.create_user(db_session, username="alice", email="alice@example.com")
        await UserFactory.create_user(db_session, username="bob", email="bob@example.com")

        users, total = await UserRepository(db_session).search_users("ali")

        assert total == 1
        assert users[0].username == "alice"

    @pytest.mark.asyncio
    async def test_daily_registrations(self, db_session):
        await UserFactory.create_user(db_session)
        await UserFactory.create_user(db_session)

        trend = await UserRepository(db_session).get_daily_registrations(
            datetime.now(timezone.utc) - timedelta(days=30)
        )

        assert sum(row["count"] for row in trend) == 2
        assert all(isinstance(row["date"], str) for row in trend)


class TestContentRepositories:
    """Blog, review, newsletter and sell submission aggregates."""

    @pytest.mark.asyncio
    async def test_blog_snapshot_and_categories(self, db_session):
        await ContentFactory.create_blog(db_session, view_count=100, category="Guides")
        await ContentFactory.create_blog(db_session, view_count=50, category="Guides")
        await ContentFactory.create_blog(db_session, view_count=10, category="News", status=BlogStatus.DRAFT)

        repo = BlogRepository(db_session)
        snapshot = await repo.get_content_snapshot()
        categories = await repo.get_category_stats()

        assert snapshot == {"total": 3, "published": 2, "drafts": 1, "total_views": 160}
        assert categories == [{"category": "Guides", "count": 2, "total_views": 150}]

    @pytest.mark.asyncio
    async def test_blog_property_links_replaced(self, db_session):
        blog = await ContentFactory.create_blog(db_session)
        first = await PropertyFactory.create_property(db_session)
        second = await PropertyFactory.create_property(db_session)
        repo = BlogRepository(db_session)

        await repo.replace_properties(blog.id, [first.id, first.id, second.id])
        assert set(await repo.get_property_ids(blog.id)) == {first.id, second.id}

        await repo.replace_properties(blog.id, [second.id])
        assert await repo.get_property_ids(blog.id) == [second.id]

    @pytest.mark.asyncio
    async def test_review_average_ratings_use_approved_only(self, db_session):
        prop = await PropertyFactory.create_property(db_session)
        user_a = await UserFactory.create_user(db_session)
        user_b = await UserFactory.create_user(db_session)
        await ContentFactory.create_review(db_session, prop.id, user_a.id, status=ModerationStatus.APPROVED, rating=5)
        await ContentFactory.create_review(db_session, prop.id, user_b.id, status=ModerationStatus.PENDING, rating=1)

        averages = await ReviewRepository(db_session).get_average_ratings()

        assert float(averages["location_rating"]) == 5.0

    @pytest.mark.asyncio
    async def test_newsletter_counts(self, db_session):
        await ContentFactory.create_subscriber(db_session, active=True)
        await ContentFactory.create_subscriber(db_session, active=True)
        await ContentFactory.create_subscriber(db_session, active=False)

        repo = NewsletterRepository(db_session)

        assert await repo.count_active() == 2
        assert await repo.get_subscription_stats() == {"total": 3, "active": 2, "unsubscribed": 1}

    @pytest.mark.asyncio
    async def test_sell_pipeline_snapshot(self, db_session):
        await ContentFactory.create_sell_submission(db_session, OfferStatus.PENDING)
        await ContentFactory.create_sell_submission(db_session, OfferStatus.ACCEPTED)

        snapshot = await SellSubmissionRepository(db_session).get_pipeline_snapshot(calculate_date_ranges())

        assert snapshot["total"] == 2
        assert snapshot["this_month"] == 2
        assert snapshot["this_year"] == 2
        assert snapshot["last_year"] == 0
        assert snapshot["pending"] == 1
        assert snapshot["accepted"] == 1
