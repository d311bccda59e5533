"""
API tests for the admin dashboard: authentication, role gating, reports and moderation.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal

from estate_dashboard.models.property import PropertyStatus
from estate_dashboard.models.review import ModerationStatus
from tests.conftest import PropertyFactory, UserFactory, ContentFactory, auth_headers, make_token


API = "/api/v1"


class TestDashboardAuthentication:
    """Bearer token and admin checks."""

    @pytest.mark.asyncio
    async def test_missing_token(self, async_client):
        response = await async_client.get(f"{API}/dashboard/stats")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_invalid_token(self, async_client):
        response = await async_client.get(
            f"{API}/dashboard/stats",
            headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, async_client, test_admin):
        token = make_token(test_admin.id, expires_in=timedelta(minutes=-5))

        response = await async_client.get(
            f"{API}/dashboard/stats",
            headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, async_client, test_user):
        response = await async_client.get(f"{API}/dashboard/stats", headers=auth_headers(test_user.id))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"


class TestDashboardStats:
    """Snapshot contents per role."""

    @pytest.mark.asyncio
    async def test_super_admin_sees_revenue(self, async_client, db_session, test_super_admin):
        await PropertyFactory.create_property(db_session, price=Decimal("1000000"), status=PropertyStatus.SOLD)
        await PropertyFactory.create_property(db_session, price=Decimal("350000"))

        response = await async_client.get(f"{API}/dashboard/stats", headers=auth_headers(test_super_admin.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["properties"]["total"] == 2
        assert data["properties"]["inventoryRate"] == 50.0
        assert data["revenue"]["totalRevenue"] == "$1,000,000"
        assert "sellingToUs" in data
        assert "recentActivity" in data

    @pytest.mark.asyncio
    async def test_admin_has_no_revenue(self, async_client, db_session, test_admin):
        await PropertyFactory.create_property(db_session, status=PropertyStatus.SOLD)

        response = await async_client.get(f"{API}/dashboard/stats", headers=auth_headers(test_admin.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert "revenue" not in data
        assert data["properties"]["sold"] == 1

    @pytest.mark.asyncio
    async def test_revenue_report_requires_super_admin(self, async_client, test_admin, test_super_admin):
        forbidden = await async_client.get(f"{API}/dashboard/revenue/stats", headers=auth_headers(test_admin.id))
        allowed = await async_client.get(f"{API}/dashboard/revenue/stats", headers=auth_headers(test_super_admin.id))

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert len(allowed.json()["data"]["monthlyTrend"]) == 12

    @pytest.mark.asyncio
    async def test_segmented_reports(self, async_client, test_admin):
        headers = auth_headers(test_admin.id)

        for path in (
            "properties/stats",
            "blogs/stats",
            "users/stats",
            "content/stats",
            "top-performers",
            "recent-activity",
        ):
            response = await async_client.get(f"{API}/dashboard/{path}", headers=headers)
            assert response.status_code == 200, path
            assert response.json()["success"] is True

    @pytest.mark.asyncio
    async def test_listings_pagination(self, async_client, db_session, test_admin, test_user):
        for index in range(25):
            prop = await PropertyFactory.create_property(db_session, title=f"Listing {index}")
            if index == 0:
                await ContentFactory.create_review(db_session, prop.id, test_user.id, rating=5)

        response = await async_client.get(
            f"{API}/dashboard/listings",
            params={"page": 1, "limit": 10},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalItems"] == 25
        assert data["totalPages"] == 3
        assert data["currentPage"] == 1
        assert len(data["listings"]) == 10

    @pytest.mark.asyncio
    async def test_listings_inverted_price_range(self, async_client, test_admin):
        response = await async_client.get(
            f"{API}/dashboard/listings",
            params={"minPrice": 500000, "maxPrice": 100000},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_user_details(self, async_client, db_session, test_admin, test_user, test_property):
        await ContentFactory.create_review(db_session, test_property.id, test_user.id)

        response = await async_client.get(
            f"{API}/dashboard/users/{test_user.id}",
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == str(test_user.id)
        assert len(data["reviews"]) == 1
        assert data["newsletter"] is None

    @pytest.mark.asyncio
    async def test_unknown_user(self, async_client, test_admin):
        response = await async_client.get(
            f"{API}/dashboard/users/{uuid.uuid4()}",
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 404


class TestModerationAPI:
    """Comment and review moderation endpoints."""

    @pytest.mark.asyncio
    async def test_invalid_comment_status(self, async_client, db_session, test_admin):
        blog = await ContentFactory.create_blog(db_session)
        comment = await ContentFactory.create_comment(db_session, blog.id)

        response = await async_client.put(
            f"{API}/dashboard/comments/{comment.id}/status",
            json={"status": "deleted"},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 400
        assert "Invalid status" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_approve_then_remoderate(self, async_client, db_session, test_admin):
        blog = await ContentFactory.create_blog(db_session)
        comment = await ContentFactory.create_comment(db_session, blog.id)
        headers = auth_headers(test_admin.id)

        approved = await async_client.put(
            f"{API}/dashboard/comments/{comment.id}/status",
            json={"status": "approved"},
            headers=headers
        )
        again = await async_client.put(
            f"{API}/dashboard/comments/{comment.id}/status",
            json={"status": "spam"},
            headers=headers
        )

        assert approved.status_code == 200
        assert approved.json()["data"]["status"] == "approved"
        assert again.status_code == 400
        assert again.json()["error"]["code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_unknown_comment(self, async_client, test_admin):
        response = await async_client.put(
            f"{API}/dashboard/comments/{uuid.uuid4()}/status",
            json={"status": "approved"},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_reject_review(self, async_client, db_session, test_admin, test_user, test_property):
        review = await ContentFactory.create_review(db_session, test_property.id, test_user.id)

        response = await async_client.put(
            f"{API}/dashboard/reviews/{review.id}/status",
            json={"status": "rejected"},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "rejected"

    @pytest.mark.asyncio
    async def test_review_queue_filter(self, async_client, db_session, test_admin, test_property):
        user_a = await UserFactory.create_user(db_session)
        user_b = await UserFactory.create_user(db_session)
        await ContentFactory.create_review(db_session, test_property.id, user_a.id)
        await ContentFactory.create_review(
            db_session, test_property.id, user_b.id, status=ModerationStatus.APPROVED
        )

        response = await async_client.get(
            f"{API}/dashboard/reviews",
            params={"status": "pending"},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 200
        assert response.json()["data"]["totalItems"] == 1

    @pytest.mark.asyncio
    async def test_comment_stats(self, async_client, db_session, test_admin):
        blog = await ContentFactory.create_blog(db_session)
        await ContentFactory.create_comment(db_session, blog.id)
        await ContentFactory.create_comment(db_session, blog.id, status=ModerationStatus.SPAM)

        response = await async_client.get(f"{API}/dashboard/comments/stats", headers=auth_headers(test_admin.id))

        assert response.json()["data"] == {"total": 2, "pending": 1, "approved": 0, "rejected": 0, "spam": 1}

    @pytest.mark.asyncio
    async def test_review_stats(self, async_client, db_session, test_admin, test_property):
        user_a = await UserFactory.create_user(db_session)
        user_b = await UserFactory.create_user(db_session)
        await ContentFactory.create_review(
            db_session, test_property.id, user_a.id, status=ModerationStatus.APPROVED, rating=5
        )
        await ContentFactory.create_review(db_session, test_property.id, user_b.id, rating=1)

        response = await async_client.get(f"{API}/dashboard/reviews/stats", headers=auth_headers(test_admin.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert data["approved"] == 1
        assert data["averageRatings"]["location"] == 5.0


class TestAdminsAPI:
    """Staff management endpoints."""

    @pytest.mark.asyncio
    async def test_list_requires_super_admin(self, async_client, test_admin, test_super_admin):
        forbidden = await async_client.get(f"{API}/admins", headers=auth_headers(test_admin.id))
        allowed = await async_client.get(f"{API}/admins", headers=auth_headers(test_super_admin.id))

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["data"]["totalItems"] == 2

    @pytest.mark.asyncio
    async def test_staff_directory_open_to_admins(self, async_client, test_admin, test_super_admin):
        response = await async_client.get(f"{API}/dashboard/staffs", headers=auth_headers(test_admin.id))

        assert response.status_code == 200
        assert response.json()["data"]["totalItems"] == 2

    @pytest.mark.asyncio
    async def test_update_own_profile(self, async_client, test_admin):
        response = await async_client.put(
            f"{API}/admins/{test_admin.id}",
            json={"position": "Head of Content"},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 200
        assert response.json()["data"]["position"] == "Head of Content"

    @pytest.mark.asyncio
    async def test_delete_admin(self, async_client, db_session, test_super_admin):
        other = await UserFactory.create_admin(db_session)

        response = await async_client.delete(f"{API}/admins/{other.id}", headers=auth_headers(test_super_admin.id))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Admin deleted successfully"}
