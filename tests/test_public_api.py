"""
API tests for the public catalogue, blog, review submission, sell form and admin content endpoints.
"""

import pytest
import uuid
from decimal import Decimal

from estate_dashboard.models.blog import BlogStatus
from estate_dashboard.models.property import PropertyType
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.repositories.blog import BlogRepository
from tests.conftest import PropertyFactory, UserFactory, ContentFactory, auth_headers


API = "/api/v1"


class TestPropertiesAPI:
    """Public catalogue endpoints."""

    @pytest.mark.asyncio
    async def test_list_with_filters(self, async_client, db_session):
        await PropertyFactory.create_property(db_session, title="Villa", property_type=PropertyType.VILLA)
        await PropertyFactory.create_property(db_session, title="House", price=Decimal("250000"))

        response = await async_client.get(f"{API}/properties", params={"type": "Villa,Condo"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalItems"] == 1
        assert data["properties"][0]["title"] == "Villa"

    @pytest.mark.asyncio
    async def test_invalid_type_filter(self, async_client):
        response = await async_client.get(f"{API}/properties", params={"type": "Castle"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_search_requires_query(self, async_client):
        response = await async_client.get(f"{API}/properties/search")

        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"

    @pytest.mark.asyncio
    async def test_search(self, async_client, db_session):
        await PropertyFactory.create_property(db_session, title="Lakeside Cottage")
        await PropertyFactory.create_property(db_session, title="City Loft")

        response = await async_client.get(f"{API}/properties/search", params={"query": "lakeside"})

        assert response.status_code == 200
        assert response.json()["data"]["count"] == 1

    @pytest.mark.asyncio
    async def test_property_detail(self, async_client, test_property):
        response = await async_client.get(f"{API}/properties/{test_property.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["property"]["zipCode"] == "33101"
        assert data["relatedProperties"] == []
        assert data["reviews"] == []

    @pytest.mark.asyncio
    async def test_property_detail_not_found(self, async_client):
        response = await async_client.get(f"{API}/properties/{uuid.uuid4()}")

        assert response.status_code == 404


class TestReviewSubmissionAPI:
    """Signed-in users reviewing properties."""

    @pytest.mark.asyncio
    async def test_submit_and_duplicate(self, async_client, test_user, test_property):
        headers = auth_headers(test_user.id)
        payload = {"content": "Beautiful light", "locationRating": 5, "valueRating": 4}

        first = await async_client.post(f"{API}/properties/{test_property.id}/reviews", json=payload, headers=headers)
        second = await async_client.post(f"{API}/properties/{test_property.id}/reviews", json=payload, headers=headers)

        assert first.status_code == 201
        assert first.json()["data"]["status"] == "pending"
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "DUPLICATE_REVIEW"

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, async_client, test_user, test_property):
        response = await async_client.post(
            f"{API}/properties/{test_property.id}/reviews",
            json={"content": "Too good", "locationRating": 6},
            headers=auth_headers(test_user.id)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_user(self, async_client, test_property):
        response = await async_client.post(
            f"{API}/properties/{test_property.id}/reviews",
            json={"content": "Anonymous"},
            headers=auth_headers(uuid.uuid4())
        )

        assert response.status_code == 401


class TestBlogsAPI:
    """Public blog posts and reader comments."""

    @pytest.mark.asyncio
    async def test_list_shows_published_only(self, async_client, db_session):
        await ContentFactory.create_blog(db_session, title="Market update")
        await ContentFactory.create_blog(db_session, title="Unfinished draft", status=BlogStatus.DRAFT)

        response = await async_client.get(f"{API}/blogs")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalItems"] == 1
        assert [blog["title"] for blog in data["blogs"]] == ["Market update"]

    @pytest.mark.asyncio
    async def test_list_by_category(self, async_client, db_session):
        await ContentFactory.create_blog(db_session, title="Mortgage basics", category="Finance")
        await ContentFactory.create_blog(db_session, title="Staging tips", category="Guides")

        response = await async_client.get(f"{API}/blogs", params={"category": "Finance"})

        assert response.status_code == 200
        assert [blog["title"] for blog in response.json()["data"]["blogs"]] == ["Mortgage basics"]

    @pytest.mark.asyncio
    async def test_search_requires_query(self, async_client):
        response = await async_client.get(f"{API}/blogs/search")

        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"

    @pytest.mark.asyncio
    async def test_search(self, async_client, db_session):
        await ContentFactory.create_blog(db_session, title="Waterfront living")
        await ContentFactory.create_blog(db_session, title="Waterfront draft", status=BlogStatus.DRAFT)
        await ContentFactory.create_blog(db_session, title="Downtown lofts")

        response = await async_client.get(f"{API}/blogs/search", params={"query": "waterfront"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["count"] == 1
        assert data["blogs"][0]["title"] == "Waterfront living"

    @pytest.mark.asyncio
    async def test_detail_with_approved_comments_and_neighbours(self, async_client, db_session, test_property):
        older = await ContentFactory.create_blog(db_session, title="Spring market")
        blog = await ContentFactory.create_blog(db_session, title="Summer market")
        await BlogRepository(db_session).replace_properties(blog.id, [test_property.id])
        await ContentFactory.create_comment(db_session, blog.id, status=ModerationStatus.APPROVED)
        await ContentFactory.create_comment(db_session, blog.id, status=ModerationStatus.PENDING)

        response = await async_client.get(f"{API}/blogs/{blog.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["blog"]["title"] == "Summer market"
        assert [prop["id"] for prop in data["featuredProperties"]] == [str(test_property.id)]
        assert len(data["comments"]) == 1
        assert data["comments"][0]["status"] == "approved"
        assert data["previousBlog"] == {"id": str(older.id), "title": "Spring market"}
        assert data["nextBlog"] is None

    @pytest.mark.asyncio
    async def test_draft_is_not_found(self, async_client, db_session):
        draft = await ContentFactory.create_blog(db_session, status=BlogStatus.DRAFT)

        response = await async_client.get(f"{API}/blogs/{draft.id}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_view_increments_count(self, async_client, db_session):
        blog = await ContentFactory.create_blog(db_session, view_count=5)

        await async_client.get(f"{API}/blogs/{blog.id}/view")
        response = await async_client.get(f"{API}/blogs/{blog.id}/view")

        assert response.status_code == 200
        assert response.json()["data"] == {"id": str(blog.id), "viewCount": 7}

    @pytest.mark.asyncio
    async def test_view_of_draft_not_found(self, async_client, db_session):
        draft = await ContentFactory.create_blog(db_session, status=BlogStatus.DRAFT)

        response = await async_client.get(f"{API}/blogs/{draft.id}/view")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_comment_starts_pending(self, async_client, db_session, test_user):
        blog = await ContentFactory.create_blog(db_session)

        response = await async_client.post(
            f"{API}/blogs/{blog.id}/comments",
            json={"content": "  Great read  "},
            headers=auth_headers(test_user.id)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["content"] == "Great read"
        assert data["username"] == test_user.username
        assert data["userId"] == str(test_user.id)

    @pytest.mark.asyncio
    async def test_comment_requires_user(self, async_client, db_session):
        blog = await ContentFactory.create_blog(db_session)

        response = await async_client.post(
            f"{API}/blogs/{blog.id}/comments",
            json={"content": "Anonymous"},
            headers=auth_headers(uuid.uuid4())
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_blank_comment_rejected(self, async_client, db_session, test_user):
        blog = await ContentFactory.create_blog(db_session)

        response = await async_client.post(
            f"{API}/blogs/{blog.id}/comments",
            json={"content": "   "},
            headers=auth_headers(test_user.id)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_edit_own_comment_returns_to_queue(self, async_client, db_session, test_user):
        blog = await ContentFactory.create_blog(db_session)
        comment = await ContentFactory.create_comment(
            db_session, blog.id, user_id=test_user.id, status=ModerationStatus.APPROVED
        )

        response = await async_client.put(
            f"{API}/comments/{comment.id}",
            json={"content": "Updated thoughts"},
            headers=auth_headers(test_user.id)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["content"] == "Updated thoughts"
        assert data["status"] == "pending"

    @pytest.mark.asyncio
    async def test_edit_someone_elses_comment_forbidden(self, async_client, db_session, test_user):
        blog = await ContentFactory.create_blog(db_session)
        other = await UserFactory.create_user(db_session)
        comment = await ContentFactory.create_comment(db_session, blog.id, user_id=other.id)

        response = await async_client.put(
            f"{API}/comments/{comment.id}",
            json={"content": "Not mine"},
            headers=auth_headers(test_user.id)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_edit_spam_comment_refused(self, async_client, db_session, test_user):
        blog = await ContentFactory.create_blog(db_session)
        comment = await ContentFactory.create_comment(
            db_session, blog.id, user_id=test_user.id, status=ModerationStatus.SPAM
        )

        response = await async_client.put(
            f"{API}/comments/{comment.id}",
            json={"content": "Try again"},
            headers=auth_headers(test_user.id)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"


class TestSellAPI:
    """Sell-to-us form and pipeline management."""

    SUBMISSION = {
        "fullName": "Jane Seller",
        "phoneNumber": "(305) 555-0100",
        "emailAddress": "Jane@Example.com",
        "propertyType": "House",
        "address": "9 Palm Avenue",
        "condition": "Good",
        "askingPrice": 650000,
    }

    @pytest.mark.asyncio
    async def test_submit(self, async_client):
        response = await async_client.post(f"{API}/sell", json=self.SUBMISSION)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["offerStatus"] == "Pending"
        assert data["phoneNumber"] == "3055550100"
        assert data["emailAddress"] == "jane@example.com"

    @pytest.mark.asyncio
    async def test_invalid_phone(self, async_client):
        response = await async_client.post(f"{API}/sell", json={**self.SUBMISSION, "phoneNumber": "12"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_pipeline_management(self, async_client, db_session, test_admin):
        submission = await ContentFactory.create_sell_submission(db_session)
        headers = auth_headers(test_admin.id)

        updated = await async_client.put(
            f"{API}/admin/sell/submissions/{submission.id}",
            json={"offerStatus": "Accepted"},
            headers=headers
        )
        listed = await async_client.get(
            f"{API}/admin/sell/submissions",
            params={"offerStatus": "Accepted"},
            headers=headers
        )
        stats = await async_client.get(f"{API}/admin/sell/stats", headers=headers)

        assert updated.status_code == 200
        assert listed.json()["data"]["totalItems"] == 1
        assert stats.json()["data"]["accepted"] == 1


class TestAdminContentAPI:
    """Property, blog and newsletter management."""

    PROPERTY = {
        "title": "Modern Townhouse",
        "description": "Three storey townhouse with roof terrace",
        "price": 820000,
        "address": "55 Harbour Street",
        "city": "Tampa",
        "state": "FL",
        "zipCode": "33602",
        "type": "Townhouse",
        "bedrooms": 3,
        "bathrooms": 2.5,
        "sqft": 2100,
    }

    @pytest.mark.asyncio
    async def test_property_lifecycle(self, async_client, test_admin):
        headers = auth_headers(test_admin.id)

        created = await async_client.post(f"{API}/admin/properties", json=self.PROPERTY, headers=headers)
        property_id = created.json()["data"]["id"]
        sold = await async_client.put(
            f"{API}/admin/properties/{property_id}",
            json={"status": "Sold"},
            headers=headers
        )
        deleted = await async_client.delete(f"{API}/admin/properties/{property_id}", headers=headers)
        missing = await async_client.delete(f"{API}/admin/properties/{property_id}", headers=headers)

        assert created.status_code == 201
        assert created.json()["data"]["status"] == "For Sale"
        assert sold.json()["data"]["status"] == "Sold"
        assert deleted.status_code == 200
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_empty_property_update_rejected(self, async_client, test_admin, test_property):
        response = await async_client.put(
            f"{API}/admin/properties/{test_property.id}",
            json={},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_blog_with_properties(self, async_client, test_admin, test_property):
        response = await async_client.post(
            f"{API}/admin/blogs",
            json={
                "title": "Homes we love",
                "content": "A tour of this month's favourites.",
                "status": "published",
                "propertyIds": [str(test_property.id)],
            },
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["propertyIds"] == [str(test_property.id)]
        assert data["publishedAt"] is not None

    @pytest.mark.asyncio
    async def test_newsletter_stats(self, async_client, db_session, test_admin):
        await ContentFactory.create_subscriber(db_session)
        await ContentFactory.create_subscriber(db_session, active=False)

        response = await async_client.get(f"{API}/admin/newsletter/stats", headers=auth_headers(test_admin.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["active"] == 1
        assert data["unsubscribed"] == 1

    @pytest.mark.asyncio
    async def test_recent_broadcasts(self, async_client, db_session, test_admin):
        await ContentFactory.create_broadcast(db_session, subject="February update", sent_by_id=test_admin.id)
        await ContentFactory.create_broadcast(db_session, subject="March update", sent_by_id=test_admin.id)

        response = await async_client.get(
            f"{API}/admin/newsletter/broadcasts",
            params={"limit": 1},
            headers=auth_headers(test_admin.id)
        )

        assert response.status_code == 200
        broadcasts = response.json()["data"]["broadcasts"]
        assert len(broadcasts) == 1
        assert broadcasts[0]["recipientCount"] == 120
        assert broadcasts[0]["sentById"] == str(test_admin.id)
