"""
Dashboard service: the admin statistics snapshot and the segmented reports.
Every report is a read-only sequence of aggregate queries on the request's session.
"""

from typing import Any, Dict, Optional
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories import (
    PropertyRepository,
    ReviewRepository,
    BlogRepository,
    CommentRepository,
    UserRepository,
    NewsletterRepository,
    SellSubmissionRepository,
)
from estate_dashboard.models.user import Admin
from estate_dashboard.models.review import ModerationStatus
from estate_dashboard.models.blog import BlogStatus
from estate_dashboard.schemas.dashboard import (
    PropertyOverview,
    SellingToUsOverview,
    BlogOverview,
    UserOverview,
    EngagementOverview,
    RecentActivityOverview,
    RevenueOverview,
    DashboardStats,
    SuperAdminDashboardStats,
    MonthOverMonth,
    TypeCount,
    CityCount,
    PriceRangeCount,
    PropertyStats,
    CategoryCount,
    BlogSummary,
    StatusCount,
    BlogStats,
    DailyCount,
    UserStats,
    PendingComment,
    PendingReview,
    ModerationSection,
    ContentModerationStats,
    MonthlyRevenue,
    CityRevenue,
    RevenueStats,
    ReviewedProperty,
    SellingCity,
    TopPerformers,
    RecentProperty,
    RecentComment,
    RecentReview,
    RecentActivityFeed,
)
from estate_dashboard.utils.reporting import (
    DateRanges,
    calculate_date_ranges,
    calculate_percentage_change,
    format_currency,
    month_windows,
    safe_ratio,
    to_float,
)
import logging

logger = logging.getLogger(__name__)

TRAILING_DAYS = 30
RECENT_DAYS = 7
REVENUE_MONTHS = 12


def _status_counts(breakdown: Dict[Any, int], statuses) -> list:
    """Counts for every status in enum order, zero when a status has no rows."""
    return [StatusCount(status=status.value, count=breakdown.get(status, 0)) for status in statuses]


class DashboardService:
    """
    Builds the dashboard reports.
    Queries run one after another because an AsyncSession cannot be shared by
    concurrent operations; a failing query aborts the whole report.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.review_repo = ReviewRepository(db_session)
        self.blog_repo = BlogRepository(db_session)
        self.comment_repo = CommentRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.newsletter_repo = NewsletterRepository(db_session)
        self.sell_repo = SellSubmissionRepository(db_session)

    async def get_dashboard_stats(self, admin: Admin, now: Optional[datetime] = None) -> DashboardStats:
        """
        Build the dashboard snapshot for an admin.

        Args:
            admin: Authenticated admin; super admins also receive the revenue section
            now: Reference instant, defaults to the current UTC time

        Returns:
            SuperAdminDashboardStats for super admins, DashboardStats otherwise
        """
        ranges = calculate_date_ranges(now)
        week_start = ranges.this_month.end - timedelta(days=RECENT_DAYS)

        try:
            sections = {
                "properties": await self._property_overview(ranges),
                "selling_to_us": await self._selling_overview(ranges),
                "blogs": await self._blog_overview(),
                "users": UserOverview(
                    total=await self.user_repo.count(),
                    new_this_month=await self.user_repo.count_created_between(ranges.this_month.start),
                ),
                "engagement": await self._engagement_overview(),
            }
            sections["recent_activity"] = RecentActivityOverview(
                new_users_this_month=sections["users"].new_this_month,
                new_comments_this_week=await self.comment_repo.count_created_since(week_start),
                new_reviews_this_week=await self.review_repo.count_created_since(week_start),
            )

            if admin.is_super_admin:
                revenue = await self._revenue_overview(ranges)
                logger.debug(f"Built dashboard snapshot with revenue for admin {admin.id}")
                return SuperAdminDashboardStats(**sections, revenue=revenue)

            logger.debug(f"Built dashboard snapshot for admin {admin.id}")
            return DashboardStats(**sections)
        except Exception as e:
            logger.error(f"Failed to build dashboard snapshot for admin {admin.id}: {e}")
            raise

    async def get_property_stats(self, now: Optional[datetime] = None) -> PropertyStats:
        ranges = calculate_date_ranges(now)

        by_type = [
            TypeCount(
                type=row["type"].value,
                count=row["count"],
                average_price=to_float(row["average_price"], 2) or 0.0
            )
            for row in await self.property_repo.count_by_type_with_avg_price()
        ]
        by_city = [CityCount(**row) for row in await self.property_repo.get_top_cities(10)]
        distribution = [PriceRangeCount(**row) for row in await self.property_repo.get_price_distribution()]

        this_month = await self.property_repo.count_created_between(ranges.this_month.start)
        last_month = await self.property_repo.count_created_between(ranges.last_month.start, ranges.last_month.end)

        return PropertyStats(
            by_type=by_type,
            by_city=by_city,
            price_distribution=distribution,
            monthly_trend=MonthOverMonth(
                this_month=this_month,
                last_month=last_month,
                change=calculate_percentage_change(this_month, last_month)
            )
        )

    async def get_blog_stats(self, now: Optional[datetime] = None) -> BlogStats:
        ranges = calculate_date_ranges(now)

        categories = [CategoryCount(**row) for row in await self.blog_repo.get_category_stats()]
        top_blogs = await self.blog_repo.get_top_by_views(limit=10, published_only=True)
        breakdown = await self.blog_repo.get_status_breakdown()

        this_month = await self.blog_repo.count_published_between(ranges.this_month.start)
        last_month = await self.blog_repo.count_published_between(ranges.last_month.start, ranges.last_month.end)

        return BlogStats(
            by_category=categories,
            top_performing=[BlogSummary.model_validate(blog) for blog in top_blogs],
            status_breakdown=_status_counts(breakdown, BlogStatus),
            monthly_trend=MonthOverMonth(
                this_month=this_month,
                last_month=last_month,
                change=calculate_percentage_change(this_month, last_month)
            )
        )

    async def get_user_stats(self, now: Optional[datetime] = None) -> UserStats:
        ranges = calculate_date_ranges(now)
        window_start = ranges.this_month.end - timedelta(days=TRAILING_DAYS)

        registrations = await self.user_repo.get_daily_registrations(window_start)
        active_users = await self.user_repo.count_active_commenters(window_start)

        this_month = await self.user_repo.count_created_between(ranges.this_month.start)
        last_month = await self.user_repo.count_created_between(ranges.last_month.start, ranges.last_month.end)

        return UserStats(
            registration_trend=[DailyCount(**row) for row in registrations],
            active_users=active_users,
            monthly_growth=MonthOverMonth(
                this_month=this_month,
                last_month=last_month,
                change=calculate_percentage_change(this_month, last_month)
            )
        )

    async def get_content_stats(self) -> ContentModerationStats:
        comment_breakdown = await self.comment_repo.get_status_breakdown()
        review_breakdown = await self.review_repo.get_status_breakdown()
        pending_comments = await self.comment_repo.get_recent_pending(10)
        pending_reviews = await self.review_repo.get_recent_pending(10)

        return ContentModerationStats(
            comments=ModerationSection(status_breakdown=_status_counts(comment_breakdown, ModerationStatus)),
            reviews=ModerationSection(status_breakdown=_status_counts(review_breakdown, ModerationStatus)),
            pending_comments=[PendingComment.model_validate(comment) for comment in pending_comments],
            pending_reviews=[PendingReview.model_validate(review) for review in pending_reviews],
        )

    async def get_revenue_stats(self, now: Optional[datetime] = None) -> RevenueStats:
        """
        Revenue report over SOLD listings. Callers must hold the view_revenue permission.
        """
        ranges = calculate_date_ranges(now)
        windows = month_windows(REVENUE_MONTHS, ranges.this_month.end)

        totals = await self.property_repo.get_revenue_totals(since=ranges.this_month.start)
        monthly = await self.property_repo.get_monthly_revenue(windows)
        by_city = await self.property_repo.get_revenue_by_city(10)

        return RevenueStats(
            overview=self._format_revenue(totals),
            total_properties_sold=totals["units_sold"],
            monthly_trend=[
                MonthlyRevenue(
                    month=row["month"],
                    revenue=format_currency(row["revenue"]),
                    properties_sold=row["properties_sold"]
                )
                for row in monthly
            ],
            by_city=[
                CityRevenue(
                    city=row["city"],
                    revenue=format_currency(row["revenue"]),
                    units_sold=row["units_sold"],
                    average_price=format_currency(row["average_price"])
                )
                for row in by_city
            ]
        )

    async def get_top_performers(self) -> TopPerformers:
        top_blogs = await self.blog_repo.get_top_by_views(limit=10, published_only=True)
        top_reviewed = await self.property_repo.get_top_reviewed(10)
        top_cities = await self.property_repo.get_top_selling_cities(5)

        return TopPerformers(
            top_blogs=[BlogSummary.model_validate(blog) for blog in top_blogs],
            top_reviewed_properties=[ReviewedProperty(**row) for row in top_reviewed],
            top_selling_cities=[
                SellingCity(
                    city=row["city"],
                    sold_count=row["sold_count"],
                    total_revenue=format_currency(row["total_revenue"])
                )
                for row in top_cities
            ]
        )

    async def get_recent_activity(self, limit: int = 5) -> RecentActivityFeed:
        properties = await self.property_repo.get_multi(limit=limit)
        blogs = await self.blog_repo.get_recent_published(limit)
        comments = await self.comment_repo.get_multi(limit=limit)
        reviews = await self.review_repo.get_multi(limit=limit)

        return RecentActivityFeed(
            recent_properties=[
                RecentProperty(
                    id=prop.id,
                    title=prop.title,
                    city=prop.city,
                    price=float(prop.price),
                    status=prop.status.value,
                    created_at=prop.created_at
                )
                for prop in properties
            ],
            recent_blogs=[BlogSummary.model_validate(blog) for blog in blogs],
            recent_comments=[
                RecentComment(
                    id=comment.id,
                    username=comment.username,
                    content=comment.content,
                    status=comment.status.value,
                    created_at=comment.created_at
                )
                for comment in comments
            ],
            recent_reviews=[
                RecentReview(
                    id=review.id,
                    name=review.name,
                    content=review.content,
                    status=review.status.value,
                    created_at=review.created_at
                )
                for review in reviews
            ]
        )

    # Snapshot sections

    async def _property_overview(self, ranges: DateRanges) -> PropertyOverview:
        inventory = await self.property_repo.get_inventory_snapshot(ranges)
        available = inventory["total"] - inventory["sold"]

        return PropertyOverview(
            total=inventory["total"],
            available=available,
            sold=inventory["sold"],
            added_this_month=inventory["added_this_month"],
            added_last_month=inventory["added_last_month"],
            inventory_rate=safe_ratio(available, inventory["total"], scale=100),
            sold_this_month=inventory["sold_this_month"],
            sold_last_month=inventory["sold_last_month"],
            sales_change=calculate_percentage_change(inventory["sold_this_month"], inventory["sold_last_month"]),
        )

    async def _selling_overview(self, ranges: DateRanges) -> SellingToUsOverview:
        pipeline = await self.sell_repo.get_pipeline_snapshot(ranges)

        return SellingToUsOverview(
            this_year=pipeline["this_year"],
            last_year=pipeline["last_year"],
            this_month=pipeline["this_month"],
            last_month=pipeline["last_month"],
            change=calculate_percentage_change(pipeline["this_month"], pipeline["last_month"]),
            yearly_change=calculate_percentage_change(pipeline["this_year"], pipeline["last_year"]),
            total=pipeline["total"],
            pending=pipeline["pending"],
            offer_sent=pipeline["offer_sent"],
            accepted=pipeline["accepted"],
            rejected=pipeline["rejected"],
        )

    async def _blog_overview(self) -> BlogOverview:
        content = await self.blog_repo.get_content_snapshot()

        return BlogOverview(
            total=content["total"],
            published=content["published"],
            drafts=content["drafts"],
            total_views=content["total_views"],
            average_views=int(safe_ratio(content["total_views"], content["published"], digits=0)),
        )

    async def _engagement_overview(self) -> EngagementOverview:
        comments = await self.comment_repo.get_status_breakdown()
        reviews = await self.review_repo.get_status_breakdown()

        return EngagementOverview(
            total_comments=sum(comments.values()),
            pending_comments=comments.get(ModerationStatus.PENDING, 0),
            total_reviews=sum(reviews.values()),
            pending_reviews=reviews.get(ModerationStatus.PENDING, 0),
            newsletter_subscribers=await self.newsletter_repo.count_active(),
        )

    async def _revenue_overview(self, ranges: DateRanges) -> RevenueOverview:
        totals = await self.property_repo.get_revenue_totals(since=ranges.this_month.start)
        return self._format_revenue(totals)

    @staticmethod
    def _format_revenue(totals: Dict[str, Any]) -> RevenueOverview:
        return RevenueOverview(
            total_revenue=format_currency(totals["total_revenue"]),
            monthly_revenue=format_currency(totals["recent_revenue"]),
            average_property_price=format_currency(
                safe_ratio(totals["total_revenue"], totals["units_sold"], digits=2)
            ),
        )
