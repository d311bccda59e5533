"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and admin/user extraction.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.config import Settings
from estate_dashboard.database import get_db
from estate_dashboard.models.user import Admin, User
from estate_dashboard.repositories.user import AdminRepository, UserRepository
from estate_dashboard.services import (
    DashboardService,
    ListingService,
    ModerationService,
    ReviewService,
    SellService,
    AdminService,
    BlogService,
    NewsletterService,
)
from estate_dashboard.utils.auth import TokenPayload, verify_token, has_permission
from estate_dashboard.utils.exceptions import (
    UnauthorizedError,
    ForbiddenError,
    InsufficientPermissionsError
)
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


async def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


async def get_listing_service(db: AsyncSession = Depends(get_db)) -> ListingService:
    return ListingService(db)


async def get_moderation_service(db: AsyncSession = Depends(get_db)) -> ModerationService:
    return ModerationService(db)


async def get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


async def get_sell_service(db: AsyncSession = Depends(get_db)) -> SellService:
    return SellService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


async def get_blog_service(db: AsyncSession = Depends(get_db)) -> BlogService:
    return BlogService(db)


async def get_newsletter_service(db: AsyncSession = Depends(get_db)) -> NewsletterService:
    return NewsletterService(db)


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings)
) -> TokenPayload:
    """
    Verify the bearer token issued by Supabase.

    Raises:
        UnauthorizedError: If no token is provided
        TokenExpiredError: If token is expired
        InvalidTokenError: If token is invalid
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return verify_token(credentials.credentials, settings)


async def get_current_admin(
    payload: TokenPayload = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db)
) -> Admin:
    """
    Resolve the token subject to an admin account.

    Raises:
        ForbiddenError: If the subject is not an admin
    """
    admin = await AdminRepository(db).get_by_id(payload.subject)
    if admin is None:
        logger.warning(f"Token subject {payload.subject} is not an admin")
        raise ForbiddenError("Not an admin")
    return admin


async def get_current_user(
    payload: TokenPayload = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the token subject to a site user.

    Raises:
        UnauthorizedError: If no user matches the token subject
    """
    user = await UserRepository(db).get_by_id(payload.subject)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def require_permission(permission: str, action: str):
    """
    Create a dependency that requires the current admin's role to grant a permission.

    Args:
        permission: Permission name, e.g. "view_revenue"
        action: Human-readable action used in the 403 message

    Returns:
        Dependency function
    """
    async def permission_dependency(
        current_admin: Admin = Depends(get_current_admin)
    ) -> Admin:
        if not has_permission(current_admin.role, permission):
            raise InsufficientPermissionsError(action)
        return current_admin

    return permission_dependency
