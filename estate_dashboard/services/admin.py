"""
Admin service for back office staff accounts and the user directory.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from estate_dashboard.repositories.user import UserRepository, AdminRepository
from estate_dashboard.repositories.blog import CommentRepository
from estate_dashboard.repositories.review import ReviewRepository
from estate_dashboard.repositories.newsletter import NewsletterRepository
from estate_dashboard.models.user import Admin
from estate_dashboard.schemas.common import page_meta, page_offset
from estate_dashboard.schemas.user import (
    UserResponse,
    UserPage,
    UserDetails,
    AdminResponse,
    AdminPage,
    AdminUpdate,
)
from estate_dashboard.schemas.blog import CommentResponse
from estate_dashboard.schemas.review import ReviewResponse
from estate_dashboard.schemas.newsletter import NewsletterSubscription
from estate_dashboard.utils.exceptions import (
    NotFoundError,
    ValidationError,
    BadRequestError,
    InsufficientPermissionsError,
)
from estate_dashboard.utils.validators import ValidationUtils
import re
import uuid
import logging

logger = logging.getLogger(__name__)

USER_SORT_FIELDS = ["created_at", "username", "email", "full_name"]
_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


class AdminService:
    """
    Staff management and user lookups.
    Admins may view and edit their own profile; super admins may manage everyone.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.admin_repo = AdminRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.comment_repo = CommentRepository(db_session)
        self.review_repo = ReviewRepository(db_session)
        self.newsletter_repo = NewsletterRepository(db_session)

    # Staff

    async def list_admins(self, page: int = 1, limit: int = 20) -> AdminPage:
        admins, total = await self.admin_repo.paginate(
            skip=page_offset(page, limit), limit=limit, order_by="username"
        )
        return AdminPage(
            **page_meta(total, page, limit),
            admins=[AdminResponse.model_validate(admin) for admin in admins]
        )

    async def get_admin(self, admin_id: uuid.UUID, current_admin: Admin) -> AdminResponse:
        """
        Raises:
            InsufficientPermissionsError: If viewing another admin without being a super admin
            NotFoundError: If admin doesn't exist
        """
        self._check_self_or_super(admin_id, current_admin, "view this admin")

        admin = await self.admin_repo.get_by_id(admin_id)
        if admin is None:
            raise NotFoundError("Admin", str(admin_id))
        return AdminResponse.model_validate(admin)

    async def update_admin(self, admin_id: uuid.UUID, admin_data: AdminUpdate, current_admin: Admin) -> AdminResponse:
        """
        Update an admin profile.

        Raises:
            InsufficientPermissionsError: If editing another admin, or changing a role, without being a super admin
            NotFoundError: If admin doesn't exist
            ValidationError: If the email or username is taken by another admin
        """
        self._check_self_or_super(admin_id, current_admin, "update this admin")

        update_data = admin_data.model_dump(exclude_none=True)
        if "role" in update_data and not current_admin.is_super_admin:
            raise InsufficientPermissionsError("change admin roles")

        if not await self.admin_repo.exists(admin_id):
            raise NotFoundError("Admin", str(admin_id))

        conflict = await self.admin_repo.find_conflict(
            email=update_data.get("email"),
            username=update_data.get("username"),
            exclude_id=admin_id
        )
        if conflict is not None:
            field = "email" if conflict.email == update_data.get("email") else "username"
            raise ValidationError(
                f"An admin with this {field} already exists",
                field_errors=[{"field": field, "message": "Already in use"}]
            )

        updated = await self.admin_repo.update(admin_id, update_data)
        logger.info(f"Admin {admin_id} updated by {current_admin.email} ({', '.join(update_data)})")
        return AdminResponse.model_validate(updated)

    async def delete_admin(self, admin_id: uuid.UUID, current_admin: Admin) -> None:
        """
        Raises:
            BadRequestError: If an admin tries to delete their own account
            NotFoundError: If admin doesn't exist
        """
        if admin_id == current_admin.id:
            raise BadRequestError("You cannot delete your own account")

        deleted = await self.admin_repo.delete(admin_id)
        if not deleted:
            raise NotFoundError("Admin", str(admin_id))
        logger.info(f"Admin {admin_id} deleted by {current_admin.email}")

    # User directory

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> UserPage:
        """
        Search and sort the user directory.
        sortBy accepts camelCase or snake_case column names.
        """
        if sort_by:
            sort_by = _CAMEL_BOUNDARY.sub('_', sort_by).lower()
        sort_by, sort_order = ValidationUtils.validate_sort_parameters(sort_by, sort_order, USER_SORT_FIELDS)

        users, total = await self.user_repo.search_users(
            search_term=search.strip() if search else None,
            skip=page_offset(page, limit),
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order
        )
        return UserPage(
            **page_meta(total, page, limit),
            users=[UserResponse.model_validate(user) for user in users]
        )

    async def get_user_details(self, user_id: uuid.UUID) -> UserDetails:
        """
        Raises:
            NotFoundError: If user doesn't exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))

        comments = await self.comment_repo.get_for_user(user_id)
        reviews = await self.review_repo.get_for_user(user_id)
        subscription = await self.newsletter_repo.get_by_email(user.email)

        return UserDetails(
            user=UserResponse.model_validate(user),
            comments=[CommentResponse.model_validate(comment) for comment in comments],
            reviews=[ReviewResponse.model_validate(review) for review in reviews],
            newsletter=NewsletterSubscription.model_validate(subscription) if subscription else None
        )

    @staticmethod
    def _check_self_or_super(admin_id: uuid.UUID, current_admin: Admin, action: str) -> None:
        if admin_id != current_admin.id and not current_admin.is_super_admin:
            raise InsufficientPermissionsError(action)
