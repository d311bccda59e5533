"""
Account models.
Users are site visitors who comment and review; admins run the back office.
Credentials live with the identity provider, so neither model stores a password.
"""

from sqlalchemy import String, Text, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_dashboard.database import Base, enum_values
from email_validator import validate_email, EmailNotValidError
import enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_dashboard.models.review import Review
    from estate_dashboard.models.blog import Blog, Comment
    from estate_dashboard.models.newsletter import Broadcast


class AdminRole(str, enum.Enum):
    """Admin role enumeration for role-based access control."""
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


def normalize_email(email: str) -> str:
    """
    Validate email format and return its normalized form.

    Raises:
        ValueError: If email format is invalid
    """
    try:
        valid = validate_email(email, check_deliverability=False)
        return valid.normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email format: {str(e)}")


class User(Base):
    """Registered site user."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )

    profile_pic: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="user",
        passive_deletes=True,
        lazy="raise"
    )

    reviews: Mapped[List["Review"]] = relationship(
        "Review",
        back_populates="user",
        passive_deletes=True,
        lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Admin(Base):
    """Back office staff account."""

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    position: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    role: Mapped[AdminRole] = mapped_column(
        SQLEnum(AdminRole, name="admin_role", values_callable=enum_values),
        nullable=False,
        default=AdminRole.ADMIN,
        index=True
    )

    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    blogs: Mapped[List["Blog"]] = relationship("Blog", back_populates="author", lazy="raise")

    broadcasts: Mapped[List["Broadcast"]] = relationship("Broadcast", back_populates="sent_by", lazy="raise")

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN
