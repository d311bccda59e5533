"""
Supabase access token verification and role permissions.
Tokens are issued by Supabase; this module only decodes and checks them.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from estate_dashboard.config import Settings
from estate_dashboard.models.user import AdminRole
from estate_dashboard.utils.exceptions import InvalidTokenError, TokenExpiredError
import uuid


ROLE_PERMISSIONS: Dict[AdminRole, frozenset] = {
    AdminRole.ADMIN: frozenset({
        "view_dashboard",
        "moderate_content",
        "manage_content",
        "manage_sell_submissions",
    }),
    AdminRole.SUPER_ADMIN: frozenset({
        "view_dashboard",
        "moderate_content",
        "manage_content",
        "manage_sell_submissions",
        "manage_admins",
        "view_revenue",
    }),
}


def has_permission(role: AdminRole, permission: str) -> bool:
    """Check whether an admin role grants a permission."""
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


class TokenPayload:
    """Claims this service relies on from a Supabase access token."""

    def __init__(self, subject: uuid.UUID, email: Optional[str], role: Optional[str], exp: Optional[datetime]):
        self.subject = subject
        self.email = email
        self.role = role
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        try:
            subject = uuid.UUID(str(data["sub"]))
        except (KeyError, ValueError):
            raise InvalidTokenError("Token subject is missing or malformed")

        exp = data.get("exp")
        return cls(
            subject=subject,
            email=data.get("email"),
            role=data.get("role"),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
        )


def verify_token(token: str, settings: Settings) -> TokenPayload:
    """
    Verify and decode a Supabase JWT.

    Raises:
        TokenExpiredError: If the token has expired
        InvalidTokenError: If the signature, audience or claims are invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.supabase_jwt_audience
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    return TokenPayload.from_dict(payload)
