"""
Validation utilities for query parameters and form input.
Raises the API's ValidationError so failures surface as 400 responses.
"""

import re
import enum
from typing import Any, List, Optional, Type, TypeVar

from estate_dashboard.utils.exceptions import ValidationError

EnumType = TypeVar("EnumType", bound=enum.Enum)


class ValidationUtils:
    """
    Utility class for common validation operations.
    """

    PHONE_PATTERN = re.compile(r'^\+?\d{10,15}$')

    @staticmethod
    def validate_enum(value: Any, enum_cls: Type[EnumType], field_name: str) -> EnumType:
        """
        Resolve a raw value to an enum member by value.

        Raises:
            ValidationError: If value is not one of the enum's values
        """
        if isinstance(value, enum_cls):
            return value
        for member in enum_cls:
            if member.value == value:
                return member
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise ValidationError(f"Invalid {field_name}. Must be one of: {allowed}")

    @staticmethod
    def parse_enum_list(value: Optional[str], enum_cls: Type[EnumType], field_name: str) -> List[EnumType]:
        """Parse a comma-separated list of enum values, e.g. "House,Villa"."""
        if not value:
            return []
        return [
            ValidationUtils.validate_enum(item.strip(), enum_cls, field_name)
            for item in value.split(",")
            if item.strip()
        ]

    @staticmethod
    def parse_int_list(value: Optional[str], field_name: str) -> List[int]:
        """Parse a comma-separated list of integers, e.g. "2,3,4"."""
        if not value:
            return []
        try:
            return [int(item.strip()) for item in value.split(",") if item.strip()]
        except ValueError:
            raise ValidationError(f"{field_name} must be a comma-separated list of integers")

    @staticmethod
    def validate_phone_number(phone: Any, field_name: str = "phoneNumber") -> str:
        """
        Validate phone number format: optional leading +, 10 to 15 digits.
        Spaces, dashes and parentheses are stripped first.
        """
        if not phone:
            raise ValidationError(f"{field_name} is required")

        phone_str = str(phone).strip().replace(' ', '').replace('-', '').replace('(', '').replace(')', '')

        if not ValidationUtils.PHONE_PATTERN.match(phone_str):
            raise ValidationError(f"Invalid phone number format for {field_name}")

        return phone_str

    @staticmethod
    def validate_search_query(query: Optional[str]) -> str:
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        return query.strip()

    @staticmethod
    def validate_sort_parameters(
        sort_by: Optional[str],
        sort_order: Optional[str],
        allowed_fields: List[str]
    ) -> tuple:
        """
        Validate sorting parameters.

        Returns:
            Tuple of validated sort_by and sort_order

        Raises:
            ValidationError: If sort parameters are invalid
        """
        if sort_by and sort_by not in allowed_fields:
            raise ValidationError(f"Invalid sort field. Allowed fields: {', '.join(allowed_fields)}")

        validated_sort_by = sort_by or allowed_fields[0]

        if sort_order and sort_order.lower() not in ['asc', 'desc']:
            raise ValidationError("Sort order must be 'asc' or 'desc'")

        validated_sort_order = sort_order.lower() if sort_order else 'desc'

        return validated_sort_by, validated_sort_order
