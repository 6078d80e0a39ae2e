"""
Standardized error response messages and builders.

This module provides consistent error messages and HTTPException builders
for the API. User-facing messages live here; technical details go to logs.

Error Message Format Guidelines:
- Use sentence case (capitalize first letter only)
- End with a period for complete sentences
- Include relevant IDs in parentheses when helpful: "(ID: abc)"

Usage:
    from reflector.core.error_responses import ErrorMessages, raise_not_found

    if profile is None:
        raise_not_found(ErrorMessages.PROFILE_NOT_FOUND)

    raise_bad_request(ErrorMessages.unknown_activity_kind("meditation"))
"""

from typing import NoReturn

from fastapi import HTTPException, status


class ErrorMessages:
    """Centralized error message constants and templates.

    Naming Convention:
    - Constants: SCREAMING_SNAKE_CASE for static messages
    - Methods: snake_case for templates that accept parameters
    """

    # ==========================================================================
    # Not Found Errors (404)
    # ==========================================================================
    PROFILE_NOT_FOUND = "No autonomy profile yet. Please complete an assessment first."
    NO_RESPONSES = "No assessment responses recorded for this user."

    # ==========================================================================
    # Validation Errors (400 / 422)
    # ==========================================================================
    INVALID_ACTIVITY_PAYLOAD = "Activity payload is invalid."

    @staticmethod
    def unknown_activity_kind(kind: str) -> str:
        return f"Unknown activity kind '{kind}'."

    @staticmethod
    def assessment_not_found(assessment_id: str) -> str:
        return f"No responses recorded for assessment (ID: {assessment_id})."


# ==============================================================================
# HTTPException Builder Functions
# ==============================================================================


def raise_bad_request(detail: str) -> NoReturn:
    """Raise a 400 Bad Request exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 400 Bad Request
    """
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def raise_not_found(detail: str) -> NoReturn:
    """Raise a 404 Not Found exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 404 Not Found
    """
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )
