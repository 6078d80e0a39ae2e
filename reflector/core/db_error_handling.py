"""
Database error handling for API endpoints.

Centralizes the common pattern of:
1. Rolling back the database session on error
2. Logging the error with context
3. Raising an appropriate HTTPException

Usage:
    from reflector.core.db_error_handling import handle_db_error

    with handle_db_error(db, "record activity"):
        result = record_activity(store, user_id, kind, payload)
        return result
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


logger = logging.getLogger(__name__)


@contextmanager
def handle_db_error(
    db: Session,
    operation_name: str,
    *,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    detail_template: Optional[str] = None,
    log_level: int = logging.ERROR,
) -> Generator[None, None, None]:
    """Context manager for handling database errors consistently.

    Only SQLAlchemy errors are converted. HTTPExceptions and domain errors
    (e.g. InvalidResponseError) propagate unchanged so their own handlers
    produce the response.

    Args:
        db: The SQLAlchemy database session to rollback on error.
        operation_name: Human-readable name of the operation for error messages
            and logging (e.g., "recalculate profile", "check badges").
        status_code: HTTP status code to use in the raised HTTPException.
            Defaults to 500 Internal Server Error.
        detail_template: Optional custom template for the error detail message.
            If provided, should contain {operation_name}.
            Defaults to "Failed to {operation_name}.".
        log_level: Logging level for error messages. Defaults to logging.ERROR.

    Raises:
        HTTPException: On SQLAlchemyError, with the session rolled back.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()

        # Database internals stay in the log
        if detail_template:
            detail = detail_template.format(operation_name=operation_name)
        else:
            detail = f"Failed to {operation_name}."

        logger.log(
            log_level,
            f"Database error during {operation_name}: {e}",
            exc_info=True,
        )

        raise HTTPException(status_code=status_code, detail=detail)
