"""
Maps engine errors to HTTP responses.

Only the exception's public message reaches the client; the internal message
is logged.
"""

import logging

from fastapi import HTTPException

from lead_scoring.exceptions import (
    AuthorizationError,
    LeadQualifierError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (AuthorizationError, 403),
    (PersistenceError, 503),
]


def to_http_exception(error: LeadQualifierError) -> HTTPException:
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            break
    else:
        status_code = 500

    logger.info(f"Request rejected ({status_code}): {error}")
    return HTTPException(status_code=status_code, detail=error.public_message)
