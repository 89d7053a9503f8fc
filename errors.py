"""Error taxonomy of the booking API and translation of store failures."""

import logging
from typing import Optional

from database import ForeignKey, StoreFailure, Unique

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for outcomes reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Required input is missing or empty. Raised before touching the store."""

    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class ConflictError(BookingError):
    """A uniqueness or referential-integrity constraint was violated."""

    status_code = 409


class StorageError(BookingError):
    status_code = 500


def require(message: str, **fields) -> None:
    """Raise ValidationError if any field is absent or blank.

    Only None and blank strings count as missing, so an explicit False is
    accepted.
    """
    for value in fields.values():
        if value is None:
            raise ValidationError(message)
        if isinstance(value, str) and not value.strip():
            raise ValidationError(message)


def log_failure(operation: str, failure: StoreFailure) -> None:
    logger.error(
        "Store failure in %s: %s",
        operation,
        failure.message,
        extra={"operation": operation, "store_code": failure.code},
    )


def translate(
    failure: StoreFailure,
    operation: str,
    fallback: str,
    on_unique: Optional[str] = None,
    on_foreign_key: Optional[str] = None,
) -> BookingError:
    """Turn a store failure into the error the caller should see.

    The caller supplies the conflict messages because only it knows what a
    given constraint means for its operation (a dangling reference on insert,
    dependent rows on delete). A constraint with no message for this
    operation falls back to a StorageError.
    """
    log_failure(operation, failure)

    if isinstance(failure.failure, Unique) and on_unique:
        return ConflictError(on_unique)
    if isinstance(failure.failure, ForeignKey) and on_foreign_key:
        return ConflictError(on_foreign_key)
    return StorageError(fallback)
