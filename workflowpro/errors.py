from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError


class AllocationInvariantError(ValueError):
    """An allocation row was about to be written without any asset reference."""


def classify_integrity_error(exc: IntegrityError) -> str:
    """Name the constraint family behind an IntegrityError.

    SQLite and PostgreSQL word their messages differently, so match on the
    fragments both share.
    """
    message = str(exc.orig).lower()
    if "foreign key" in message:
        return "foreign_key"
    if "unique" in message or "duplicate key" in message:
        return "unique"
    if "not null" in message or "null value" in message:
        return "not_null"
    if "check" in message:
        return "check"
    return "integrity"


_VIOLATION_DETAILS = {
    "foreign_key": "Referenced record does not exist",
    "unique": "A record with this value already exists",
    "not_null": "A required field is missing",
    "check": "Record violates a table constraint",
    "integrity": "Record violates a table constraint",
}


class ConstraintViolation(HTTPException):
    """409 carrying the violated constraint family alongside the detail."""

    def __init__(self, violation: str, detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail or _VIOLATION_DETAILS.get(violation, _VIOLATION_DETAILS["integrity"]),
        )
        self.violation = violation

    @classmethod
    def from_integrity_error(cls, exc: IntegrityError, detail: str | None = None) -> "ConstraintViolation":
        return cls(classify_integrity_error(exc), detail)
