"""
Database error classification.

ClassifiedDatabaseError wraps a runtime database error whose meaning was
recognized, so callers can treat e.g. a unique violation as a validation
failure rather than a transport failure. Errors that are not recognized are
never wrapped; callers re-raise them unchanged. The configuration errors
raised by the generators are re-exported from pg_dialect.exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional

from psycopg2 import errorcodes

from pg_dialect.exceptions import ConfigurationError, DialectError
from pg_dialect.utils.logging import get_logger

logger = get_logger(__name__)

UNIQUE_VIOLATION_MESSAGE = "duplicate key value violates unique constraint"
UNKNOWN_FIELD = "unknown field"


class ErrorKind(str, Enum):
    """Semantic kinds of database errors."""

    UNIQUE_VIOLATION = "unique_violation"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ErrorClassification:
    """Semantic kind of a database error plus the offending name, if any."""

    kind: ErrorKind
    detail: Optional[str] = None

    @property
    def recognized(self) -> bool:
        return self.kind is not ErrorKind.UNRECOGNIZED


class ClassifiedDatabaseError(DialectError):
    """A database error reduced to a semantic kind."""

    def __init__(
        self,
        classification: ErrorClassification,
        original_error: BaseException,
        message: str,
    ):
        self.classification = classification
        self.original_error = original_error
        super().__init__(message)

    @property
    def kind(self) -> ErrorKind:
        return self.classification.kind

    @property
    def detail(self) -> Optional[str]:
        return self.classification.detail

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to structured dict for logging."""
        return {
            "error_type": "ClassifiedDatabaseError",
            "kind": self.kind.value,
            "detail": self.detail,
            "message": str(self),
            "original_error_type": type(self.original_error).__name__,
            "original_error_message": str(self.original_error),
        }


def _next_cause(error: BaseException) -> Optional[BaseException]:
    # SQLAlchemy's DBAPIError keeps the driver error in .orig
    orig = getattr(error, "orig", None)
    if isinstance(orig, BaseException):
        return orig
    if error.__cause__ is not None:
        return error.__cause__
    if error.__context__ is not None and not error.__suppress_context__:
        return error.__context__
    return None


def iter_error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` followed by each nested cause, outermost first."""
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = _next_cause(current)


def root_cause(error: BaseException) -> BaseException:
    """Return the deepest error of a chain."""
    deepest = error
    for deepest in iter_error_chain(error):
        pass
    return deepest


def extract_quoted(message: str) -> Optional[str]:
    """Return the first double-quoted substring of a message.

    Examples:
        >>> extract_quoted('violates unique constraint "uq_email"')
        'uq_email'
        >>> extract_quoted("no quotes") is None
        True
    """
    first = message.find('"')
    if first < 0:
        return None
    second = message.find('"', first + 1)
    if second < 0:
        return None
    return message[first + 1:second]


def classify(error: BaseException) -> ErrorClassification:
    """
    Classify a database error by its deepest cause.

    Args:
        error: Any caught exception, possibly wrapping driver errors

    Returns:
        UNIQUE_VIOLATION with the constraint name as detail, or UNRECOGNIZED
    """
    cause = root_cause(error)
    message = str(cause)
    pgcode = getattr(cause, "pgcode", None)

    if UNIQUE_VIOLATION_MESSAGE in message or pgcode == errorcodes.UNIQUE_VIOLATION:
        detail = extract_quoted(message) or UNKNOWN_FIELD
        return ErrorClassification(ErrorKind.UNIQUE_VIOLATION, detail)

    return ErrorClassification(ErrorKind.UNRECOGNIZED)


def wrap_exception(error: BaseException) -> Optional[ClassifiedDatabaseError]:
    """
    Wrap a recognized database error.

    Returns:
        ClassifiedDatabaseError for recognized errors, None otherwise so the
        caller can re-raise the original error
    """
    classification = classify(error)
    if not classification.recognized:
        return None

    if classification.detail == UNKNOWN_FIELD:
        target = UNKNOWN_FIELD
    else:
        target = f"'{classification.detail}'"
    wrapped = ClassifiedDatabaseError(
        classification,
        error,
        f"Unique constraint violation for {target}",
    )
    logger.info("errors.classified", **wrapped.to_dict())
    return wrapped


__all__ = [
    "DialectError",
    "ConfigurationError",
    "ErrorKind",
    "ErrorClassification",
    "ClassifiedDatabaseError",
    "iter_error_chain",
    "root_cause",
    "extract_quoted",
    "classify",
    "wrap_exception",
]
