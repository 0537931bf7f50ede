"""
SQL INSERT statement builders.

Renders a record as a literal INSERT statement, e.g. for seed data or
export scripts. Values are formatted as SQL literals; bound parameters are
the execution layer's concern.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, List, Mapping, Optional
from uuid import uuid4

from pg_dialect.schema.core import (
    NUMERIC_TYPES,
    TEXTUAL_TYPES,
    EntitySchema,
    FieldDef,
    SemanticType,
)
from pg_dialect.utils.logging import get_logger

from ..core.identifier import to_storage_name
from ..core.types import storage_type_of
from ..intervals import Duration

logger = get_logger(__name__)

_EPOCH_DATE = date(1970, 1, 1)


def _parse_iso_value(text: str) -> Any:
    """Read an ISO-8601 datetime, date or time of day."""
    stripped = text.strip()
    for parse in (datetime.fromisoformat, time.fromisoformat):
        try:
            return parse(stripped)
        except ValueError:
            continue
    raise ValueError(f"Cannot parse {text!r} as an ISO-8601 date/time")


def quote_literal(value: Any) -> str:
    """
    Render a value as a single-quoted SQL string literal.

    Examples:
        >>> quote_literal("O'Brien")
        "'O''Brien'"
    """
    return "'" + str(value).replace("'", "''") + "'"


def format_timestamp(value: Any) -> str:
    """
    Format a date/time value as ``yyyy-MM-dd HH:mm:ss.SSS`` in UTC.

    Naive datetimes are taken to be UTC already; dates are taken at
    midnight, times of day on 1970-01-01. Strings are read as ISO-8601.

    Examples:
        >>> format_timestamp(datetime(2024, 3, 1, 12, 30, 5, 123456))
        '2024-03-01 12:30:05.123'
        >>> format_timestamp(time(12, 30))
        '1970-01-01 12:30:00.000'

    Raises:
        TypeError: If the value is not a date/time value
        ValueError: If a string is not an ISO-8601 date/time
    """
    if isinstance(value, str):
        value = _parse_iso_value(value)
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time())
    elif isinstance(value, time):
        moment = datetime.combine(_EPOCH_DATE, value)
    else:
        raise TypeError(f"Cannot format {type(value).__name__} as a timestamp")
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


def default_value_for(column: FieldDef, now: datetime) -> Any:
    """Value synthesized for a missing mandatory column, or None."""
    semantic_type = column.semantic_type
    if semantic_type is SemanticType.UUID:
        return uuid4()
    if semantic_type is SemanticType.DATETIME:
        return now
    if semantic_type in NUMERIC_TYPES:
        return 0
    if semantic_type is SemanticType.BOOLEAN:
        return False
    return None


def format_scalar(column: FieldDef, value: Any) -> str:
    """Render a single non-list value of ``column`` as a SQL literal."""
    if value is None:
        return "null"

    semantic_type = column.semantic_type
    if semantic_type is SemanticType.DATETIME:
        return f"timestamp '{format_timestamp(value)}'"
    if semantic_type in TEXTUAL_TYPES:
        if semantic_type is SemanticType.ENUMERATION and hasattr(value, "value"):
            value = value.value
        return quote_literal(value)
    if semantic_type is SemanticType.BOOLEAN:
        return "true" if value else "false"
    if semantic_type is SemanticType.DURATION:
        if isinstance(value, timedelta):
            value = Duration.from_timedelta(value)
        if isinstance(value, Duration):
            return value.to_literal()
        return f"interval {quote_literal(value)}"
    if semantic_type is SemanticType.BYTES:
        return f"'\\x{bytes(value).hex()}'::bytea"
    return str(value)


def format_value(column: FieldDef, value: Any) -> str:
    """Render the value of ``column`` as a SQL literal, arrays included."""
    if value is None or not column.is_list:
        return format_scalar(column, value)
    items = list(value)
    if not items:
        return "'{}'"
    elements = ", ".join(format_scalar(column, item) for item in items)
    return f"array[{elements}]::{storage_type_of(column.semantic_type)}[]"


class InsertBuilder:
    """
    Builder for literal INSERT statements of one entity.

    Example:
        >>> builder = InsertBuilder(compact=True)
        >>> builder.insert(person_schema, {"id": some_uuid, "name": "O'Brien"})
        "insert into person (id, name) values ('...', 'O''Brien');"
    """

    def __init__(
        self,
        compact: bool = False,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize the InsertBuilder.

        Args:
            compact: Render the statement on a single line
            clock: Source of the instant used for missing mandatory dates
        """
        self.compact = compact
        self.clock = clock

    def insert(self, schema: EntitySchema, record: Mapping[str, Any]) -> str:
        """
        Build an INSERT statement for a record.

        Missing mandatory values are filled in: a random uuid, the current
        instant (shared by every date column of the row), zero or false.

        Args:
            schema: Entity the record belongs to
            record: Values keyed by logical field name

        Returns:
            INSERT SQL statement
        """
        now = self.clock()
        columns: List[str] = []
        values: List[str] = []
        for column in schema.fields_in_table():
            if not column.is_simple:
                continue
            columns.append(to_storage_name(column.name))
            value = record.get(column.name)
            if value is None and column.mandatory:
                value = default_value_for(column, now)
            values.append(format_value(column, value))

        separator = ", " if self.compact else ",\n\t"
        opening = "" if self.compact else "\n\t"
        closing = "" if self.compact else "\n"
        sql = (
            f"insert into {schema.storage_name} ({opening}{separator.join(columns)}{closing})"
            f" values ({opening}{separator.join(values)}{closing});"
        )
        logger.debug("insert.generated", entity=schema.name, columns=len(columns))
        return sql


def build_insert_sql(
    schema: EntitySchema,
    record: Mapping[str, Any],
    compact: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """Build an INSERT statement; ``now`` pins the instant used for defaults."""
    if now is None:
        builder = InsertBuilder(compact)
    else:
        builder = InsertBuilder(compact, clock=lambda: now)
    return builder.insert(schema, record)


__all__ = [
    "InsertBuilder",
    "build_insert_sql",
    "quote_literal",
    "format_timestamp",
    "format_value",
    "default_value_for",
]
