"""
PostgreSQL interval conversion.

psycopg2 returns ``interval`` columns as ``datetime.timedelta``, which
cannot represent calendar months or years. ``Duration`` keeps every
component of the interval, renders as ISO-8601 and can be registered as
the psycopg2 typecaster for intervals.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Any, Optional, Union

import psycopg2.extensions

INTERVAL_OID = 1186

_ISO_PATTERN = re.compile(
    r"^(?P<sign>[-+])?P"
    r"(?:(?P<years>[-+]?\d+(?:\.\d+)?)Y)?"
    r"(?:(?P<months>[-+]?\d+(?:\.\d+)?)M)?"
    r"(?:(?P<weeks>[-+]?\d+(?:\.\d+)?)W)?"
    r"(?:(?P<days>[-+]?\d+(?:\.\d+)?)D)?"
    r"(?:T"
    r"(?:(?P<hours>[-+]?\d+(?:\.\d+)?)H)?"
    r"(?:(?P<minutes>[-+]?\d+(?:\.\d+)?)M)?"
    r"(?:(?P<seconds>[-+]?\d+(?:\.\d+)?)S)?"
    r")?$"
)

# "1 year 2 mons -3 days", optionally followed by "[-]hh:mm:ss[.ffffff]"
_UNIT_PATTERN = re.compile(r"([-+]?\d+(?:\.\d+)?)\s*([a-z]+)")
_CLOCK_PATTERN = re.compile(r"([-+])?(\d+):(\d{1,2})(?::(\d{1,2}(?:\.\d+)?))?$")

_UNIT_NAMES = {
    "year": "years",
    "years": "years",
    "yr": "years",
    "yrs": "years",
    "mon": "months",
    "mons": "months",
    "month": "months",
    "months": "months",
    "week": "weeks",
    "weeks": "weeks",
    "day": "days",
    "days": "days",
    "hour": "hours",
    "hours": "hours",
    "hr": "hours",
    "hrs": "hours",
    "min": "minutes",
    "mins": "minutes",
    "minute": "minutes",
    "minutes": "minutes",
    "sec": "seconds",
    "secs": "seconds",
    "second": "seconds",
    "seconds": "seconds",
}


def _number(text: str) -> Union[int, Decimal]:
    value = Decimal(text)
    return int(value) if value == value.to_integral_value() else value


@dataclass(frozen=True)
class Duration:
    """All components of a PostgreSQL interval."""

    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: Union[int, Decimal] = 0

    @classmethod
    def from_timedelta(cls, value: timedelta) -> "Duration":
        """Split a timedelta into days and a normalized clock part."""
        negative = value < timedelta(0)
        remaining = -value if negative else value
        total_micros = remaining.seconds * 1_000_000 + remaining.microseconds
        hours, rest = divmod(total_micros, 3_600_000_000)
        minutes, micros = divmod(rest, 60_000_000)
        seconds = _number(str(Decimal(micros) / Decimal(1_000_000)))
        sign = -1 if negative else 1
        return cls(
            days=sign * remaining.days,
            hours=sign * hours,
            minutes=sign * minutes,
            seconds=sign * seconds,
        )

    def to_timedelta(self) -> timedelta:
        """
        Convert to a timedelta.

        Raises:
            ValueError: If the duration has year or month components
        """
        if self.years or self.months:
            raise ValueError(
                f"Duration {self} has calendar components and has no fixed length"
            )
        return timedelta(
            days=self.days,
            hours=self.hours,
            minutes=self.minutes,
            seconds=float(self.seconds),
        )

    def to_literal(self) -> str:
        """Render as a SQL interval literal."""
        return f"interval '{self}'"

    def __str__(self) -> str:
        date_part = "".join(
            f"{value}{unit}"
            for value, unit in ((self.years, "Y"), (self.months, "M"), (self.days, "D"))
            if value
        )
        time_part = "".join(
            f"{value}{unit}"
            for value, unit in ((self.hours, "H"), (self.minutes, "M"), (self.seconds, "S"))
            if value
        )
        if not date_part and not time_part:
            return "PT0S"
        return "P" + date_part + ("T" + time_part if time_part else "")


def _parse_iso(text: str) -> Optional[Duration]:
    match = _ISO_PATTERN.match(text)
    if match is None or text in ("P", "PT", "-P", "+P"):
        return None
    parts = {
        key: _number(value)
        for key, value in match.groupdict().items()
        if key != "sign" and value is not None
    }
    sign = -1 if match.group("sign") == "-" else 1
    weeks = parts.pop("weeks", 0)
    parts["days"] = parts.get("days", 0) + 7 * weeks
    return Duration(**{key: sign * value for key, value in parts.items()})


def parse_interval(text: str) -> Duration:
    """
    Parse PostgreSQL interval output.

    Accepts the ``postgres`` and ``postgres_verbose`` output styles as well
    as ISO-8601 durations.

    Examples:
        >>> parse_interval("1 year 2 mons 3 days 04:05:06.5")
        Duration(years=1, months=2, days=3, hours=4, minutes=5, seconds=Decimal('6.5'))
        >>> str(parse_interval("@ 2 days ago"))
        'P-2D'

    Raises:
        ValueError: If the text is not an interval
    """
    stripped = text.strip()
    iso = _parse_iso(stripped)
    if iso is not None:
        return iso

    remaining = stripped.lower()
    if remaining.startswith("@"):
        remaining = remaining[1:].strip()
    ago = remaining.endswith(" ago")
    if ago:
        remaining = remaining[: -len(" ago")].strip()

    components = {"years": 0, "months": 0, "weeks": 0, "days": 0, "hours": 0, "minutes": 0}
    seconds: Union[int, Decimal] = 0

    parsed_any = False
    words = remaining.split()
    clock = _CLOCK_PATTERN.match(words[-1]) if words else None
    if clock is not None:
        words.pop()
        parsed_any = True
        sign = -1 if clock.group(1) == "-" else 1
        components["hours"] = sign * int(clock.group(2))
        components["minutes"] = sign * int(clock.group(3))
        seconds = sign * _number(clock.group(4) or "0")
    remaining = " ".join(words)

    consumed = 0
    for match in _UNIT_PATTERN.finditer(remaining):
        if remaining[consumed:match.start()].strip():
            raise ValueError(f"Invalid interval: {text!r}")
        unit = _UNIT_NAMES.get(match.group(2))
        if unit is None:
            raise ValueError(f"Invalid interval unit {match.group(2)!r} in {text!r}")
        value = _number(match.group(1))
        if unit == "seconds":
            seconds += value
        else:
            components[unit] += int(value)
        consumed = match.end()
        parsed_any = True
    if remaining[consumed:].strip() or not parsed_any:
        raise ValueError(f"Invalid interval: {text!r}")

    sign = -1 if ago else 1
    return Duration(
        years=sign * components["years"],
        months=sign * components["months"],
        days=sign * (components["days"] + 7 * components["weeks"]),
        hours=sign * components["hours"],
        minutes=sign * components["minutes"],
        seconds=sign * seconds,
    )


def cast_interval(value: Optional[str], cursor: Any = None) -> Optional[Duration]:
    """psycopg2 typecaster: interval text to Duration."""
    if value is None:
        return None
    return parse_interval(value)


def cast_interval_string(value: Optional[str], cursor: Any = None) -> Optional[str]:
    """psycopg2 typecaster: interval text to its ISO-8601 form."""
    if value is None:
        return None
    return str(parse_interval(value))


DURATION = psycopg2.extensions.new_type((INTERVAL_OID,), "DURATION", cast_interval)
DURATION_STRING = psycopg2.extensions.new_type(
    (INTERVAL_OID,), "DURATION_STRING", cast_interval_string
)


def register_interval_caster(conn_or_curs: Any = None, as_string: bool = False) -> None:
    """
    Make psycopg2 return intervals as Duration (or ISO-8601 strings).

    Args:
        conn_or_curs: Connection or cursor to scope the caster to; None
            registers it globally
        as_string: Return ISO-8601 strings instead of Duration objects
    """
    caster = DURATION_STRING if as_string else DURATION
    if conn_or_curs is None:
        psycopg2.extensions.register_type(caster)
    else:
        psycopg2.extensions.register_type(caster, conn_or_curs)


__all__ = [
    "INTERVAL_OID",
    "Duration",
    "parse_interval",
    "cast_interval",
    "cast_interval_string",
    "register_interval_caster",
]
