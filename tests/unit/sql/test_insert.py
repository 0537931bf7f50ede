"""
Unit tests for INSERT statement generation.
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

import pytest

from pg_dialect.schema import EntitySchema, FieldDef, SemanticType
from pg_dialect.sql.intervals import Duration
from pg_dialect.sql.operations.insert import (
    InsertBuilder,
    build_insert_sql,
    format_timestamp,
    format_value,
    quote_literal,
)

UUID_LITERAL = re.compile(r"'[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[0-9a-f]{4}-[0-9a-f]{12}'")
NOW = datetime(2024, 3, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)


class Color(Enum):
    RED = "red"


def _values(sql: str) -> str:
    return sql.split(" values (", 1)[1].rstrip(");")


class TestBuildInsertSql:
    """Tests for build_insert_sql."""

    def test_compact_statement(self, person_schema):
        record = {
            "id": UUID("1b4e28ba-2fa1-11d2-883f-0016d3cca427"),
            "firstName": "O'Brien",
            "email": "ob@example.com",
            "active": True,
            "age": 42,
            "created": datetime(2024, 3, 1, 12, 30, 5, 123456),
        }
        assert build_insert_sql(person_schema, record, compact=True) == (
            "insert into people (id, first_name, email, active, age, created) values ("
            "'1b4e28ba-2fa1-11d2-883f-0016d3cca427', 'O''Brien', 'ob@example.com', "
            "true, 42, timestamp '2024-03-01 12:30:05.123');"
        )

    def test_multiline_statement(self):
        schema = EntitySchema(
            "tag",
            [FieldDef("id", SemanticType.LONG), FieldDef("label", SemanticType.STRING)],
        )
        assert build_insert_sql(schema, {"id": 7, "label": "x"}) == (
            "insert into tag (\n\tid,\n\tlabel\n) values (\n\t7,\n\t'x'\n);"
        )

    def test_missing_mandatory_values_are_synthesized(self, person_schema):
        sql = build_insert_sql(person_schema, {}, compact=True, now=NOW)
        values = _values(sql).split(", ")
        assert UUID_LITERAL.fullmatch(values[0])
        assert values[1:] == [
            "null",
            "null",
            "false",
            "null",
            "timestamp '2024-03-01 12:30:05.123'",
        ]

    def test_uuid_primary_key_is_never_null(self):
        schema = EntitySchema("token", [FieldDef("id", SemanticType.UUID)])
        sql = build_insert_sql(schema, {}, compact=True)
        assert "null" not in sql
        assert UUID_LITERAL.search(sql)

    def test_generated_uuids_differ(self):
        schema = EntitySchema("token", [FieldDef("id", SemanticType.UUID)])
        assert build_insert_sql(schema, {}) != build_insert_sql(schema, {})

    def test_dates_share_one_instant(self):
        schema = EntitySchema(
            "audit",
            [
                FieldDef("id", SemanticType.LONG),
                FieldDef("created", SemanticType.DATETIME),
                FieldDef("modified", SemanticType.DATETIME),
            ],
        )
        ticks = iter(
            [
                datetime(2024, 1, 1, tzinfo=timezone.utc),
                datetime(2025, 1, 1, tzinfo=timezone.utc),
            ]
        )
        sql = InsertBuilder(compact=True, clock=lambda: next(ticks)).insert(schema, {})
        assert _values(sql) == (
            "0, timestamp '2024-01-01 00:00:00.000', timestamp '2024-01-01 00:00:00.000'"
        )

    def test_string_escaping(self):
        schema = EntitySchema(
            "person",
            [FieldDef("id", SemanticType.LONG), FieldDef("name", SemanticType.STRING)],
        )
        sql = build_insert_sql(schema, {"id": 1, "name": "O'Brien"}, compact=True)
        assert "'O''Brien'" in sql

    def test_nested_records_are_skipped(self):
        schema = EntitySchema(
            "person",
            [
                FieldDef("id", SemanticType.LONG),
                FieldDef("address", SemanticType.COMPLEX),
            ],
        )
        sql = build_insert_sql(schema, {"id": 1, "address": {"city": "x"}}, compact=True)
        assert sql == "insert into person (id) values (1);"

    def test_time_of_day_column(self):
        schema = EntitySchema(
            "alarm",
            [
                FieldDef("id", SemanticType.INTEGER),
                FieldDef("ringsAt", SemanticType.DATETIME, format="HH:mm"),
            ],
        )
        sql = build_insert_sql(schema, {"id": 1, "ringsAt": time(12, 30)}, compact=True)
        assert sql == (
            "insert into alarm (id, rings_at) values "
            "(1, timestamp '1970-01-01 12:30:00.000');"
        )

    def test_numeric_default(self):
        schema = EntitySchema(
            "stock",
            [FieldDef("id", SemanticType.LONG), FieldDef("price", SemanticType.DECIMAL)],
        )
        assert _values(build_insert_sql(schema, {}, compact=True)) == "0, 0"


class TestFormatValue:
    """Tests for literal formatting."""

    @pytest.mark.parametrize(
        "field,value,expected",
        [
            (FieldDef("a", SemanticType.STRING), None, "null"),
            (FieldDef("a", SemanticType.URI), "http://x/?q='1'", "'http://x/?q=''1'''"),
            (FieldDef("a", SemanticType.ENUMERATION), Color.RED, "'red'"),
            (FieldDef("a", SemanticType.BOOLEAN), False, "false"),
            (FieldDef("a", SemanticType.DECIMAL), Decimal("1.50"), "1.50"),
            (FieldDef("a", SemanticType.LONG), 12, "12"),
            (FieldDef("a", SemanticType.BYTES), b"\x01\xff", "'\\x01ff'::bytea"),
            (FieldDef("a", SemanticType.DURATION), timedelta(hours=2), "interval 'PT2H'"),
            (FieldDef("a", SemanticType.DURATION), Duration(months=1), "interval 'P1M'"),
            (
                FieldDef("a", SemanticType.STRING, is_list=True),
                ["x", "y'z"],
                "array['x', 'y''z']::text[]",
            ),
            (FieldDef("a", SemanticType.LONG, is_list=True), [], "'{}'"),
            (FieldDef("a", SemanticType.LONG, is_list=True), None, "null"),
        ],
    )
    def test_literals(self, field, value, expected):
        assert format_value(field, value) == expected

    def test_quote_literal(self):
        assert quote_literal("it's") == "'it''s'"


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_naive_datetime_is_utc(self):
        assert format_timestamp(datetime(2024, 3, 1, 1, 2, 3, 4000)) == "2024-03-01 01:02:03.004"

    def test_aware_datetime_is_converted(self):
        moment = datetime(2024, 3, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "2024-03-01 00:00:00.000"

    def test_date_is_midnight(self):
        assert format_timestamp(date(2024, 3, 1)) == "2024-03-01 00:00:00.000"

    def test_time_of_day_is_on_epoch_date(self):
        assert format_timestamp(time(12, 30, 5, 250000)) == "1970-01-01 12:30:05.250"

    def test_aware_time_is_converted(self):
        moment = time(14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(moment) == "1970-01-01 12:00:00.000"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2024-03-01", "2024-03-01 00:00:00.000"),
            ("2024-03-01T01:02:03.004", "2024-03-01 01:02:03.004"),
            ("2024-03-01T02:00:00+02:00", "2024-03-01 00:00:00.000"),
            ("12:30", "1970-01-01 12:30:00.000"),
        ],
    )
    def test_iso_strings(self, text, expected):
        assert format_timestamp(text) == expected

    def test_rejects_unparseable_string(self):
        with pytest.raises(ValueError):
            format_timestamp("next tuesday")

    def test_rejects_other_values(self):
        with pytest.raises(TypeError):
            format_timestamp(20240301)
