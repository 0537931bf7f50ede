"""
Unit tests for database error classification.
"""

import pytest
from psycopg2 import errorcodes
from sqlalchemy.exc import IntegrityError

from pg_dialect.sql.errors import (
    ClassifiedDatabaseError,
    ConfigurationError,
    ErrorKind,
    classify,
    extract_quoted,
    iter_error_chain,
    root_cause,
    wrap_exception,
)

DUPLICATE = 'duplicate key value violates unique constraint "uq_email"'


class FakeDriverError(Exception):
    """Driver error carrying a SQLSTATE like psycopg2's."""

    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


def _chained(inner: BaseException) -> BaseException:
    try:
        try:
            raise inner
        except Exception as exc:
            raise RuntimeError("could not execute statement") from exc
    except RuntimeError as outer:
        return outer


class TestClassify:
    """Tests for classify."""

    def test_chained_unique_violation(self):
        classification = classify(_chained(Exception(DUPLICATE)))
        assert classification.kind is ErrorKind.UNIQUE_VIOLATION
        assert classification.detail == "uq_email"
        assert classification.recognized

    def test_sqlalchemy_wrapper(self):
        error = IntegrityError("insert into person ...", {}, Exception(DUPLICATE))
        assert classify(error).detail == "uq_email"

    def test_sqlstate_without_message(self):
        error = FakeDriverError("constraint failed", pgcode=errorcodes.UNIQUE_VIOLATION)
        classification = classify(error)
        assert classification.kind is ErrorKind.UNIQUE_VIOLATION
        assert classification.detail == "unknown field"

    def test_implicit_context_is_followed(self):
        try:
            try:
                raise Exception(DUPLICATE)
            except Exception:
                raise RuntimeError("rollback failed")
        except RuntimeError as error:
            assert classify(error).detail == "uq_email"

    def test_unrecognized(self):
        classification = classify(_chained(ValueError("connection refused")))
        assert classification.kind is ErrorKind.UNRECOGNIZED
        assert classification.detail is None
        assert not classification.recognized

    def test_outer_message_is_not_inspected(self):
        """Only the deepest cause decides."""
        error = _chained(ValueError("timeout"))
        error.args = (DUPLICATE,)
        assert classify(error).kind is ErrorKind.UNRECOGNIZED


class TestErrorChain:
    """Tests for chain traversal."""

    def test_outermost_first(self):
        inner = Exception(DUPLICATE)
        outer = _chained(inner)
        assert list(iter_error_chain(outer)) == [outer, inner]
        assert root_cause(outer) is inner

    def test_single_error(self):
        error = ValueError("x")
        assert root_cause(error) is error

    def test_cycle_terminates(self):
        first = ValueError("first")
        second = ValueError("second")
        first.__cause__ = second
        second.__cause__ = first
        assert len(list(iter_error_chain(first))) == 2


class TestExtractQuoted:
    """Tests for extract_quoted."""

    @pytest.mark.parametrize(
        "message,expected",
        [
            (DUPLICATE, "uq_email"),
            ('a "b" c "d"', "b"),
            ('unterminated "quote', None),
            ("no quotes", None),
        ],
    )
    def test_extract(self, message, expected):
        assert extract_quoted(message) == expected


class TestWrapException:
    """Tests for wrap_exception."""

    def test_wraps_unique_violation(self):
        original = _chained(Exception(DUPLICATE))
        wrapped = wrap_exception(original)
        assert isinstance(wrapped, ClassifiedDatabaseError)
        assert wrapped.kind is ErrorKind.UNIQUE_VIOLATION
        assert wrapped.detail == "uq_email"
        assert wrapped.original_error is original
        assert str(wrapped) == "Unique constraint violation for 'uq_email'"

    def test_unknown_field_message(self):
        wrapped = wrap_exception(Exception("duplicate key value violates unique constraint"))
        assert str(wrapped) == "Unique constraint violation for unknown field"

    def test_unrecognized_is_not_wrapped(self):
        assert wrap_exception(ValueError("deadlock detected")) is None

    def test_to_dict(self):
        wrapped = wrap_exception(Exception(DUPLICATE))
        data = wrapped.to_dict()
        assert data["kind"] == "unique_violation"
        assert data["detail"] == "uq_email"
        assert data["original_error_type"] == "Exception"


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_message_with_context(self):
        error = ConfigurationError("No storage type", entity="person", field="payload")
        assert str(error) == "No storage type (entity='person', field='payload')"

    def test_message_without_context(self):
        assert str(ConfigurationError("broken")) == "broken"

    def test_shared_with_schema_model(self):
        from pg_dialect import exceptions

        assert ConfigurationError is exceptions.ConfigurationError
