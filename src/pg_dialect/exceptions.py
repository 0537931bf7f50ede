"""
Exceptions shared by the schema model and the SQL generators.

ConfigurationError is fatal: the entity description cannot be turned into
valid SQL.
"""

from typing import Optional


class DialectError(Exception):
    """Base exception for all pg_dialect errors."""

    pass


class ConfigurationError(DialectError):
    """
    Raised when an entity cannot be translated into SQL.

    Args:
        message: Error description
        entity: Name of the entity being translated (optional)
        field: Name of the offending field (optional)
    """

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.entity = entity
        self.field = field

        context_parts = []
        if entity:
            context_parts.append(f"entity='{entity}'")
        if field:
            context_parts.append(f"field='{field}'")

        if context_parts:
            full_message = f"{message} ({', '.join(context_parts)})"
        else:
            full_message = message

        super().__init__(full_message)


__all__ = ["DialectError", "ConfigurationError"]
