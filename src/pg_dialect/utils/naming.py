"""
Logical to storage name conversion.

Logical names (camelCase as used in entity definitions) are stored as
lower_underscore identifiers. Both the schema model (table names) and the
SQL generators (column, sequence and index names) rely on this mapping.
"""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_storage_name(name: str) -> str:
    """
    Convert a logical identifier to its storage column/table name.

    Examples:
        >>> to_storage_name("createdOn")
        'created_on'
        >>> to_storage_name("httpURLConnection")
        'http_url_connection'
        >>> to_storage_name("already_lower")
        'already_lower'
    """
    converted = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    converted = _WORD_BOUNDARY.sub(r"\1_\2", converted)
    return converted.lower()


__all__ = ["to_storage_name"]
