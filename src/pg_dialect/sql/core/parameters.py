"""
Named parameter rewriting for PostgreSQL.

Query templates refer to input values with ``:name`` or ``$name`` tokens.
The driver binds these without type information, which PostgreSQL rejects
or misreads in a few cases (null arrays in ``= any(...)``, uuid compared to
text, dates compared to timestamps). The rewriter appends an explicit cast
to each token whose input field needs one:

    >>> from pg_dialect.schema import EntitySchema, FieldDef, SemanticType
    >>> schema = EntitySchema("input", [FieldDef("id", SemanticType.UUID)])
    >>> rewrite("select * from person where id = :id", schema)
    'select * from person where id = :id::uuid'

Tokens that are already cast (followed by ``::``) are never touched, so the
rewrite can be applied any number of times.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from pg_dialect.schema.core import EntitySchema, FieldDef, SemanticType
from pg_dialect.utils.logging import get_logger

from .types import granularity_type, storage_type_of

logger = get_logger(__name__)

SIGILS = ":$"
CAST_OPERATOR = "::"

# Binding a list of integers with an explicit integer[] cast fails with
# "cannot cast type integer to integer[]", so integer lists stay uncast.
_LIST_CAST_EXCLUSIONS = frozenset({SemanticType.INTEGER})

# "x in (:values)" with a single bound list becomes "x = any(:values)",
# "x not in (:values)" becomes "x <> all(:values)"
_IN_SINGLE_PARAMETER = re.compile(
    r"(\s+)(not\s+)?in\s*\(\s*([:$][\w$]+(?:::\w+(?:\[\])?)?)\s*\)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParameterToken:
    """A parameter placeholder found in a query template."""

    start: int
    end: int
    sigil: str
    name: str


def _is_identifier_start(char: str) -> bool:
    return char.isalnum() or char == "_"


def _is_identifier_char(char: str) -> bool:
    return _is_identifier_start(char) or char == "$"


def iter_parameter_tokens(template: str) -> Iterator[ParameterToken]:
    """
    Scan a template left to right for parameter tokens.

    A token is a sigil (``:`` or ``$``) that is not preceded by another
    sigil, followed by the longest run of identifier characters (letters,
    digits, ``_`` and ``$``, starting with a letter, digit or ``_``), and
    not followed by ``::``.

    Examples:
        >>> [t.name for t in iter_parameter_tokens("a = :a and b = :b::int")]
        ['a']
    """
    length = len(template)
    i = 0
    while i < length:
        char = template[i]
        if char not in SIGILS or (i > 0 and template[i - 1] in SIGILS):
            i += 1
            continue

        end = i + 1
        if end >= length or not _is_identifier_start(template[end]):
            i += 1
            continue
        while end < length and _is_identifier_char(template[end]):
            end += 1

        if not template.startswith(CAST_OPERATOR, end):
            yield ParameterToken(
                start=i, end=end, sigil=char, name=template[i + 1:end]
            )
        i = end


def parameter_cast(field: Optional[FieldDef]) -> Optional[str]:
    """
    Return the cast to append to a token bound to ``field``.

    Scalars only get a cast when the driver's untyped binding is known to
    be ambiguous; list fields always get one so that a null array can be
    compared with ``= any(...)``.

    Examples:
        >>> parameter_cast(FieldDef("tags", SemanticType.STRING, is_list=True))
        '::text[]'
        >>> parameter_cast(FieldDef("name", SemanticType.STRING)) is None
        True
    """
    if field is None or not field.is_simple:
        return None

    semantic_type = field.semantic_type
    if semantic_type is SemanticType.UUID:
        postgres_type = "uuid"
    elif semantic_type is SemanticType.DATETIME:
        postgres_type = granularity_type(field)
    elif semantic_type is SemanticType.DURATION:
        postgres_type = "interval"
    elif semantic_type is SemanticType.BOOLEAN:
        postgres_type = "boolean"
    elif field.is_list and semantic_type not in _LIST_CAST_EXCLUSIONS:
        postgres_type = storage_type_of(semantic_type)
    else:
        postgres_type = None

    if postgres_type is None:
        return None
    return CAST_OPERATOR + postgres_type + ("[]" if field.is_list else "")


def _membership_replacement(match: re.Match) -> str:
    operator = "<> all" if match.group(2) else "= any"
    return f"{match.group(1)}{operator}({match.group(3)})"


def rewrite(template: str, input_schema: Optional[EntitySchema]) -> str:
    """
    Annotate the parameter tokens of a query template with casts.

    Args:
        template: SQL text with ``:name``/``$name`` tokens
        input_schema: Entity describing the bound input values

    Returns:
        The rewritten SQL. Tokens that do not resolve to a field are left
        as they are; this function never raises on odd input.
    """
    parts = []
    last = 0
    for token in iter_parameter_tokens(template):
        parts.append(template[last:token.end])
        field = input_schema.get(token.name) if input_schema is not None else None
        cast = parameter_cast(field)
        if cast:
            parts.append(cast)
        last = token.end
    parts.append(template[last:])

    rewritten = _IN_SINGLE_PARAMETER.sub(_membership_replacement, "".join(parts))
    if rewritten != template:
        logger.debug("parameters.rewritten", original=template, rewritten=rewritten)
    return rewritten


__all__ = [
    "ParameterToken",
    "iter_parameter_tokens",
    "parameter_cast",
    "rewrite",
]
