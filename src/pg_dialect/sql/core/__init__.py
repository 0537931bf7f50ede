"""Core SQL utilities package."""

from .identifier import index_name, sequence_name, to_storage_name
from .parameters import iter_parameter_tokens, parameter_cast, rewrite
from .types import granularity_type, storage_name_for_null, storage_type_of

__all__ = [
    "to_storage_name",
    "sequence_name",
    "index_name",
    "iter_parameter_tokens",
    "parameter_cast",
    "rewrite",
    "storage_type_of",
    "storage_name_for_null",
    "granularity_type",
]
