from .normalizer import field_keys, normalize_field, normalize_fields
from .pattern import AliasList, AliasSpec, CompiledPattern, HeaderPattern, SingleAlias, compile_pattern, to_alias_spec
from .adapter import adapt_header
from .classifier import HeaderValidationResult, classify_header, find_uncovered_fields, validate_header

__all__ = [
    "normalize_field",
    "normalize_fields",
    "field_keys",
    "AliasList",
    "AliasSpec",
    "CompiledPattern",
    "HeaderPattern",
    "SingleAlias",
    "compile_pattern",
    "to_alias_spec",
    "adapt_header",
    "HeaderValidationResult",
    "classify_header",
    "find_uncovered_fields",
    "validate_header",
]
