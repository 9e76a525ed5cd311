from __future__ import annotations

import re

from .errors import ConfigurationError

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
_BRACKET = re.compile(r'\[([^\]]*)\]')
_QUOTED = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*\"""")


def index_key(base_key: str, index: int) -> str:
    """Flat variable key for a sequence element, e.g. 'name' -> 'name0'."""
    return f"{base_key}{index}"


def field_key(base_key: str, field: str) -> str:
    """Flat variable key for a mapping field, e.g. 'name' -> 'name_field'."""
    return f"{base_key}_{field}"


def nested_index_key(base_key: str, index: int) -> str:
    """Flat variable key for an element of a nested sequence, e.g. 'name_tags' -> 'name_tags_0'."""
    return f"{base_key}_{index}"


def escape_path_segment(segment: str) -> str:
    """Escape a field name for use inside a bracketed, quoted JSON path segment.

    - Backslashes are escaped as '\\\\'.
    - Single quotes are escaped as "\\'".
    """
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace('\\', '\\\\').replace("'", "\\'")


def field_path(parent: str, field: str) -> str:
    """Append a field to a JSON path.

    Identifier-like names use dot notation ('$.a.b'); anything else uses
    bracket notation ("$.a['x.y']").
    """
    if not isinstance(field, str):
        field = str(field)
    if _IDENTIFIER.match(field):
        return f"{parent}.{field}"
    return f"{parent}['{escape_path_segment(field)}']"


def index_path(parent: str, index: int) -> str:
    return f"{parent}[{index}]"


def is_definite_path(expression: str) -> bool:
    """Whether a JSON path can select at most one node.

    Deep scans, wildcards, filters, unions and slices make a path indefinite.
    """
    if expression is None:
        return False
    if '..' in expression or '*' in expression:
        return False
    for inner in _BRACKET.findall(expression):
        # Commas inside quoted names are part of the name, not a union.
        unquoted = _QUOTED.sub("''", inner)
        if ',' in unquoted:
            return False
        if inner[:1] in ("'", '"'):
            continue
        if inner.startswith('?') or ':' in inner:
            return False
    return True


def split_string_part_index(expression: str) -> int:
    """Parse a '$.N' StringPart expression into its 1-based field index."""
    if expression is None:
        raise ConfigurationError("StringPart expression is empty")
    raw = expression.strip()
    if raw.startswith('$.'):
        raw = raw[2:]
    try:
        index = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"StringPart expression '{expression}' is not of the form $.N") from exc
    if index < 1:
        raise ConfigurationError(f"StringPart index must be a positive integer, got {index}")
    return index
