from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError


class ExpressionType(str, Enum):
    JSONPATH = "JSONPath"
    XPATH = "XPath"
    STRINGPART = "StringPart"

    @classmethod
    def parse(cls, value: Any) -> "ExpressionType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted or member.name.lower() == wanted:
                    return member
        raise ConfigurationError(f"Not recognizing expression type {value!r}")


@dataclass(frozen=True)
class GenericVariable:
    """A configured extraction rule: where to find one variable in a payload."""

    variable_name: str
    expression_type: ExpressionType
    expression: str
    regexp_filter: Optional[str] = None
    default_value: Optional[str] = None

    def __post_init__(self):
        if not self.variable_name or not str(self.variable_name).strip():
            raise ConfigurationError("Variable name must not be empty")
        object.__setattr__(self, 'expression_type', ExpressionType.parse(self.expression_type))


# Accepted spellings per field, first one is canonical.
_FIELD_ALIASES = {
    'variable_name': ('variableName', 'variable_name', 'name'),
    'expression_type': ('expressionType', 'expression_type', 'type'),
    'expression': ('expression', 'key'),
    'regexp_filter': ('regexpFilter', 'regexp_filter'),
    'default_value': ('defaultValue', 'default_value'),
}


def _lookup(entry: Dict[str, Any], field: str):
    for alias in _FIELD_ALIASES[field]:
        if alias in entry:
            return entry[alias]
    return None


def rule_from_mapping(entry: Any) -> GenericVariable:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Rule definition must be an object, got {type(entry).__name__}")

    expression_type = _lookup(entry, 'expression_type')
    if expression_type is None:
        expression_type = ExpressionType.JSONPATH

    expression = _lookup(entry, 'expression')
    regexp_filter = _lookup(entry, 'regexp_filter')
    default_value = _lookup(entry, 'default_value')

    return GenericVariable(
        variable_name=str(_lookup(entry, 'variable_name') or '').strip(),
        expression_type=expression_type,
        expression='' if expression is None else str(expression),
        regexp_filter=str(regexp_filter) if regexp_filter else None,
        default_value=None if default_value is None else str(default_value),
    )


def load_rules(data: Any) -> List[GenericVariable]:
    """Build rules from decoded configuration.

    Accepts a list of rule objects or an object holding them under
    'genericVariables'. Invalid entries raise ConfigurationError.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get('genericVariables', data.get('generic_variables', []))
    if not isinstance(data, list):
        raise ConfigurationError("Rules must be a list of rule objects.")
    return [rule_from_mapping(entry) for entry in data]
