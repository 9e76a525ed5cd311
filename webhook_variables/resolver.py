"""Resolve configured variables out of a webhook payload.

`resolve_all` is the entry point: it runs every rule independently through
`resolve` and merges the results, later rules winning on key collisions.
Per-rule failures never escape; they are logged and the rule contributes
nothing (or its default value).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from .accessors import find_json_path, parse_xml_document, read_json_path, select_xml_nodes
from .errors import ConfigurationError, PathNotFoundError, ResolutionError
from .flattening import flatten_json, flatten_json_matches, flatten_xml_nodes, string_of
from .paths import is_definite_path, split_string_part_index
from .rules import ExpressionType, GenericVariable

logger = logging.getLogger(__name__)

CHAT_PARAM_MARKER = "param:"
CHAT_MENTION_CLOSE = "</at>"


@dataclass
class RuleResolution:
    """Outcome of resolving one rule: the values found, or why there are none."""

    values: Dict[str, str] = field(default_factory=dict)
    error: Optional[ResolutionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def evaluate_json(payload: str, rule: GenericVariable) -> Dict[str, str]:
    data = json.loads(payload)
    expression = rule.expression
    try:
        matches = find_json_path(data, expression)
        if is_definite_path(expression):
            if not matches:
                raise PathNotFoundError(f"No results for path: {expression}")
            path, value = matches[0]
            flattened = flatten_json(rule.variable_name, rule.regexp_filter, value, path)
        else:
            flattened = flatten_json_matches(rule.variable_name, rule.regexp_filter, matches)
    except PathNotFoundError:
        return {}

    if expression.strip() == "$":
        flattened[rule.variable_name] = payload
    return flattened


def evaluate_xml(payload: str, rule: GenericVariable) -> Dict[str, str]:
    tree = parse_xml_document(payload)
    nodes = select_xml_nodes(tree, rule.expression)
    return flatten_xml_nodes(rule.variable_name, nodes)


def extract_field(content: str, separator: str, index: int) -> str:
    """Pick the `index`-th (1-based) separated field after the first comma."""
    if "," not in content:
        raise ResolutionError("No ',' found in text content")
    if not separator:
        raise ResolutionError("Text separator must not be empty")
    fields = content.split(",", 1)[1].split(separator)
    if index < 1 or index > len(fields):
        raise ResolutionError(f"Field {index} out of range, text has {len(fields)} field(s)")
    return fields[index - 1]


def _strip_chat_framing(content: str) -> str:
    start = content.rfind(CHAT_PARAM_MARKER) + len(CHAT_PARAM_MARKER)
    end = content.find("\n", start)
    if end < 0:
        raise ResolutionError(f"No line break after '{CHAT_PARAM_MARKER}' in text content")
    return content[start:end].replace(CHAT_MENTION_CLOSE, "")


def evaluate_string_part(
    payload: str,
    rule: GenericVariable,
    text_separator: str,
    from_chat_source: bool,
) -> Dict[str, str]:
    # from_chat_source is accepted for parity with the other evaluators; the
    # chat framing is detected from the text itself.
    try:
        text = read_json_path(json.loads(payload), "$.text")
    except PathNotFoundError:
        return {}
    if text is None:
        raise ResolutionError("Field 'text' is null")

    index = split_string_part_index(rule.expression)
    content = string_of(text)
    if CHAT_PARAM_MARKER in content:
        content = _strip_chat_framing(content)

    return {rule.variable_name: extract_field(content, text_separator, index)}


def _dispatch(
    payload: str,
    rule: GenericVariable,
    text_separator: str,
    from_chat_source: bool,
) -> Dict[str, str]:
    expression_type = rule.expression_type
    if expression_type is ExpressionType.JSONPATH:
        return evaluate_json(payload, rule)
    elif expression_type is ExpressionType.XPATH:
        return evaluate_xml(payload, rule)
    elif expression_type is ExpressionType.STRINGPART:
        return evaluate_string_part(payload, rule, text_separator, from_chat_source)
    raise ConfigurationError(f"Not recognizing {expression_type}")


def resolve_rule(
    payload: str,
    rule: Optional[GenericVariable],
    text_separator: str = ",",
    from_chat_source: bool = False,
) -> RuleResolution:
    """Resolve one rule, capturing any failure in the returned result."""
    if not payload or rule is None or not rule.expression:
        return RuleResolution()
    try:
        return RuleResolution(values=_dispatch(payload, rule, text_separator, from_chat_source))
    except ResolutionError as exc:
        return RuleResolution(error=exc)
    except Exception as exc:
        error = ResolutionError(f"{type(exc).__name__}: {exc}")
        error.__cause__ = exc
        return RuleResolution(error=error)


def resolve(
    payload: str,
    rule: Optional[GenericVariable],
    text_separator: str = ",",
    from_chat_source: bool = False,
) -> Dict[str, str]:
    """Resolve one rule to a flat mapping; failures are logged and yield {}."""
    resolution = resolve_rule(payload, rule, text_separator, from_chat_source)
    if resolution.ok:
        return resolution.values

    cause = resolution.error.__cause__ or resolution.error
    logger.info(
        "Unable to resolve %s with %s %s in\n%s",
        rule.variable_name,
        getattr(rule.expression_type, "value", rule.expression_type),
        rule.expression,
        payload,
        exc_info=(type(cause), cause, cause.__traceback__),
    )
    return {}


def _not_resolved(values: Dict[str, str], rule: GenericVariable) -> bool:
    return not values or values.get(rule.variable_name) == ""


def resolve_all(
    rules: Optional[Iterable[GenericVariable]],
    payload: str,
    text_separator: str = ",",
    from_chat_source: bool = False,
) -> Dict[str, str]:
    """Resolve every rule against the payload and merge the results in order."""
    resolved: Dict[str, str] = {}
    if not rules:
        return resolved

    count = 0
    for rule in rules:
        count += 1
        if rule is None:
            continue
        values = resolve(payload, rule, text_separator, from_chat_source)
        if _not_resolved(values, rule) and rule.default_value is not None:
            values[rule.variable_name] = rule.default_value
        resolved.update(values)

    logger.debug("Resolved %d variable(s) from %d rule(s)", len(resolved), count)
    return resolved
