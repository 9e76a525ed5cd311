from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import gradio as gr

from .errors import ConfigurationError
from .io_utils import read_json_content, read_text_content
from .resolver import resolve_all
from .rules import ExpressionType, load_rules
from .schema_utils import extract_json_paths, extract_xml_paths, suggest_rules

RULE_TABLE_HEADERS = ["Variable Name", "Expression Type", "Expression", "Regexp Filter", "Default Value"]
_RULE_KEYS = ["variableName", "expressionType", "expression", "regexpFilter", "defaultValue"]


def produced_by(variable_name: str, key: str) -> bool:
    """Whether `key` is `variable_name` itself or one of its derived keys ('name0', 'name_field')."""
    if key == variable_name:
        return True
    if not key.startswith(variable_name):
        return False
    following = key[len(variable_name)]
    return following == '_' or following.isdigit()


def detect_expression_type(payload: str) -> ExpressionType:
    if payload and payload.lstrip().startswith('<'):
        return ExpressionType.XPATH
    return ExpressionType.JSONPATH


def table_rows_from_rules(rules: List[Dict[str, Any]]) -> List[List[str]]:
    rows = []
    for rule in rules:
        rows.append(["" if rule.get(key) is None else str(rule.get(key)) for key in _RULE_KEYS])
    return rows


def _cell_text(cell) -> str:
    # Empty dataframe cells come through as None or NaN.
    if cell is None or cell != cell:
        return ""
    return str(cell).strip()


def rules_from_table(rules_table) -> List[Dict[str, Any]]:
    """Turn rule table rows into rule definitions, skipping blank rows."""
    if rules_table is None:
        return []
    try:
        rows = rules_table.values.tolist()
    except AttributeError:
        rows = list(rules_table)

    definitions = []
    for row in rows:
        cells = [_cell_text(cell) for cell in list(row)[:len(_RULE_KEYS)]]
        cells += [""] * (len(_RULE_KEYS) - len(cells))
        if not any(cells):
            continue
        entry: Dict[str, Any] = dict(zip(_RULE_KEYS, cells))
        # A blank cell means "not configured".
        if entry["defaultValue"] == "":
            entry["defaultValue"] = None
        definitions.append(entry)
    return definitions


def load_payload_file(file_obj):
    if file_obj is None:
        return gr.update(), "No file uploaded."
    try:
        payload = read_text_content(file_obj)
    except (OSError, UnicodeDecodeError) as e:
        return gr.update(), f"Error reading payload: {str(e)}"
    kind = detect_expression_type(payload)
    return payload, f"Loaded {len(payload)} characters ({'XML' if kind is ExpressionType.XPATH else 'JSON'} payload)."


def load_rules_file(file_obj):
    if file_obj is None:
        return gr.update(), "No file uploaded."
    try:
        rules = load_rules(read_json_content(file_obj))
    except (OSError, ValueError) as e:
        return gr.update(), f"Error loading rules: {str(e)}"

    definitions = [
        {
            "variableName": rule.variable_name,
            "expressionType": rule.expression_type.value,
            "expression": rule.expression,
            "regexpFilter": rule.regexp_filter,
            "defaultValue": rule.default_value,
        }
        for rule in rules
    ]
    return table_rows_from_rules(definitions), f"Loaded {len(definitions)} rule(s)."


def explore_payload(payload: str):
    """List candidate expressions for a payload: (paths, expression type)."""
    kind = detect_expression_type(payload)
    if kind is ExpressionType.XPATH:
        return extract_xml_paths(payload), kind
    return extract_json_paths(json.loads(payload)), kind


def explore_payload_handler(payload: str):
    if not payload or not payload.strip():
        return [], "No payload loaded."
    try:
        paths, kind = explore_payload(payload)
    except Exception as e:
        return [], f"Error parsing payload: {str(e)}"
    return paths, f"Found {len(paths)} {kind.value} expression(s)."


def suggest_rules_handler(payload: str, selected_paths: Optional[List[str]] = None):
    if not payload or not payload.strip():
        return gr.update(), "No payload loaded."
    try:
        paths, kind = explore_payload(payload)
    except Exception as e:
        return gr.update(), f"Error parsing payload: {str(e)}"
    if selected_paths:
        paths = [p for p in paths if p in selected_paths]
    return table_rows_from_rules(suggest_rules(paths, kind)), f"Suggested {len(paths)} rule(s)."


def resolve_handler(payload: str, rules_table, text_separator: str, from_chat_source: bool):
    if not payload:
        return None, "No payload loaded."

    try:
        rules = load_rules(rules_from_table(rules_table))
    except ConfigurationError as e:
        return None, f"Invalid rule: {str(e)}"

    if not rules:
        return None, "No rules configured."

    resolved = resolve_all(rules, payload, text_separator or ",", bool(from_chat_source))
    missing = [
        rule.variable_name
        for rule in rules
        if not any(produced_by(rule.variable_name, key) for key in resolved)
    ]
    summary = f"Resolved {len(resolved)} variable(s) from {len(rules)} rule(s)."
    if missing:
        summary += f" Not resolved: {', '.join(missing)}."
    return resolved, summary
