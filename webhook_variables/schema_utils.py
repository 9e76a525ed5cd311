from __future__ import annotations

import re
from typing import Any, Dict, List, Set

from .accessors import parse_xml_document
from .paths import field_path, index_path
from .rules import ExpressionType


def extract_json_paths(data: Any, parent_path: str = '$') -> List[str]:
    """Recursively collect the JSON path of every scalar leaf, sorted."""
    paths: Set[str] = set()

    def walk(value: Any, path: str):
        if isinstance(value, dict):
            for k, v in value.items():
                walk(v, field_path(path, k))
        elif isinstance(value, list):
            for i, item in enumerate(value):
                walk(item, index_path(path, i))
        else:
            paths.add(path)

    walk(data, parent_path)
    return sorted(paths)


def extract_xml_paths(payload: str) -> List[str]:
    """Find absolute element and attribute paths in an XML payload.

    Repeated siblings collapse to one path, so '/a/b' selects all of them.
    """
    tree = parse_xml_document(payload)
    paths: Set[str] = set()

    def walk(element, parent: str):
        if not isinstance(element.tag, str):
            return
        path = f"{parent}/{element.xpath('name()')}"
        paths.add(path)
        for attribute in element.attrib:
            name = attribute.split('}', 1)[-1]
            paths.add(f"{path}/@{name}")
        for child in element:
            walk(child, path)

    walk(tree.getroot(), '')
    return sorted(paths)


def default_variable_name(path: str) -> str:
    """Derive a variable name from the last segment of a JSON path or XPath."""
    segments = [s for s in re.split(r"[.\[\]/@'$]+", path or '') if s and not s.isdigit()]
    if not segments:
        return 'payload'
    return re.sub(r'\W+', '_', segments[-1]).strip('_') or 'payload'


def suggest_rules(paths: List[str], expression_type: ExpressionType) -> List[Dict[str, str]]:
    """One rule definition per path, named after the path's last segment."""
    rules: List[Dict[str, str]] = []
    for path in paths:
        rules.append({
            'variableName': default_variable_name(path),
            'expressionType': ExpressionType.parse(expression_type).value,
            'expression': path,
            'regexpFilter': '',
            'defaultValue': '',
        })
    return rules
